from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

NEUTRAL_SCORE = 0.5

SCORE_FIELDS: tuple[str, ...] = (
    "risk_tolerance",
    "decision_speed",
    "resource_efficiency",
    "strategic_score",
    "engagement_level",
    "emotional_responsiveness",
    "influence_susceptibility",
    "skill_progression",
)


class BehavioralProfile(BaseModel):
    """Per-user vector of normalized play-style scores."""

    model_config = ConfigDict(from_attributes=True)

    uid: str
    risk_tolerance: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    decision_speed: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    resource_efficiency: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    strategic_score: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    engagement_level: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    emotional_responsiveness: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    influence_susceptibility: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    skill_progression: float = Field(default=NEUTRAL_SCORE, ge=0, le=1)
    confidence: float = Field(default=0.0, ge=0, le=1)
    data_points_analyzed: int = Field(default=0, ge=0)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def scores(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in SCORE_FIELDS}
