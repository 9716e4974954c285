from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Mechanism(str, Enum):
    FRAMING = "framing"
    ANCHORING = "anchoring"
    SCARCITY = "scarcity"
    SOCIAL_PROOF = "social_proof"
    LOSS_AVERSION = "loss_aversion"


class PlayerResponse(str, Enum):
    ACCEPTED = "accepted"
    RESISTED = "resisted"
    NEUTRAL = "neutral"


class InfluenceEvent(BaseModel):
    """A recorded intervention and how the player reacted to it."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    uid: str
    mechanism: str
    strength: float = Field(ge=0, le=1)
    context: str = ""
    player_response: PlayerResponse = PlayerResponse.NEUTRAL
    effectiveness_score: float = Field(default=0.0, ge=0, le=1)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("mechanism")
    @classmethod
    def _known_mechanism(cls, value: str) -> str:
        return Mechanism(value).value


class InfluenceOutcome(BaseModel):
    """Result of executing an intervention against a profile."""

    mechanism: str
    strength: float = 0.5
    player_response: PlayerResponse = PlayerResponse.NEUTRAL
    effectiveness: float = 0.0
    modified: bool = False


class Strategy(BaseModel):
    mechanism: str
    strength: float = 0.0
    message: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)
    reason: str = ""


class InfluenceAnalytics(BaseModel):
    total_influences: int = 0
    accepted_influences: int = 0
    effectiveness_score: float = 0.0
    influence_types: dict[str, int] = Field(default_factory=dict)
    susceptibility_trend: str = "stable"
