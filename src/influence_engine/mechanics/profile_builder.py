"""Profile assembly: pure functions, no I/O."""
from __future__ import annotations

import math

from influence_engine.config import ProfilingSettings
from influence_engine.mechanics import metrics
from influence_engine.models.profile import BehavioralProfile

# Largest float below 1; the curve rounds to 1.0 past a few hundred points.
MAX_CONFIDENCE = math.nextafter(1.0, 0.0)


def compute_confidence(data_points: int, scale: float = 10.0) -> float:
    """Saturating evidence curve: 0 at no data, ~0.63 at `scale` points, -> 1.

    Capped at MAX_CONFIDENCE so the result stays below 1; very large
    histories all saturate at the cap.
    """
    if data_points <= 0:
        return 0.0
    return min(1 - math.exp(-data_points / scale), MAX_CONFIDENCE)


def build_profile(
    uid: str,
    actions: list[dict],
    prior: BehavioralProfile | None = None,
    settings: ProfilingSettings | None = None,
) -> BehavioralProfile:
    """Run every extractor over one action snapshot and assemble the profile.

    `prior` is the currently stored profile; only the susceptibility
    extractor reads it.
    """
    settings = settings or ProfilingSettings()
    return BehavioralProfile(
        uid=uid,
        risk_tolerance=metrics.risk_tolerance(
            actions,
            starting_resources=settings.starting_resources,
            penalty_threshold=settings.resource_penalty_threshold,
            penalty=settings.resource_penalty,
        ),
        decision_speed=metrics.decision_speed(actions),
        resource_efficiency=metrics.resource_efficiency(actions),
        strategic_score=metrics.strategic_score(actions),
        engagement_level=metrics.engagement_level(actions),
        emotional_responsiveness=metrics.emotional_responsiveness(actions),
        skill_progression=metrics.skill_progression(actions),
        influence_susceptibility=metrics.influence_susceptibility(actions, prior),
        confidence=compute_confidence(len(actions), settings.confidence_scale),
        data_points_analyzed=len(actions),
    )
