"""Effectiveness learning and influence analytics: pure functions, no I/O."""
from __future__ import annotations

from influence_engine.models.influence import (
    InfluenceAnalytics,
    InfluenceEvent,
    PlayerResponse,
)

RECENT_EVENT_WINDOW = 10
MIN_EVENTS_FOR_TUNING = 3


def response_target(response: PlayerResponse | str) -> float:
    """EMA target for an observed response: 1.0 when accepted, else 0.0."""
    return 1.0 if PlayerResponse(response) is PlayerResponse.ACCEPTED else 0.0


def ema_update(weight: float, target: float, learning_rate: float = 0.1) -> float:
    """Move `weight` a fixed fraction of the way toward `target`."""
    return weight + learning_rate * (target - weight)


def susceptibility_trend(susceptibility: float | None) -> str:
    if susceptibility is None:
        return "stable"
    if susceptibility > 0.6:
        return "increasing"
    if susceptibility < 0.4:
        return "decreasing"
    return "stable"


def summarize(
    events: list[InfluenceEvent], susceptibility: float | None = None,
) -> InfluenceAnalytics:
    """Aggregate a user's influence events into acceptance analytics."""
    total = len(events)
    accepted = sum(1 for e in events if e.player_response is PlayerResponse.ACCEPTED)
    by_type: dict[str, int] = {}
    for event in events:
        by_type[event.mechanism] = by_type.get(event.mechanism, 0) + 1
    return InfluenceAnalytics(
        total_influences=total,
        accepted_influences=accepted,
        effectiveness_score=accepted / total if total else 0.0,
        influence_types=by_type,
        susceptibility_trend=susceptibility_trend(susceptibility),
    )


def recommended_strength(recent_events: list[InfluenceEvent]) -> float:
    """Back off when influence is working too well, push when it is not."""
    events = recent_events[:RECENT_EVENT_WINDOW]
    if len(events) < MIN_EVENTS_FOR_TUNING:
        return 0.5
    acceptance = sum(
        1 for e in events if e.player_response is PlayerResponse.ACCEPTED
    ) / len(events)
    avg_effectiveness = sum(e.effectiveness_score for e in events) / len(events)
    if acceptance > 0.8 and avg_effectiveness > 0.7:
        return 0.3
    if acceptance < 0.3:
        return 0.7
    return 0.5
