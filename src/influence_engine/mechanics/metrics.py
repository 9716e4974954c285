"""Metric extractors: turn an action history into normalized scores.

Pure functions, no I/O. Every extractor takes the user's actions newest
first (as returned by the action log) and returns a float in [0, 1].
When the subset of actions an extractor needs is empty the score is the
neutral 0.5. Actions whose detail cannot be parsed are skipped and
contribute no evidence.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Iterator, TypeVar

from influence_engine.errors import EmptyEvidence, MalformedActionDetail
from influence_engine.models.action import (
    ActionType,
    DecisionTimingDetail,
    EmotionalResponseDetail,
    InfluenceEventDetail,
    ResourceManagementDetail,
    StrategicChoiceDetail,
    ThreatResponseDetail,
    parse_detail,
)
from influence_engine.models.profile import NEUTRAL_SCORE, BehavioralProfile

logger = logging.getLogger(__name__)

DEFAULT_STARTING_RESOURCES: dict[str, int] = {"gold": 10, "wood": 10, "food": 15, "stone": 5}

# Session length (minutes) the engagement frequency is normalized against.
ASSUMED_SESSION_MINUTES = 30

SKILL_WINDOW = 20
SKILL_MIN_SAMPLES = 10

SUCCESS_RATE_TYPES = frozenset({
    ActionType.STRATEGIC_CHOICE.value,
    ActionType.BUILD_SUCCESS.value,
    ActionType.THREAT_RESPONSE.value,
})

_ACCEPTED_RESPONSES = frozenset({"accepted", "complied"})

T = TypeVar("T")


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def neutral_on_empty(func: Callable[..., float]) -> Callable[..., float]:
    """Clamp an extractor's result and map EmptyEvidence to the neutral score."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> float:
        try:
            return clamp(func(*args, **kwargs))
        except EmptyEvidence:
            return NEUTRAL_SCORE

    return wrapper


def _require(items: list[T], what: str) -> list[T]:
    if not items:
        raise EmptyEvidence(what)
    return items


def iter_details(actions: list[dict], action_type: ActionType) -> Iterator[Any]:
    """Yield the parsed details of one action type, skipping malformed ones."""
    for action in actions:
        if action.get("action_type") != action_type.value:
            continue
        try:
            detail = parse_detail(action_type.value, action.get("detail"))
        except MalformedActionDetail as exc:
            logger.warning("Skipping action %s: %s", action.get("id", "?"), exc)
            continue
        if detail is not None:
            yield detail


def is_successful(action: dict) -> bool | None:
    """Whether a success-rate action succeeded; None if it has no usable detail."""
    action_type = action.get("action_type")
    if action_type == ActionType.BUILD_SUCCESS.value:
        return True
    try:
        detail = parse_detail(action_type, action.get("detail"))
    except MalformedActionDetail:
        return None
    if isinstance(detail, StrategicChoiceDetail):
        return _marks_success(detail)
    if isinstance(detail, ThreatResponseDetail):
        return detail.paid_off
    return None


def _marks_success(detail: StrategicChoiceDetail) -> bool:
    text = f"{detail.choice_type} {detail.choice}".lower()
    return "success" in text or "victory" in text


def success_rate(actions: list[dict]) -> float:
    """Fraction of strategic/build/threat actions that succeeded, 0.5 if none."""
    outcomes: list[bool] = []
    for action in actions:
        if action.get("action_type") not in SUCCESS_RATE_TYPES:
            continue
        outcome = is_successful(action)
        if outcome is not None:
            outcomes.append(outcome)
    if not outcomes:
        return NEUTRAL_SCORE
    return sum(outcomes) / len(outcomes)


def current_resources(
    actions: list[dict], starting: dict[str, int] | None = None,
) -> dict[str, int]:
    """Replay resource actions oldest first; the latest total per resource wins.

    Only resources present in `starting` are tracked; other resource names
    are ignored.
    """
    resources = dict(starting if starting is not None else DEFAULT_STARTING_RESOURCES)
    history: list[ResourceManagementDetail] = list(
        iter_details(actions, ActionType.RESOURCE_MANAGEMENT)
    )
    for detail in reversed(history):
        name = detail.resource_type.lower()
        if name in resources:
            resources[name] = detail.current_total
    return resources


@neutral_on_empty
def risk_tolerance(
    actions: list[dict],
    starting_resources: dict[str, int] | None = None,
    penalty_threshold: int = 20,
    penalty: float = 0.1,
) -> float:
    """Share of threats the player paid off, less a penalty when well stocked."""
    threats: list[ThreatResponseDetail] = _require(
        list(iter_details(actions, ActionType.THREAT_RESPONSE)), "threat responses",
    )
    paid_off = sum(1 for t in threats if t.paid_off)
    total = sum(current_resources(actions, starting_resources).values())
    resource_penalty = penalty if total > penalty_threshold else 0.0
    return paid_off / len(threats) - resource_penalty


@neutral_on_empty
def decision_speed(actions: list[dict]) -> float:
    timings: list[DecisionTimingDetail] = _require(
        list(iter_details(actions, ActionType.DECISION_TIMING)), "decision timings",
    )
    avg_time = sum(t.time_taken for t in timings) / len(timings)
    if avg_time < 2:
        return 0.7  # impulsive
    if avg_time < 5:
        return 1.0
    if avg_time < 10:
        return 0.6
    return 0.3  # indecisive


@neutral_on_empty
def resource_efficiency(actions: list[dict]) -> float:
    gained = spent = 0
    for detail in iter_details(actions, ActionType.RESOURCE_MANAGEMENT):
        kind = detail.action.lower()
        if kind == "found":
            gained += detail.amount
        elif kind == "spent":
            spent += detail.amount
    if gained == 0:
        raise EmptyEvidence("gained resources")
    return gained / (gained + spent)


@neutral_on_empty
def strategic_score(actions: list[dict]) -> float:
    choices: list[StrategicChoiceDetail] = _require(
        list(iter_details(actions, ActionType.STRATEGIC_CHOICE)), "strategic choices",
    )
    successful = sum(1 for c in choices if _marks_success(c))
    choice_kinds = len({c.choice_type for c in choices})
    diversity_bonus = min(choice_kinds / 5, 0.2)
    return successful / len(choices) + diversity_bonus


@neutral_on_empty
def engagement_level(actions: list[dict]) -> float:
    _require(actions, "actions")
    frequency = len(actions) / ASSUMED_SESSION_MINUTES
    variety = len({a.get("action_type") for a in actions})
    metric_count = sum(
        1 for a in actions if a.get("action_type") == ActionType.ENGAGEMENT_METRIC.value
    )
    return (
        min(frequency / 10, 0.5)
        + min(variety / 10, 0.3)
        + min(metric_count / 5, 0.2)
    )


@neutral_on_empty
def emotional_responsiveness(actions: list[dict]) -> float:
    responses: list[EmotionalResponseDetail] = _require(
        list(iter_details(actions, ActionType.EMOTIONAL_RESPONSE)), "emotional responses",
    )
    positive = sum(
        1 for r in responses
        if "positive" in r.emotion_type.lower()
        or "victory" in f"{r.trigger} {r.emotion_type}".lower()
    )
    avg_speed = sum(r.response_speed for r in responses) / len(responses)
    speed_bonus = 0.1 if avg_speed < 5 else 0.0
    return positive / len(responses) + speed_bonus


@neutral_on_empty
def skill_progression(actions: list[dict]) -> float:
    """Improvement of the newest window's success rate over the oldest window's."""
    recent = actions[:SKILL_WINDOW]
    older = actions[-SKILL_WINDOW:]
    if len(recent) < SKILL_MIN_SAMPLES or len(older) < SKILL_MIN_SAMPLES:
        raise EmptyEvidence("skill samples")
    return success_rate(recent) - success_rate(older) + 0.5


@neutral_on_empty
def influence_susceptibility(
    actions: list[dict], profile: BehavioralProfile | None = None,
) -> float:
    """Acceptance rate of past influences, nudged by the stored personality scores."""
    events: list[InfluenceEventDetail] = _require(
        list(iter_details(actions, ActionType.INFLUENCE_EVENT)), "influence events",
    )
    accepted = sum(1 for e in events if e.player_response.lower() in _ACCEPTED_RESPONSES)
    modifier = (
        (profile.emotional_responsiveness + profile.risk_tolerance) / 4
        if profile is not None else 0.0
    )
    return accepted / len(events) + modifier
