"""Intervention executor: strength and predicted response for a mechanism.

Pure functions, no I/O. Each mechanism has a base strength that grows
linearly with the player's susceptibility, scaled by the mechanism's
learned effectiveness weight, and a heuristic that compares profile
scores against fixed thresholds to predict whether the player accepts.
"""
from __future__ import annotations

import logging
from typing import Callable

from influence_engine.errors import UnknownMechanism
from influence_engine.mechanics.metrics import clamp
from influence_engine.models.influence import InfluenceOutcome, Mechanism, PlayerResponse
from influence_engine.models.profile import BehavioralProfile

logger = logging.getLogger(__name__)

# mechanism -> (intercept, slope) of strength as a function of susceptibility
BASE_STRENGTH: dict[str, tuple[float, float]] = {
    Mechanism.FRAMING.value: (0.6, 0.3),
    Mechanism.ANCHORING.value: (0.7, 0.2),
    Mechanism.SCARCITY.value: (0.8, 0.2),
    Mechanism.SOCIAL_PROOF.value: (0.5, 0.4),
    Mechanism.LOSS_AVERSION.value: (0.6, 0.3),
}

NEUTRAL_STRENGTH = 0.5

Prediction = tuple[PlayerResponse, float]


def base_strength(mechanism: str, susceptibility: float) -> float:
    try:
        intercept, slope = BASE_STRENGTH[mechanism]
    except KeyError:
        raise UnknownMechanism(mechanism) from None
    return intercept + susceptibility * slope


def _has_any(context: str, *words: str) -> bool:
    return any(w in context for w in words)


def _framing(profile: BehavioralProfile, context: str) -> Prediction | None:
    if _has_any(context, "threat", "payment"):
        # Loss-avoidance framing lands with risk-averse players.
        if profile.risk_tolerance < 0.5:
            return PlayerResponse.ACCEPTED, 0.8
    elif _has_any(context, "building", "investment"):
        if profile.strategic_score > 0.5:
            return PlayerResponse.ACCEPTED, 0.7
    return None


def _anchoring(profile: BehavioralProfile, context: str) -> Prediction | None:
    if "resource_cost" in context and profile.resource_efficiency < 0.6:
        return PlayerResponse.ACCEPTED, 0.6
    return None


def _scarcity(profile: BehavioralProfile, context: str) -> Prediction | None:
    if _has_any(context, "opportunity", "bonus"):
        if profile.strategic_score > 0.5 or profile.engagement_level > 0.6:
            return PlayerResponse.ACCEPTED, 0.7
    return None


def _social_proof(profile: BehavioralProfile, context: str) -> Prediction | None:
    if profile.emotional_responsiveness > 0.6:
        return PlayerResponse.ACCEPTED, 0.7
    return None


def _loss_aversion(profile: BehavioralProfile, context: str) -> Prediction | None:
    if profile.risk_tolerance < 0.4:
        return PlayerResponse.ACCEPTED, 0.8
    return None


HEURISTICS: dict[str, Callable[[BehavioralProfile, str], Prediction | None]] = {
    Mechanism.FRAMING.value: _framing,
    Mechanism.ANCHORING.value: _anchoring,
    Mechanism.SCARCITY.value: _scarcity,
    Mechanism.SOCIAL_PROOF.value: _social_proof,
    Mechanism.LOSS_AVERSION.value: _loss_aversion,
}


def weighted_strength(strength: float, weight: float, neutral_weight: float = 0.5) -> float:
    """Scale a strength by a learned weight, relative to the untrained weight."""
    return clamp(strength * weight / neutral_weight)


def execute_influence(
    mechanism: str,
    context: str,
    susceptibility: float,
    profile: BehavioralProfile,
    weight: float = 0.5,
    neutral_weight: float = 0.5,
) -> InfluenceOutcome:
    """Compute the intervention strength and predicted player response.

    An unknown mechanism is logged and yields the neutral outcome.
    """
    try:
        strength = base_strength(mechanism, susceptibility)
    except UnknownMechanism as exc:
        logger.warning("%s; returning neutral outcome", exc)
        return InfluenceOutcome(mechanism=mechanism, strength=NEUTRAL_STRENGTH)

    outcome = InfluenceOutcome(
        mechanism=mechanism,
        strength=weighted_strength(strength, weight, neutral_weight),
    )
    prediction = HEURISTICS[mechanism](profile, (context or "").lower())
    if prediction is not None:
        response, effectiveness = prediction
        outcome.player_response = response
        outcome.effectiveness = effectiveness
        outcome.modified = True
    return outcome
