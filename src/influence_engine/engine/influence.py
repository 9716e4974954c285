"""Influence service: selects, applies and records interventions for a user."""
from __future__ import annotations

from influence_engine.engine.effectiveness import EffectivenessTracker
from influence_engine.engine.profiler import ProfileAggregator
from influence_engine.mechanics.interventions import BASE_STRENGTH, execute_influence
from influence_engine.mechanics.strategy import select_strategy
from influence_engine.models.influence import (
    InfluenceEvent,
    InfluenceOutcome,
    PlayerResponse,
    Strategy,
)


class InfluenceService:
    def __init__(self, profiler: ProfileAggregator, tracker: EffectivenessTracker) -> None:
        self.profiler = profiler
        self.tracker = tracker

    def strategy(self, uid: str, context: str) -> Strategy:
        """Pick a mechanism for the stored profile; "none" if there is no profile."""
        return select_strategy(self.profiler.get(uid), context)

    def apply(self, uid: str, mechanism: str, context: str) -> InfluenceOutcome:
        """Execute an intervention and record its predicted outcome.

        A user without a profile is analysed first so the heuristics always
        have scores to compare against. An unknown mechanism yields
        the neutral outcome and records nothing.
        """
        profile = self.profiler.get_or_create(uid)
        outcome = execute_influence(
            mechanism,
            context,
            profile.influence_susceptibility,
            profile,
            weight=self.tracker.weight(mechanism),
            neutral_weight=self.tracker.settings.initial_weight,
        )
        if mechanism not in BASE_STRENGTH:
            return outcome
        self.tracker.record(InfluenceEvent(
            uid=uid,
            mechanism=mechanism,
            strength=outcome.strength,
            context=context,
            player_response=outcome.player_response,
            effectiveness_score=outcome.effectiveness,
        ))
        return outcome

    def record_response(
        self,
        uid: str,
        mechanism: str,
        strength: float,
        player_response: PlayerResponse | str,
        effectiveness_score: float = 0.0,
        context: str = "",
    ) -> InfluenceEvent:
        """Record an influence the client applied and how the player reacted."""
        return self.tracker.record(InfluenceEvent(
            uid=uid,
            mechanism=mechanism,
            strength=strength,
            context=context,
            player_response=PlayerResponse(player_response),
            effectiveness_score=effectiveness_score,
        ))
