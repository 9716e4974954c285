"""Effectiveness tracker: records influence outcomes and learns per-mechanism weights."""
from __future__ import annotations

import logging

from influence_engine.config import EffectivenessSettings
from influence_engine.mechanics import effectiveness
from influence_engine.models.action import ActionEvent, ActionType, InfluenceEventDetail
from influence_engine.models.influence import InfluenceAnalytics, InfluenceEvent
from influence_engine.storage.repos import ActionLogRepo, InfluenceRepo, ProfileRepo

logger = logging.getLogger(__name__)


class EffectivenessTracker:
    """Persists influence events and keeps one EMA weight per mechanism.

    Weights are shared by every user, so each update is a read-modify-write
    of the mechanism's row inside one database transaction.
    """

    def __init__(
        self,
        influence: InfluenceRepo,
        actions: ActionLogRepo,
        profiles: ProfileRepo,
        settings: EffectivenessSettings | None = None,
    ) -> None:
        self.influence = influence
        self.actions = actions
        self.profiles = profiles
        self.settings = settings or EffectivenessSettings()

    def record(self, event: InfluenceEvent) -> InfluenceEvent:
        """Store the event, mirror it into the action log and update the weight.

        The three writes share one transaction; if any fails none is kept.
        """
        with self.influence.db.get_connection():
            stored = self.influence.append_event(event)
            self.actions.append(ActionEvent(
                uid=event.uid,
                action_type=ActionType.INFLUENCE_EVENT.value,
                detail=InfluenceEventDetail(
                    mechanism=event.mechanism,
                    player_response=event.player_response.value,
                    strength=event.strength,
                    effectiveness=event.effectiveness_score,
                ).model_dump(),
                occurred_at=event.occurred_at,
            ))
            weight = self.observe(
                event.mechanism, effectiveness.response_target(event.player_response),
            )
        logger.info(
            "Recorded %s influence for %s (%s); weight now %.3f",
            event.mechanism, event.uid, event.player_response.value, weight,
        )
        return stored

    def observe(self, mechanism: str, target: float) -> float:
        """Apply one EMA step toward `target` and return the new weight."""
        rate = self.settings.learning_rate
        return self.influence.update_weight(
            mechanism,
            self.settings.initial_weight,
            lambda current: effectiveness.ema_update(current, target, rate),
        )

    def weight(self, mechanism: str) -> float:
        stored = self.influence.get_weight(mechanism)
        return self.settings.initial_weight if stored is None else stored

    def weights(self) -> dict[str, float]:
        return self.influence.get_all_weights()

    def analytics(self, uid: str) -> InfluenceAnalytics:
        profile = self.profiles.get(uid)
        return effectiveness.summarize(
            self.influence.get_events(uid),
            profile.influence_susceptibility if profile is not None else None,
        )

    def recommended_strength(self, uid: str) -> float:
        return effectiveness.recommended_strength(
            self.influence.get_events(uid, limit=effectiveness.RECENT_EVENT_WINDOW)
        )
