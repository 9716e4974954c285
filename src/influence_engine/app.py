"""Main application bootstrap: wires storage and services together."""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any

from influence_engine.config import EngineSettings, load_settings
from influence_engine.errors import ProfileNotFound
from influence_engine.mechanics.insights import generate_insights
from influence_engine.models.action import ActionEvent
from influence_engine.models.experiment import Bucket
from influence_engine.models.influence import (
    InfluenceAnalytics,
    InfluenceEvent,
    InfluenceOutcome,
    PlayerResponse,
    Strategy,
)
from influence_engine.models.profile import BehavioralProfile

logger = logging.getLogger(__name__)


class InfluenceEngine:
    """Entry point for every engine operation.

    Components are created lazily from the settings the first time they
    are used.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        config_path: str | Path | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or load_settings(config_path)
        self.rng = rng

        self._db = None
        self._action_log = None
        self._profile_repo = None
        self._influence_repo = None
        self._experiment_repo = None
        self._profiler = None
        self._queue = None
        self._tracker = None
        self._influence = None
        self._experiments = None

    # -- Component initialization (lazy) --

    @property
    def db(self):
        if self._db is None:
            from influence_engine.storage.database import Database

            self._db = Database(self.settings.storage.db_path)
            self._db.initialize()
        return self._db

    @property
    def action_log(self):
        if self._action_log is None:
            from influence_engine.storage.repos import ActionLogRepo

            self._action_log = ActionLogRepo(self.db)
        return self._action_log

    @property
    def profile_repo(self):
        if self._profile_repo is None:
            from influence_engine.storage.repos import ProfileRepo

            self._profile_repo = ProfileRepo(self.db)
        return self._profile_repo

    @property
    def influence_repo(self):
        if self._influence_repo is None:
            from influence_engine.storage.repos import InfluenceRepo

            self._influence_repo = InfluenceRepo(self.db)
        return self._influence_repo

    @property
    def experiment_repo(self):
        if self._experiment_repo is None:
            from influence_engine.storage.repos import ExperimentRepo

            self._experiment_repo = ExperimentRepo(self.db)
        return self._experiment_repo

    @property
    def profiler(self):
        if self._profiler is None:
            from influence_engine.engine.profiler import ProfileAggregator

            self._profiler = ProfileAggregator(
                self.action_log, self.profile_repo, self.settings.profiling,
            )
        return self._profiler

    @property
    def queue(self):
        if self._queue is None:
            from influence_engine.engine.analysis_queue import AnalysisQueue

            analysis_cfg = self.settings.analysis
            self._queue = AnalysisQueue(
                self.profiler,
                max_workers=analysis_cfg.max_workers,
                timeout_seconds=analysis_cfg.timeout_seconds,
            )
        return self._queue

    @property
    def tracker(self):
        if self._tracker is None:
            from influence_engine.engine.effectiveness import EffectivenessTracker

            self._tracker = EffectivenessTracker(
                self.influence_repo,
                self.action_log,
                self.profile_repo,
                self.settings.effectiveness,
            )
        return self._tracker

    @property
    def influence(self):
        if self._influence is None:
            from influence_engine.engine.influence import InfluenceService

            self._influence = InfluenceService(self.profiler, self.tracker)
        return self._influence

    @property
    def experiments(self):
        if self._experiments is None:
            from influence_engine.engine.experiments import ExperimentService

            self._experiments = ExperimentService(
                self.experiment_repo, self.settings.experiments, rng=self.rng,
            )
        return self._experiments

    # -- Operations --

    def log_action(self, uid: str, action_type: str, data: Any = None) -> dict[str, str]:
        """Append an action; qualifying types trigger a background analysis.

        Raises MalformedActionDetail if the detail does not fit its type.
        """
        event = ActionEvent.from_payload(uid, action_type, data)
        self.action_log.append(event)
        logger.debug("Logged %s action for %s", action_type, uid)
        if action_type in self.settings.analysis.trigger_types:
            self.queue.submit(uid)
        return {"status": "success"}

    def get_actions(self, uid: str, action_type: str | None = None) -> list[dict]:
        if action_type is None:
            return self.action_log.get_actions(uid)
        return self.action_log.get_by_type(uid, action_type)

    def get_profile(self, uid: str) -> BehavioralProfile | None:
        return self.profiler.get(uid)

    def analyze(self, uid: str) -> BehavioralProfile:
        return self.profiler.analyze(uid)

    def insights(self, uid: str) -> dict[str, Any]:
        profile = self.profiler.get(uid)
        if profile is None:
            raise ProfileNotFound(uid)
        return generate_insights(profile)

    def apply_influence(self, uid: str, mechanism: str, context: str) -> InfluenceOutcome:
        return self.influence.apply(uid, mechanism, context)

    def influence_strategy(self, uid: str, context: str) -> Strategy:
        return self.influence.strategy(uid, context)

    def record_influence(
        self,
        uid: str,
        mechanism: str,
        strength: float,
        player_response: PlayerResponse | str,
        effectiveness_score: float = 0.0,
        context: str = "",
    ) -> InfluenceEvent:
        return self.influence.record_response(
            uid, mechanism, strength, player_response, effectiveness_score, context,
        )

    def influence_analytics(self, uid: str) -> InfluenceAnalytics:
        return self.tracker.analytics(uid)

    def recommended_strength(self, uid: str) -> float:
        return self.tracker.recommended_strength(uid)

    def assign_experiment(self, uid: str, experiment_name: str) -> Bucket:
        return self.experiments.assign(uid, experiment_name)

    def close(self) -> None:
        if self._queue is not None:
            self._queue.join()
            self._queue.shutdown()
            self._queue = None
        if self._db is not None:
            self._db.close()
