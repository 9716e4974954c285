"""Profile aggregator: derives and stores a user's behavioral profile."""
from __future__ import annotations

import logging
import threading
import time
import weakref
from typing import Callable

from influence_engine.config import ProfilingSettings
from influence_engine.errors import AnalysisTimeout
from influence_engine.mechanics.profile_builder import build_profile
from influence_engine.models.profile import BehavioralProfile
from influence_engine.storage.repos import ActionLogRepo, ProfileRepo

logger = logging.getLogger(__name__)


class ProfileAggregator:
    """Runs the extractors over a user's history and upserts the result.

    Analyses of the same uid are serialized, so a stored profile always
    comes from one complete snapshot. Different uids never block each
    other. A uid's lock lives only while some analysis holds a reference
    to it.
    """

    def __init__(
        self,
        actions: ActionLogRepo,
        profiles: ProfileRepo,
        settings: ProfilingSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.actions = actions
        self.profiles = profiles
        self.settings = settings or ProfilingSettings()
        self.clock = clock
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._registry_lock = threading.Lock()

    def lock_for(self, uid: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(uid)
            if lock is None:
                lock = threading.Lock()
                self._locks[uid] = lock
            return lock

    def analyze(self, uid: str, deadline: float | None = None) -> BehavioralProfile:
        """Recompute and store the profile for `uid`.

        With a `deadline` (a value of `clock`), waiting for another analysis
        of the same uid stops at the deadline, and a result computed after
        the deadline is not written; both raise AnalysisTimeout and leave
        the stored profile as it was. A store read that never returns is
        not interrupted. Store failures raise PersistenceError.
        """
        lock = self.lock_for(uid)
        timeout = -1 if deadline is None else max(deadline - self.clock(), 0.0)
        if not lock.acquire(timeout=timeout):
            raise AnalysisTimeout(uid, max(self.clock() - deadline, 0.0))
        try:
            history = self.actions.get_actions(uid, limit=self.settings.history_limit)
            prior = self.profiles.get(uid)
            profile = build_profile(uid, history, prior, self.settings)
            if deadline is not None:
                now = self.clock()
                if now > deadline:
                    raise AnalysisTimeout(uid, now - deadline)
            self.profiles.upsert(profile)
        finally:
            lock.release()
        logger.info(
            "Profile updated for %s (%d data points, confidence %.2f)",
            uid, profile.data_points_analyzed, profile.confidence,
        )
        return profile

    def get(self, uid: str) -> BehavioralProfile | None:
        return self.profiles.get(uid)

    def get_or_create(self, uid: str) -> BehavioralProfile:
        """Return the stored profile, analysing first if there is none."""
        profile = self.profiles.get(uid)
        if profile is None:
            profile = self.analyze(uid)
        return profile
