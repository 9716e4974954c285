"""Background profile analysis triggered by qualifying actions."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

from influence_engine.errors import AnalysisTimeout, PersistenceError

if TYPE_CHECKING:
    from influence_engine.engine.profiler import ProfileAggregator
    from influence_engine.models.profile import BehavioralProfile

logger = logging.getLogger(__name__)


class AnalysisQueue:
    """Runs analyses on worker threads without blocking the submitter.

    Failures and timeouts are logged and resolve the task's future to
    None; they never propagate to whoever logged the triggering action.
    join() blocks until every submitted analysis has finished.
    """

    def __init__(
        self,
        aggregator: ProfileAggregator,
        max_workers: int = 4,
        timeout_seconds: float = 5.0,
    ) -> None:
        self.aggregator = aggregator
        self.timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="profile-analysis",
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)

    def submit(self, uid: str) -> Future:
        future = self._executor.submit(self._run, uid)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
            if not self._pending:
                self._idle.notify_all()

    def _run(self, uid: str) -> BehavioralProfile | None:
        deadline = self.aggregator.clock() + self.timeout_seconds
        try:
            return self.aggregator.analyze(uid, deadline=deadline)
        except AnalysisTimeout as exc:
            logger.warning("%s; keeping previous profile", exc)
        except PersistenceError as exc:
            logger.warning("Background analysis for %s dropped: %s", uid, exc)
        except Exception:
            logger.exception("Background analysis for %s failed", uid)
        return None

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for all submitted analyses; False if `timeout` ran out first."""
        with self._idle:
            return self._idle.wait_for(lambda: not self._pending, timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
