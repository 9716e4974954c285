"""Tests for src/influence_engine/engine/analysis_queue.py."""
from __future__ import annotations

import logging
import threading

import pytest

from influence_engine.engine.analysis_queue import AnalysisQueue
from influence_engine.engine.profiler import ProfileAggregator
from influence_engine.errors import AnalysisTimeout, PersistenceError


class StubAggregator:
    """Stands in for ProfileAggregator; raises `error` if set."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, float | None]] = []
        self.release = threading.Event()
        self.release.set()

    def clock(self) -> float:
        return 100.0

    def analyze(self, uid, deadline=None):
        self.release.wait(5)
        self.calls.append((uid, deadline))
        if self.error is not None:
            raise self.error
        return uid


@pytest.fixture
def make_queue():
    queues = []

    def _make(aggregator, **kwargs):
        queue = AnalysisQueue(aggregator, **kwargs)
        queues.append(queue)
        return queue

    yield _make
    for queue in queues:
        queue.shutdown()


class TestAnalysisQueue:
    def test_runs_analysis(self, repos, make_queue):
        aggregator = ProfileAggregator(repos["actions"], repos["profiles"])
        queue = make_queue(aggregator)
        future = queue.submit("u1")
        assert queue.join(5)
        assert future.result().uid == "u1"
        assert repos["profiles"].get("u1") is not None

    def test_deadline_from_timeout(self, make_queue):
        aggregator = StubAggregator()
        queue = make_queue(aggregator, timeout_seconds=2.5)
        queue.submit("u1").result(5)
        assert aggregator.calls == [("u1", 102.5)]

    def test_join_waits_for_pending(self, make_queue):
        aggregator = StubAggregator()
        aggregator.release.clear()
        queue = make_queue(aggregator)
        queue.submit("u1")
        queue.submit("u2")
        assert queue.pending == 2
        assert queue.join(0.1) is False
        aggregator.release.set()
        assert queue.join(5) is True
        assert queue.pending == 0
        assert sorted(uid for uid, _ in aggregator.calls) == ["u1", "u2"]

    def test_join_with_nothing_submitted(self, make_queue):
        assert make_queue(StubAggregator()).join(0.1) is True

    @pytest.mark.parametrize("error", [
        AnalysisTimeout("u1", 1.0),
        PersistenceError("disk full"),
        RuntimeError("bug"),
    ], ids=["timeout", "persistence", "unexpected"])
    def test_failures_logged_not_raised(self, make_queue, caplog, error):
        queue = make_queue(StubAggregator(error))
        with caplog.at_level(logging.WARNING, logger="influence_engine.engine.analysis_queue"):
            future = queue.submit("u1")
            assert future.result(5) is None
            queue.join(5)
        assert caplog.records
        assert all(r.name == "influence_engine.engine.analysis_queue" for r in caplog.records)
