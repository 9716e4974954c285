"""Tests for src/influence_engine/engine/profiler.py."""
from __future__ import annotations

import gc
import time

import pytest

from factories import low_resources
from influence_engine.engine.profiler import ProfileAggregator
from influence_engine.errors import AnalysisTimeout
from influence_engine.models.action import ActionEvent


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _log(repos, uid: str, action_type: str, detail, when) -> None:
    repos["actions"].append(ActionEvent(
        uid=uid, action_type=action_type, detail=detail, occurred_at=when,
    ))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def aggregator(repos, clock):
    return ProfileAggregator(repos["actions"], repos["profiles"], clock=clock)


class TestAnalyze:
    def test_no_actions(self, aggregator):
        profile = aggregator.analyze("u1")
        assert all(v == 0.5 for v in profile.scores().values())
        assert profile.confidence == 0.0
        assert aggregator.get("u1") == profile

    def test_risk_tolerance_from_history(self, aggregator, repos, timestamps):
        for row in low_resources():
            _log(repos, "u1", row["action_type"], row["detail"], timestamps())
        for paid in (True, True, False, True, True):
            _log(repos, "u1", "ThreatResponse", {
                "threat_type": "raiders", "paid_off": paid, "cost": 3,
            }, timestamps())
        profile = aggregator.analyze("u1")
        assert profile.risk_tolerance == pytest.approx(0.8)
        assert profile.data_points_analyzed == 9

    def test_history_limit(self, repos, timestamps):
        from influence_engine.config import ProfilingSettings

        for _ in range(5):
            _log(repos, "u1", "SessionStart", "Started", timestamps())
        aggregator = ProfileAggregator(
            repos["actions"], repos["profiles"], ProfilingSettings(history_limit=3),
        )
        assert aggregator.analyze("u1").data_points_analyzed == 3

    def test_malformed_rows_do_not_abort(self, aggregator, repos, timestamps):
        _log(repos, "u1", "ThreatResponse", "broken", timestamps())
        _log(repos, "u1", "DecisionTiming", {"decision_type": "x", "time_taken": 1}, timestamps())
        profile = aggregator.analyze("u1")
        assert profile.risk_tolerance == 0.5
        assert profile.decision_speed == 0.7

    def test_late_result_not_stored(self, aggregator, clock, repos, timestamps):
        first = aggregator.analyze("u1")
        _log(repos, "u1", "DecisionTiming", {"decision_type": "x", "time_taken": 1}, timestamps())
        clock.now = 10.0
        with pytest.raises(AnalysisTimeout) as exc_info:
            aggregator.analyze("u1", deadline=5.0)
        assert exc_info.value.elapsed == pytest.approx(5.0)
        assert aggregator.get("u1") == first

    def test_within_deadline_stored(self, aggregator, clock):
        clock.now = 1.0
        aggregator.analyze("u1", deadline=5.0)
        assert aggregator.get("u1") is not None


class TestGetOrCreate:
    def test_creates_when_missing(self, aggregator):
        assert aggregator.get("u1") is None
        profile = aggregator.get_or_create("u1")
        assert aggregator.get("u1") == profile

    def test_returns_stored(self, aggregator, repos, timestamps):
        stored = aggregator.analyze("u1")
        _log(repos, "u1", "DecisionTiming", {"decision_type": "x", "time_taken": 1}, timestamps())
        assert aggregator.get_or_create("u1") == stored


class TestLocks:
    def test_lock_per_uid(self, aggregator):
        assert aggregator.lock_for("u1") is aggregator.lock_for("u1")
        assert aggregator.lock_for("u1") is not aggregator.lock_for("u2")

    def test_analysis_waits_for_same_uid(self, aggregator):
        import threading

        lock = aggregator.lock_for("u1")
        lock.acquire()
        done = threading.Event()

        def run():
            aggregator.analyze("u1")
            done.set()

        worker = threading.Thread(target=run)
        worker.start()
        try:
            assert not done.wait(0.2)
            aggregator.analyze("u2")
        finally:
            lock.release()
        worker.join(5)
        assert done.is_set()

    def test_idle_lock_released(self, aggregator):
        lock = aggregator.lock_for("u1")
        assert "u1" in aggregator._locks
        del lock
        gc.collect()
        assert "u1" not in aggregator._locks

    def test_lock_wait_bounded_by_deadline(self, repos):
        aggregator = ProfileAggregator(repos["actions"], repos["profiles"])
        lock = aggregator.lock_for("u1")
        lock.acquire()
        try:
            started = time.monotonic()
            with pytest.raises(AnalysisTimeout):
                aggregator.analyze("u1", deadline=started + 0.1)
            assert time.monotonic() - started < 5
        finally:
            lock.release()
        assert repos["profiles"].get("u1") is None
