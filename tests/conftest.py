"""Shared fixtures for the influence engine test suite."""
from __future__ import annotations

import itertools
import random
from datetime import datetime, timedelta, timezone

import pytest

from influence_engine.config import EngineSettings, StorageSettings
from influence_engine.models.profile import BehavioralProfile


@pytest.fixture
def profile_factory():
    def _make(**scores: float) -> BehavioralProfile:
        return BehavioralProfile(uid=scores.pop("uid", "p1"), **scores)
    return _make


@pytest.fixture
def in_memory_db(tmp_path):
    from influence_engine.storage.database import Database

    db = Database(str(tmp_path / "test.db"))
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def repos(in_memory_db):
    from influence_engine.storage.repos import (
        ActionLogRepo,
        ExperimentRepo,
        InfluenceRepo,
        ProfileRepo,
    )

    return {
        "actions": ActionLogRepo(in_memory_db),
        "profiles": ProfileRepo(in_memory_db),
        "influence": InfluenceRepo(in_memory_db),
        "experiments": ExperimentRepo(in_memory_db),
    }


@pytest.fixture
def settings(tmp_path) -> EngineSettings:
    return EngineSettings(
        storage=StorageSettings(db_path=str(tmp_path / "engine.db")),
        experiments={
            "framing_effects": {"traffic_split": 0.5},
            "paused_test": {"traffic_split": 0.5, "active": False},
        },
    )


@pytest.fixture
def engine(settings):
    from influence_engine.app import InfluenceEngine

    eng = InfluenceEngine(settings=settings, rng=random.Random(42))
    yield eng
    eng.close()


@pytest.fixture
def timestamps():
    """Strictly increasing UTC timestamps, one per call."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    counter = itertools.count()

    def _next() -> datetime:
        return base + timedelta(seconds=next(counter))
    return _next
