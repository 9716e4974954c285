from __future__ import annotations

from influence_engine.storage.repos.action_log import ActionLogRepo
from influence_engine.storage.repos.experiment_repo import ExperimentRepo
from influence_engine.storage.repos.influence_repo import InfluenceRepo
from influence_engine.storage.repos.profile_repo import ProfileRepo

__all__ = [
    "ActionLogRepo",
    "ExperimentRepo",
    "InfluenceRepo",
    "ProfileRepo",
]
