"""Typed view over config.toml."""
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.toml"


class StorageSettings(BaseModel):
    db_path: str = "data/influence.db"


class ProfilingSettings(BaseModel):
    history_limit: int = Field(default=500, gt=0)
    confidence_scale: float = Field(default=10.0, gt=0)
    resource_penalty_threshold: int = 20
    resource_penalty: float = Field(default=0.1, ge=0, le=1)
    starting_resources: dict[str, int] = Field(
        default_factory=lambda: {"gold": 10, "wood": 10, "food": 15, "stone": 5}
    )


class AnalysisSettings(BaseModel):
    timeout_seconds: float = Field(default=5.0, gt=0)
    max_workers: int = Field(default=4, gt=0)
    trigger_types: list[str] = Field(
        default_factory=lambda: [
            "DecisionTiming", "StrategicChoice", "ThreatResponse", "QuestDecision",
        ]
    )


class EffectivenessSettings(BaseModel):
    learning_rate: float = Field(default=0.1, gt=0, le=1)
    initial_weight: float = Field(default=0.5, gt=0, le=1)


class ExperimentSettings(BaseModel):
    traffic_split: float = Field(default=0.5, ge=0, le=1)
    active: bool = True


class EngineSettings(BaseModel):
    storage: StorageSettings = Field(default_factory=StorageSettings)
    profiling: ProfilingSettings = Field(default_factory=ProfilingSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    effectiveness: EffectivenessSettings = Field(default_factory=EffectivenessSettings)
    experiments: dict[str, ExperimentSettings] = Field(default_factory=dict)


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load config.toml, or an empty dict if it does not exist."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    return {}


def load_settings(path: str | Path | None = None) -> EngineSettings:
    return EngineSettings.model_validate(load_config(path))
