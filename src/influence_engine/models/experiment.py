from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class Bucket(str, Enum):
    CONTROL = "control"
    VARIANT = "variant"


class ExperimentAssignment(BaseModel):
    uid: str
    experiment_name: str
    bucket: Bucket
    assigned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
