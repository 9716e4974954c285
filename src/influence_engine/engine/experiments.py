"""Stable A/B bucket assignment for named experiments."""
from __future__ import annotations

import logging
import random

from influence_engine.config import ExperimentSettings
from influence_engine.errors import UnknownExperiment
from influence_engine.models.experiment import Bucket, ExperimentAssignment
from influence_engine.storage.repos import ExperimentRepo

logger = logging.getLogger(__name__)


class ExperimentService:
    """Assigns a bucket on first contact and returns the stored one afterwards."""

    def __init__(
        self,
        repo: ExperimentRepo,
        experiments: dict[str, ExperimentSettings] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.repo = repo
        self.experiments = dict(experiments or {})
        self.rng = rng or random.Random()

    def definition(self, experiment_name: str) -> ExperimentSettings:
        definition = self.experiments.get(experiment_name)
        if definition is None or not definition.active:
            raise UnknownExperiment(experiment_name)
        return definition

    def assign(self, uid: str, experiment_name: str) -> Bucket:
        """Return the user's bucket, drawing and storing it on first request.

        Unknown or inactive experiments answer control and store nothing.
        """
        existing = self.repo.get(uid, experiment_name)
        if existing is not None:
            return existing.bucket
        try:
            definition = self.definition(experiment_name)
        except UnknownExperiment as exc:
            logger.warning("%s; defaulting %s to control", exc, uid)
            return Bucket.CONTROL

        draw = self.rng.random()
        bucket = Bucket.VARIANT if draw < definition.traffic_split else Bucket.CONTROL
        stored = self.repo.insert_if_absent(ExperimentAssignment(
            uid=uid, experiment_name=experiment_name, bucket=bucket,
        ))
        if stored.bucket is bucket:
            logger.info("Assigned %s to %s in %s", uid, bucket.value, experiment_name)
        return stored.bucket

    def split(self, experiment_name: str) -> dict[str, int]:
        return self.repo.bucket_counts(experiment_name)
