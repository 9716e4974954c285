"""Exception hierarchy for the influence engine."""
from __future__ import annotations


class InfluenceEngineError(Exception):
    """Base class for all engine errors."""


class EmptyEvidence(InfluenceEngineError):
    """No actions of the kind an extractor needs.

    Extractors catch this themselves and fall back to the neutral score.
    """


class PersistenceError(InfluenceEngineError):
    """A store read or write failed."""


class UnknownMechanism(InfluenceEngineError):
    def __init__(self, mechanism: str) -> None:
        super().__init__(f"Unknown influence mechanism: {mechanism}")
        self.mechanism = mechanism


class UnknownExperiment(InfluenceEngineError):
    def __init__(self, experiment_name: str) -> None:
        super().__init__(f"Unknown or inactive experiment: {experiment_name}")
        self.experiment_name = experiment_name


class MalformedActionDetail(InfluenceEngineError):
    """An action's detail field does not match its action type's shape."""

    def __init__(self, action_type: str, reason: str) -> None:
        super().__init__(f"Malformed {action_type} detail: {reason}")
        self.action_type = action_type
        self.reason = reason


class ProfileNotFound(InfluenceEngineError):
    def __init__(self, uid: str) -> None:
        super().__init__(f"No behavioral profile for {uid}")
        self.uid = uid


class AnalysisTimeout(InfluenceEngineError):
    """A profile analysis finished after its deadline; its result was dropped."""

    def __init__(self, uid: str, elapsed: float) -> None:
        super().__init__(f"Analysis for {uid} exceeded its deadline ({elapsed:.2f}s)")
        self.uid = uid
        self.elapsed = elapsed
