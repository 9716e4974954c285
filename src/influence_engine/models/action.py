"""Player action events and their typed detail variants."""
from __future__ import annotations

import math
import re
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from influence_engine.errors import MalformedActionDetail


class ActionType(str, Enum):
    MOVE = "Move"
    BUILD = "Build"
    BUILD_SUCCESS = "BuildSuccess"
    ENCOUNTER = "Encounter"
    SESSION_START = "SessionStart"
    THREAT_RESPONSE = "ThreatResponse"
    DECISION_TIMING = "DecisionTiming"
    RESOURCE_MANAGEMENT = "ResourceManagement"
    STRATEGIC_CHOICE = "StrategicChoice"
    EMOTIONAL_RESPONSE = "EmotionalResponse"
    ENGAGEMENT_METRIC = "EngagementMetric"
    INFLUENCE_EVENT = "InfluenceEvent"
    QUEST_DECISION = "QuestDecision"
    MOUSE_TRACKING = "MouseTracking"


class _Detail(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("*", mode="after")
    @classmethod
    def _finite(cls, value: Any) -> Any:
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value


class MoveDetail(_Detail):
    x: int
    y: int


class BuildSuccessDetail(_Detail):
    building_type: str = "village"
    x: int = -1
    y: int = -1


class DecisionTimingDetail(_Detail):
    decision_type: str
    time_taken: float = Field(ge=0)
    context: str = ""


class ResourceManagementDetail(_Detail):
    action: str
    resource_type: str
    amount: int = Field(ge=0)
    current_total: int = Field(ge=0)


class ThreatResponseDetail(_Detail):
    threat_type: str
    response: str = ""
    paid_off: bool
    cost: int = Field(default=0, ge=0)


class QuestDecisionDetail(_Detail):
    quest_type: str
    accepted: bool
    decision_factor: str = ""


class EmotionalResponseDetail(_Detail):
    trigger: str
    emotion_type: str
    response_speed: float = Field(ge=0)


class StrategicChoiceDetail(_Detail):
    choice_type: str
    choice: str
    deliberation_time: float = Field(default=0.0, ge=0)


class EngagementMetricDetail(_Detail):
    metric_type: str
    value: float = 0.0
    additional_data: str = ""


class InfluenceEventDetail(_Detail):
    mechanism: str
    player_response: str
    strength: float = Field(default=0.5, ge=0, le=1)
    effectiveness: float = Field(default=0.0, ge=0, le=1)


ActionDetail = Union[
    MoveDetail,
    BuildSuccessDetail,
    DecisionTimingDetail,
    ResourceManagementDetail,
    ThreatResponseDetail,
    QuestDecisionDetail,
    EmotionalResponseDetail,
    StrategicChoiceDetail,
    EngagementMetricDetail,
    InfluenceEventDetail,
]

DETAIL_MODELS: dict[str, type[_Detail]] = {
    ActionType.MOVE.value: MoveDetail,
    ActionType.BUILD_SUCCESS.value: BuildSuccessDetail,
    ActionType.DECISION_TIMING.value: DecisionTimingDetail,
    ActionType.RESOURCE_MANAGEMENT.value: ResourceManagementDetail,
    ActionType.THREAT_RESPONSE.value: ThreatResponseDetail,
    ActionType.QUEST_DECISION.value: QuestDecisionDetail,
    ActionType.EMOTIONAL_RESPONSE.value: EmotionalResponseDetail,
    ActionType.STRATEGIC_CHOICE.value: StrategicChoiceDetail,
    ActionType.ENGAGEMENT_METRIC.value: EngagementMetricDetail,
    ActionType.INFLUENCE_EVENT.value: InfluenceEventDetail,
}

# Positional field names for the legacy colon-delimited client format,
# plus how many leading fields are mandatory.
_LEGACY_FIELDS: dict[str, tuple[tuple[str, ...], int]] = {
    ActionType.DECISION_TIMING.value: (("decision_type", "time_taken", "context"), 2),
    ActionType.RESOURCE_MANAGEMENT.value: (
        ("action", "resource_type", "amount", "current_total"), 4,
    ),
    ActionType.THREAT_RESPONSE.value: (("threat_type", "response", "paid_off", "cost"), 3),
    ActionType.QUEST_DECISION.value: (("quest_type", "accepted", "decision_factor"), 2),
    ActionType.EMOTIONAL_RESPONSE.value: (("trigger", "emotion_type", "response_speed"), 3),
    ActionType.STRATEGIC_CHOICE.value: (("choice_type", "choice", "deliberation_time"), 2),
    ActionType.ENGAGEMENT_METRIC.value: (("metric_type", "value", "additional_data"), 1),
    ActionType.INFLUENCE_EVENT.value: (
        ("mechanism", "player_response", "strength", "effectiveness"), 2,
    ),
    ActionType.BUILD_SUCCESS.value: (("building_type", "x", "y"), 1),
}

_MOVE_RE = re.compile(r"\(\s*(-?\d+)\s*,\s*(-?\d+)\s*\)")


def _split_legacy(action_type: str, raw: str) -> dict[str, str]:
    if action_type == ActionType.MOVE.value:
        match = _MOVE_RE.search(raw)
        if match is None:
            raise MalformedActionDetail(action_type, f"no coordinates in {raw!r}")
        return {"x": match.group(1), "y": match.group(2)}

    names, required = _LEGACY_FIELDS[action_type]
    parts = raw.split(":", len(names) - 1)
    if len(parts) < required or any(not p.strip() for p in parts[:required]):
        raise MalformedActionDetail(
            action_type, f"expected at least {required} ':'-separated fields in {raw!r}",
        )
    return {name: part.strip() for name, part in zip(names, parts)}


def parse_detail(action_type: str, raw: Any) -> Optional[ActionDetail]:
    """Coerce a stored detail into its typed variant.

    Accepts an already-typed detail, a dict, or the legacy colon-delimited
    string the game client sends. A missing detail is read as an empty
    dict. Returns None for action types that carry no typed detail.
    Raises MalformedActionDetail when the detail cannot be read as the
    expected shape.
    """
    model = DETAIL_MODELS.get(action_type)
    if model is None:
        return None
    if isinstance(raw, model):
        return raw
    if isinstance(raw, str):
        data: Any = _split_legacy(action_type, raw)
    elif isinstance(raw, dict):
        data = raw
    elif raw is None:
        data = {}
    else:
        raise MalformedActionDetail(action_type, f"unsupported detail type {type(raw).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedActionDetail(action_type, str(exc.errors()[0]["msg"])) from exc


class ActionEvent(BaseModel):
    """One immutable entry of a player's action history."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    uid: str = Field(min_length=1)
    action_type: str = Field(min_length=1)
    detail: Any = None
    time_in_game: Optional[float] = None
    hex_x: Optional[int] = None
    hex_y: Optional[int] = None
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_payload(cls, uid: str, action_type: str, data: dict | str | None) -> ActionEvent:
        """Build a validated event from the client's logging payload.

        The client wraps its detail in ``{"details": ..., "timeInGame": ...,
        "hexX": ..., "hexY": ...}``. Known action types have their detail
        normalized to the typed variant's fields; unknown types keep the
        raw detail. Raises MalformedActionDetail when the detail or the time
        and hex fields cannot be read.
        """
        if isinstance(data, dict) and "details" in data:
            raw_detail = data.get("details")
            time_in_game = data.get("timeInGame")
            hex_x, hex_y = data.get("hexX"), data.get("hexY")
        else:
            raw_detail, time_in_game, hex_x, hex_y = data, None, None, None

        typed = parse_detail(action_type, raw_detail)
        detail = typed.model_dump() if typed is not None else raw_detail
        try:
            return cls(
                uid=uid,
                action_type=action_type,
                detail=detail,
                time_in_game=time_in_game,
                hex_x=hex_x,
                hex_y=hex_y,
            )
        except ValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise MalformedActionDetail(action_type, f"{field}: {error['msg']}") from exc
