"""HTTP surface for the engine (FastAPI)."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from influence_engine.app import InfluenceEngine
from influence_engine.errors import MalformedActionDetail, PersistenceError, ProfileNotFound
from influence_engine.models.influence import (
    InfluenceAnalytics,
    InfluenceEvent,
    InfluenceOutcome,
    Mechanism,
    PlayerResponse,
    Strategy,
)
from influence_engine.models.profile import BehavioralProfile

logger = logging.getLogger(__name__)

UNAVAILABLE = "analysis/strategy unavailable"


class LogRequest(BaseModel):
    uid: str = Field(min_length=1)
    type: str = Field(min_length=1)
    action_data: Optional[Union[dict[str, Any], str]] = None
    data: Optional[Union[dict[str, Any], str]] = None


class ApplyInfluenceRequest(BaseModel):
    influenceType: str
    context: str = ""


class RecordInfluenceRequest(BaseModel):
    influenceType: Mechanism
    influenceStrength: float = Field(ge=0, le=1)
    playerResponse: PlayerResponse
    effectivenessScore: float = Field(default=0.0, ge=0, le=1)
    context: str = ""


def get_engine(request: Request) -> InfluenceEngine:
    return request.app.state.engine


router = APIRouter(prefix="/api", tags=["influence"])


@router.post("/log")
def log_action(body: LogRequest, engine: InfluenceEngine = Depends(get_engine)):
    data = body.action_data if body.action_data is not None else body.data
    return engine.log_action(body.uid, body.type, data)


@router.get("/actions/{uid}")
def get_actions(uid: str, engine: InfluenceEngine = Depends(get_engine)):
    return engine.get_actions(uid)


@router.get("/actions/{uid}/{action_type}")
def get_actions_by_type(uid: str, action_type: str, engine: InfluenceEngine = Depends(get_engine)):
    return engine.get_actions(uid, action_type)


@router.get("/profile/{uid}", response_model=Optional[BehavioralProfile])
def get_profile(uid: str, engine: InfluenceEngine = Depends(get_engine)):
    return engine.get_profile(uid)


@router.post("/analyze/{uid}", response_model=BehavioralProfile)
def analyze(uid: str, engine: InfluenceEngine = Depends(get_engine)):
    return engine.analyze(uid)


@router.get("/insights/{uid}")
def insights(uid: str, engine: InfluenceEngine = Depends(get_engine)):
    return engine.insights(uid)


@router.post("/apply-influence/{uid}", response_model=InfluenceOutcome)
def apply_influence(
    uid: str, body: ApplyInfluenceRequest, engine: InfluenceEngine = Depends(get_engine),
):
    return engine.apply_influence(uid, body.influenceType, body.context)


@router.get("/influence-strategy/{uid}", response_model=Strategy)
def influence_strategy(uid: str, context: str = "", engine: InfluenceEngine = Depends(get_engine)):
    return engine.influence_strategy(uid, context)


@router.post("/influence/{uid}", response_model=InfluenceEvent)
def record_influence(
    uid: str, body: RecordInfluenceRequest, engine: InfluenceEngine = Depends(get_engine),
):
    return engine.record_influence(
        uid,
        body.influenceType.value,
        body.influenceStrength,
        body.playerResponse,
        body.effectivenessScore,
        body.context,
    )


@router.get("/influence-analytics/{uid}", response_model=InfluenceAnalytics)
def influence_analytics(uid: str, engine: InfluenceEngine = Depends(get_engine)):
    return engine.influence_analytics(uid)


@router.get("/abtest/{experiment_name}/assign/{uid}")
def assign_experiment(
    experiment_name: str, uid: str, engine: InfluenceEngine = Depends(get_engine),
):
    return engine.assign_experiment(uid, experiment_name).value


def create_app(engine: InfluenceEngine | None = None) -> FastAPI:
    """Build the FastAPI app around an engine (one is created from config if omitted)."""
    owns_engine = engine is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_engine:
            app.state.engine.close()

    app = FastAPI(title="Influence Engine", lifespan=lifespan)
    app.state.engine = engine or InfluenceEngine()
    app.add_middleware(
        CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"],
    )
    app.include_router(router)

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return "Backend is Online."

    @app.exception_handler(PersistenceError)
    async def persistence_error(request: Request, exc: PersistenceError):
        logger.error("Store failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": UNAVAILABLE})

    @app.exception_handler(MalformedActionDetail)
    async def malformed_detail(request: Request, exc: MalformedActionDetail):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(ProfileNotFound)
    async def profile_not_found(request: Request, exc: ProfileNotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    return app
