"""FastAPI application exposing the narrative engine over HTTP."""

from __future__ import annotations

import logging
from typing import Dict, List, NoReturn

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..engine import NarrativeEngine
from ..errors import EngineError
from ..session import describe_error
from ..settings import EngineSettings
from ..state import PlayerState

logger = logging.getLogger(__name__)

_USER_ERROR_STATUS = 409
_CONTENT_ERROR_STATUS = 500


class GameStateResource(BaseModel):
    """Wire representation of a :class:`~storypath.state.PlayerState`."""

    model_config = ConfigDict(populate_by_name=True)

    location_id: str = Field(alias="locationId", min_length=1)
    location_name: str = Field(alias="locationName", min_length=1)
    image_url: str = Field(alias="imageUrl", default="")
    scene_id: str = Field(alias="sceneId", min_length=1)
    narrative: str = Field(min_length=1)
    actions: List[str] = Field(default_factory=list)
    inventory: List[str] = Field(default_factory=list)
    flags: Dict[str, bool] = Field(default_factory=dict)

    @classmethod
    def from_state(cls, state: PlayerState) -> "GameStateResource":
        return cls.model_validate(state.to_payload())

    def to_state(self) -> PlayerState:
        return PlayerState.from_payload(self.model_dump(by_alias=True))


class ActionRequest(BaseModel):
    state: GameStateResource
    action: str = Field(min_length=1)


class ItemUseRequest(BaseModel):
    state: GameStateResource
    item: str = Field(min_length=1)


class HealthResponse(BaseModel):
    status: str = "ok"


def _to_player_state(resource: GameStateResource) -> PlayerState:
    try:
        return resource.to_state()
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _raise_for_error(error: EngineError, state: PlayerState) -> NoReturn:
    where = f"{state.location_id}/{state.scene_id}"
    if error.recoverable:
        status_code = _USER_ERROR_STATUS
        logger.info("Rejected turn at %s: %s", where, error)
    else:
        status_code = _CONTENT_ERROR_STATUS
        logger.error("Engine failure at %s: %s", where, error)

    raise HTTPException(
        status_code=status_code,
        detail={
            "error": error.kind.value,
            "message": error.message,
            "display": describe_error(error),
        },
    )


def create_app(
    engine: NarrativeEngine | None = None,
    *,
    settings: EngineSettings | None = None,
) -> FastAPI:
    """Create a FastAPI app serving the story described by ``settings``.

    The service is stateless: clients send their current ``GameState`` with
    every intent and receive the next one in the response.
    """

    if engine is None:
        resolved_settings = settings or EngineSettings.from_env()
        engine = NarrativeEngine(resolved_settings.load_registry())

    story_engine = engine

    app = FastAPI(
        title="Storypath Narrative API",
        version="0.1.0",
        description=(
            "Stateless HTTP API for playing authored choose-your-own-adventure "
            "stories. Each request carries the caller's game state."
        ),
    )

    @app.get("/api/health", response_model=HealthResponse, tags=["Service"])
    def health() -> HealthResponse:
        return HealthResponse()

    @app.post("/api/game", response_model=GameStateResource, tags=["Game"])
    def start_game() -> GameStateResource:
        return GameStateResource.from_state(story_engine.initialize())

    @app.post("/api/game/action", response_model=GameStateResource, tags=["Game"])
    def perform_action(request: ActionRequest) -> GameStateResource:
        state = _to_player_state(request.state)
        result = story_engine.apply_action(state, request.action)
        if isinstance(result, EngineError):
            _raise_for_error(result, state)
        return GameStateResource.from_state(result)

    @app.post("/api/game/item", response_model=GameStateResource, tags=["Game"])
    def use_item(request: ItemUseRequest) -> GameStateResource:
        state = _to_player_state(request.state)
        result = story_engine.apply_item_use(state, request.item)
        if isinstance(result, EngineError):
            _raise_for_error(result, state)
        return GameStateResource.from_state(result)

    return app


__all__ = [
    "ActionRequest",
    "GameStateResource",
    "ItemUseRequest",
    "create_app",
]
