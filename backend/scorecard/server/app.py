"""
Scoring HTTP API.

A thin JSON surface over the scoring service for the rendering layer: the
caller posts the persisted record(s) and receives computed standings. The
API is stateless; records are owned and stored by the caller.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from scorecard.logic.exceptions import ScoreCardError
from scorecard.logic.registry import build_registry
from scorecard.logic.service import ScoringService
from scorecard.logic.settings import DEFAULT_SCORING_SETTINGS
from scorecard.logic.types import GameRecord
from scorecard.server.settings import EngineSettings
from scorecard.server.types import EveningSummaryRequest
from shared.logging import setup_logging

if TYPE_CHECKING:
    from pydantic import BaseModel
    from starlette.requests import Request

    from scorecard.logic.settings import ScoringSettings

logger = structlog.get_logger()

_MAX_REQUEST_BODY_SIZE = 256 * 1024


def build_service(
    settings: EngineSettings,
    scoring_settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
) -> ScoringService:
    """Wire the registry (YAML overrides, enabled list) and tie-break seed into a service."""
    registry = build_registry(
        config_path=settings.game_types_config,
        enabled=settings.enabled_game_types,
        settings=scoring_settings,
    )
    return ScoringService(registry, scoring_settings, settings.tie_break_seed)


async def _parse_body[ModelT: BaseModel](request: Request, model: type[ModelT]) -> ModelT | JSONResponse:
    raw_body = await request.body()
    if len(raw_body) > _MAX_REQUEST_BODY_SIZE:
        return JSONResponse({"error": "Request body too large"}, status_code=413)
    try:
        return model.model_validate(json.loads(raw_body))
    except (ValueError, TypeError, json.JSONDecodeError, UnicodeDecodeError, ValidationError):  # fmt: skip
        return JSONResponse({"error": "Invalid request body"}, status_code=400)


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def game_types(request: Request) -> JSONResponse:
    service: ScoringService = request.app.state.service
    registry = service.registry
    return JSONResponse(
        [
            {
                "gameType": config.game_type.value,
                "label": config.label,
                "minPlayers": config.min_players,
                "maxPlayers": config.max_players,
            }
            for config in map(registry.get, registry.game_types())
        ],
    )


async def scores(request: Request) -> JSONResponse:
    service: ScoringService = request.app.state.service
    record = await _parse_body(request, GameRecord)
    if isinstance(record, JSONResponse):
        return record
    try:
        result = service.calculate_scores(record)
    except ScoreCardError as e:
        return JSONResponse({"error": str(e)}, status_code=422)
    return JSONResponse(result.to_wire())


async def evening_summary(request: Request) -> JSONResponse:
    service: ScoringService = request.app.state.service
    body = await _parse_body(request, EveningSummaryRequest)
    if isinstance(body, JSONResponse):
        return body
    try:
        summary = service.evening_summary(body.records, body.all_player_ids, container_id=body.container_id)
    except ScoreCardError as e:
        return JSONResponse({"error": str(e)}, status_code=422)
    return JSONResponse(summary.to_wire())


def create_app(
    settings: EngineSettings | None = None,
    service: ScoringService | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = EngineSettings()

    if service is None:
        service = build_service(settings)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/game-types", game_types, methods=["GET"]),
        Route("/scores", scores, methods=["POST"]),
        Route("/evening-summary", evening_summary, methods=["POST"]),
    ]

    app = Starlette(routes=routes)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.service = service

    logger.info("scorecard api ready", game_types=service.registry.game_types())
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    _settings = EngineSettings()
    setup_logging(log_dir=_settings.log_dir)
    return create_app(settings=_settings)
