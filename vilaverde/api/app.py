"""
FastAPI Application - REST API for UI clients.

Endpoints:
    GET    /api/v1/catalog                              Building catalog
    GET    /api/v1/indicators/info                      Indicator explanations
    POST   /api/v1/sessions                             Create session
    GET    /api/v1/sessions                             List sessions
    GET    /api/v1/sessions/{id}                        Get game state
    DELETE /api/v1/sessions/{id}                        End session
    POST   /api/v1/sessions/{id}/buildings              Place a building
    GET    /api/v1/sessions/{id}/placements             Build menu
    POST   /api/v1/sessions/{id}/buildings/{bid}/select Open building info
    POST   /api/v1/sessions/{id}/buildings/info/close   Close building info
    POST   /api/v1/sessions/{id}/challenge/close        Close active challenge
    POST   /api/v1/sessions/{id}/overlays/{name}/open   Open a blocking overlay
    POST   /api/v1/sessions/{id}/overlays/{name}/close  Close a blocking overlay
    GET    /api/v1/sessions/{id}/history                Indicator history

Placement rejections never change state. They are returned with a
structured error code and an HTTP status:
    400 UNKNOWN_KIND, 404 SESSION_NOT_FOUND, 409 CELL_OCCUPIED /
    INSUFFICIENT_ENERGY / KIND_LOCKED, 422 OUT_OF_BOUNDS
"""

from typing import Annotated, Optional, Union
import logging
import os

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from .service import APIService
from .schemas import (
    BuildMenuResponse,
    CatalogResponse,
    CreateSessionRequest,
    EndSessionResponse,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    HistoryResponse,
    IndicatorExplanation,
    PlaceBuildingRequest,
    PlacementResponse,
    SessionListResponse,
    TransitionResponse,
)

# Environment configuration
VILAVERDE_ENV = os.getenv("VILAVERDE_ENV", "development")
VILAVERDE_LOG_LEVEL = os.getenv("VILAVERDE_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.UNKNOWN_KIND: 400,
    ErrorCode.UNKNOWN_OVERLAY: 400,
    ErrorCode.UNKNOWN_BUILDING: 404,
    ErrorCode.KIND_LOCKED: 409,
    ErrorCode.CELL_OCCUPIED: 409,
    ErrorCode.INSUFFICIENT_ENERGY: 409,
    ErrorCode.NO_ACTIVE_CHALLENGE: 409,
    ErrorCode.OUT_OF_BOUNDS: 422,
}


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Vila Verde Engine API",
        description="""
Sustainable settlement simulation.

Place buildings on the grid; every successful placement advances one turn,
recomputes indicators, unlocks building kinds and terrain, and may open or
complete a challenge. Notifications in the response are single-shot alerts.

## Error Codes

| Code | Description |
|------|-------------|
| `UNKNOWN_KIND` | Building kind not in the catalog |
| `KIND_LOCKED` | Building kind not unlocked yet |
| `OUT_OF_BOUNDS` | Cell outside the unlocked terrain |
| `CELL_OCCUPIED` | Cell already has a building |
| `INSUFFICIENT_ENERGY` | Energy balance too low |
| `SESSION_NOT_FOUND` | Session does not exist |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=ERROR_STATUS.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/catalog",
        response_model=CatalogResponse,
        tags=["Catalog"],
        summary="List every building kind and its effects",
    )
    async def get_catalog() -> CatalogResponse:
        return api_service.get_catalog()

    @app.get(
        "/api/v1/indicators/info",
        response_model=list[IndicatorExplanation],
        tags=["Catalog"],
        summary="Explanations shown by the indicator info panel",
    )
    async def get_indicator_info() -> list[IndicatorExplanation]:
        return api_service.get_indicator_info()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=GameStateResponse,
        tags=["Sessions"],
        summary="Create a new play session",
    )
    async def create_session(request: CreateSessionRequest) -> GameStateResponse:
        return api_service.create_session(request)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get the committed game state",
    )
    async def get_session(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session and delete its state",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Gameplay Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/buildings",
        response_model=PlacementResponse,
        responses={
            400: {"model": PlacementResponse, "description": "Unknown building kind"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": PlacementResponse, "description": "Occupied, locked or unaffordable"},
            422: {"model": PlacementResponse, "description": "Outside unlocked terrain"},
        },
        tags=["Gameplay"],
        summary="Place a building (advances one turn on success)",
    )
    async def place_building(
        session_id: str, request: PlaceBuildingRequest
    ) -> Union[PlacementResponse, JSONResponse]:
        response = api_service.place_building(session_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        if not response.success:
            return JSONResponse(
                status_code=ERROR_STATUS.get(response.error_code, 400),
                content=response.model_dump(mode="json"),
            )
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/placements",
        response_model=BuildMenuResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Gameplay"],
        summary="Available kinds with affordability",
    )
    async def get_build_menu(session_id: str) -> Union[BuildMenuResponse, JSONResponse]:
        response = api_service.get_build_menu(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/buildings/info/close",
        response_model=TransitionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Gameplay"],
        summary="Close the building info panel",
    )
    async def close_building_info(session_id: str) -> Union[TransitionResponse, JSONResponse]:
        response = api_service.close_building_info(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/buildings/{building_id}/select",
        response_model=TransitionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Gameplay"],
        summary="Select a placed building for the info panel",
    )
    async def select_building(
        session_id: str, building_id: str
    ) -> Union[TransitionResponse, JSONResponse]:
        response = api_service.select_building(session_id, building_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/challenge/close",
        response_model=TransitionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Challenges"],
        summary="Close the active challenge without completing it",
    )
    async def close_challenge(session_id: str) -> Union[TransitionResponse, JSONResponse]:
        response = api_service.close_challenge(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/overlays/{overlay}/{operation}",
        response_model=TransitionResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Challenges"],
        summary="Open or close a blocking overlay (welcome, dashboard, indicator_info)",
    )
    async def set_overlay(
        session_id: str, overlay: str, operation: str
    ) -> Union[TransitionResponse, JSONResponse]:
        if operation not in ("open", "close"):
            return make_error_response(ErrorResponse(
                error=f"Unknown overlay operation: {operation}",
                error_code=ErrorCode.VALIDATION_ERROR,
                details={"allowed": ["open", "close"]},
            ))
        response = api_service.set_overlay(session_id, overlay, is_open=operation == "open")
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/history",
        response_model=HistoryResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Dashboard"],
        summary="Indicator history, optionally only the last N turns",
    )
    async def get_history(
        session_id: str,
        last: Annotated[Optional[int], Query(ge=1, description="Only the last N turns")] = None,
    ) -> Union[HistoryResponse, JSONResponse]:
        response = api_service.get_history(session_id, last)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="vilaverde-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Vila Verde Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    logger.info("API created (env=%s)", VILAVERDE_ENV)
    return app


# For running directly: uvicorn vilaverde.api.app:app
app = create_app()
