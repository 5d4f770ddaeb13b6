"""
API Module - Client interface.

Exposes the engine via REST API. A client:
1. Creates a session
2. Sends placement intents from its rendering/input layer
3. Reads indicators, history and the build menu after each turn
4. Acknowledges challenges and reports blocking overlays

All state is session-scoped. No persistence.
"""

from .schemas import (
    CreateSessionRequest,
    PlaceBuildingRequest,
    GameStateResponse,
    PlacementResponse,
    TransitionResponse,
    ErrorResponse,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    "CreateSessionRequest",
    "PlaceBuildingRequest",
    "GameStateResponse",
    "PlacementResponse",
    "TransitionResponse",
    "ErrorResponse",
    "ErrorCode",
    "APIService",
    "create_app",
]
