"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between UI clients and the engine.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- UNKNOWN_KIND: Building kind not in the catalog
- KIND_LOCKED: Building kind not yet unlocked
- OUT_OF_BOUNDS: Cell outside the unlocked terrain
- CELL_OCCUPIED: Cell already has a building
- INSUFFICIENT_ENERGY: Not enough energy balance for the building
- NO_ACTIVE_CHALLENGE: Nothing to close
- UNKNOWN_OVERLAY: Overlay name not recognised
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_KIND = "UNKNOWN_KIND"
    KIND_LOCKED = "KIND_LOCKED"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    CELL_OCCUPIED = "CELL_OCCUPIED"
    INSUFFICIENT_ENERGY = "INSUFFICIENT_ENERGY"
    NO_ACTIVE_CHALLENGE = "NO_ACTIVE_CHALLENGE"
    UNKNOWN_BUILDING = "UNKNOWN_BUILDING"
    UNKNOWN_OVERLAY = "UNKNOWN_OVERLAY"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class NotificationKind(str, Enum):
    TRIGGERED = "triggered"
    COMPLETED = "completed"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


# =============================================================================
# Shared Models
# =============================================================================

class PositionInfo(BaseModel):
    """Grid position in world units; y is ground level."""
    x: int
    y: int = 0
    z: int


class IndicatorsInfo(BaseModel):
    """Indicator snapshot for the top bar."""
    air_quality: int
    water_quality: int
    community_happiness: int
    biodiversity: int
    energy_balance: int
    food_supply: int
    population: int

    model_config = {"from_attributes": True}


class BuildingInfo(BaseModel):
    """Catalog entry for the build menu."""
    kind: str
    name: str
    description: str
    effects: dict[str, int] = Field(default_factory=dict)
    available: bool = False
    affordable: bool = False


class PlacedBuildingInfo(BaseModel):
    building_id: str
    kind: str
    name: str
    position: PositionInfo


class HistoryPoint(BaseModel):
    turn: int
    indicators: IndicatorsInfo


class ChallengeInfo(BaseModel):
    """The currently displayed challenge."""
    challenge_id: str
    title: str
    description: str
    reward: str


class NotificationInfo(BaseModel):
    """Single-shot alert for a challenge trigger or completion."""
    kind: NotificationKind
    challenge_id: str
    title: str
    text: str
    reward: str


class IndicatorExplanation(BaseModel):
    indicator: str
    title: str
    explanation: str
    how_to_improve: str
    positive_buildings: list[str] = Field(default_factory=list)
    what_worsens: Optional[str] = None
    negative_buildings: list[str] = Field(default_factory=list)


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new play session."""
    player_name: str = Field("Player", description="Display name for the player")
    skip_welcome: bool = Field(False, description="Start with the welcome screen dismissed")


class PlaceBuildingRequest(BaseModel):
    """A placement intent, pre-snapped to the grid."""
    kind: str = Field(..., description="Building kind, e.g. sustainable_house")
    x: int = Field(..., description="World x, a multiple of the cell size")
    y: int = Field(0, description="Always ground level")
    z: int = Field(..., description="World z, a multiple of the cell size")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")


class GameStateResponse(BaseModel):
    """Full committed state of a session."""
    session_id: str
    player_name: str
    current_turn: int
    indicators: IndicatorsInfo
    trends: dict[str, TrendDirection] = Field(default_factory=dict)
    placed_buildings: list[PlacedBuildingInfo] = Field(default_factory=list)
    available_buildings: list[str] = Field(default_factory=list)
    unlocked_terrain_areas: int = 0
    terrain_limit: int = 0
    current_challenge: Optional[ChallengeInfo] = None
    completed_challenge_ids: list[str] = Field(default_factory=list)
    selected_building_id: Optional[str] = None
    open_overlays: list[str] = Field(default_factory=list)
    api_version: str = "v1"


class PlacementResponse(BaseModel):
    """Result of a placement intent."""
    success: bool
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    building: Optional[PlacedBuildingInfo] = None
    newly_unlocked: list[str] = Field(default_factory=list)
    state_changes: list[str] = Field(default_factory=list)
    notifications: list[NotificationInfo] = Field(default_factory=list)
    game_state: Optional[GameStateResponse] = None


class TransitionResponse(BaseModel):
    """Result of a UI acknowledgement (close challenge, overlays)."""
    success: bool
    notifications: list[NotificationInfo] = Field(default_factory=list)
    game_state: GameStateResponse


class HistoryResponse(BaseModel):
    session_id: str
    history: list[HistoryPoint]


class BuildMenuResponse(BaseModel):
    session_id: str
    buildings: list[BuildingInfo]
    free_cell_count: int


class CatalogResponse(BaseModel):
    buildings: list[BuildingInfo]


class SessionListResponse(BaseModel):
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
