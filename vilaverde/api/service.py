"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to store/engine calls
2. Manages sessions
3. Rejects kinds the player has not unlocked (the engine leaves
   that to its caller)
4. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..catalog import (
    INDICATOR_INFO,
    Indicator,
    BuildingCatalog,
    BuildingDefinition,
    UnknownBuildingKind,
    create_default_catalog,
)
from ..engine_core import (
    ActionGenerator,
    ActionResult,
    ChallengeNotification,
    GridPosition,
    PlacedBuilding,
    indicator_trend,
    recent_history,
)
from ..engine_core.challenges import get_challenge
from ..session import SessionManager, Session, Overlay
from .schemas import (
    BuildingInfo,
    BuildMenuResponse,
    CatalogResponse,
    ChallengeInfo,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    HistoryPoint,
    HistoryResponse,
    IndicatorExplanation,
    IndicatorsInfo,
    NotificationInfo,
    PlaceBuildingRequest,
    PlacedBuildingInfo,
    PlacementResponse,
    PositionInfo,
    TransitionResponse,
    TrendDirection,
)

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        state = service.create_session(CreateSessionRequest())
        result = service.place_building(state.session_id, PlaceBuildingRequest(...))
    """
    catalog: BuildingCatalog = field(default_factory=create_default_catalog)
    session_manager: SessionManager | None = None

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(catalog=self.catalog)
        self._generator = ActionGenerator(catalog=self.catalog)

    # =========================================================================
    # Catalog
    # =========================================================================

    def get_catalog(self) -> CatalogResponse:
        return CatalogResponse(buildings=[self._building_info(d) for d in self.catalog])

    def get_indicator_info(self) -> list[IndicatorExplanation]:
        return [
            IndicatorExplanation(
                indicator=indicator.value,
                title=info.title,
                explanation=info.explanation,
                how_to_improve=info.how_to_improve,
                positive_buildings=[k.value for k in info.positive_buildings],
                what_worsens=info.what_worsens,
                negative_buildings=[k.value for k in info.negative_buildings],
            )
            for indicator, info in INDICATOR_INFO.items()
        ]

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> GameStateResponse:
        session = self.session_manager.create_session(
            player_name=request.player_name,
            skip_welcome=request.skip_welcome,
        )
        return self._state_response(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._state_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Gameplay
    # =========================================================================

    def place_building(
        self, session_id: str, request: PlaceBuildingRequest
    ) -> PlacementResponse | ErrorResponse:
        """Apply a placement intent to a session's store."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        store = session.store

        try:
            kind = self.catalog.coerce_kind(request.kind)
        except UnknownBuildingKind:
            return PlacementResponse(
                success=False,
                error=f"Unknown building kind: {request.kind}",
                error_code=ErrorCode.UNKNOWN_KIND,
            )

        if not store.is_available(kind):
            return PlacementResponse(
                success=False,
                error=f"{self.catalog.definition_of(kind).name} is not unlocked yet",
                error_code=ErrorCode.KIND_LOCKED,
            )

        result = store.place_building(GridPosition(x=request.x, z=request.z, y=request.y), kind)
        if not result.success:
            return PlacementResponse(
                success=False,
                error=result.error,
                error_code=ErrorCode(result.error_code.value),
            )

        building = result.new_state.placed_buildings[-1]
        return PlacementResponse(
            success=True,
            building=self._placed_info(building),
            newly_unlocked=[k.value for k in result.newly_unlocked],
            state_changes=result.state_changes,
            notifications=self._notifications(result),
            game_state=self._state_response(session),
        )

    def close_challenge(self, session_id: str) -> TransitionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        result = session.store.close_challenge()
        if not result.success:
            return ErrorResponse(error=result.error, error_code=ErrorCode.NO_ACTIVE_CHALLENGE)
        return self._transition_response(session, result)

    def set_overlay(
        self, session_id: str, overlay: str, is_open: bool
    ) -> TransitionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        try:
            overlay_key = Overlay(overlay)
        except ValueError:
            return ErrorResponse(
                error=f"Unknown overlay: {overlay}",
                error_code=ErrorCode.UNKNOWN_OVERLAY,
                details={"allowed": [o.value for o in Overlay]},
            )

        if is_open:
            session.store.open_overlay(overlay_key)
            return TransitionResponse(success=True, game_state=self._state_response(session))

        result = session.store.close_overlay(overlay_key)
        return self._transition_response(session, result)

    def select_building(self, session_id: str, building_id: str) -> TransitionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        result = session.store.select_building(building_id)
        if not result.success:
            return ErrorResponse(error=result.error, error_code=ErrorCode.UNKNOWN_BUILDING)
        return self._transition_response(session, result)

    def close_building_info(self, session_id: str) -> TransitionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        return self._transition_response(session, session.store.close_building_info())

    def get_history(self, session_id: str, last: int | None = None) -> HistoryResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        history = session.store.state.history
        points = recent_history(history, last) if last is not None else list(history)
        return HistoryResponse(
            session_id=session_id,
            history=[
                HistoryPoint(turn=p.turn, indicators=IndicatorsInfo(**p.indicators.to_dict()))
                for p in points
            ],
        )

    def get_build_menu(self, session_id: str) -> BuildMenuResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._session_not_found(session_id)
        state = session.store.state
        buildings = [
            self._building_info(entry.definition, available=True, affordable=entry.affordable)
            for entry in self._generator.placeable_kinds(state)
        ]
        return BuildMenuResponse(
            session_id=session_id,
            buildings=buildings,
            free_cell_count=len(self._generator.free_cells(state)),
        )

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def _session_not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _building_info(
        self, definition: BuildingDefinition, available: bool = False, affordable: bool = False
    ) -> BuildingInfo:
        return BuildingInfo(
            kind=definition.kind.value,
            name=definition.name,
            description=definition.description,
            effects=definition.effects.to_dict(),
            available=available,
            affordable=affordable,
        )

    def _placed_info(self, building: PlacedBuilding) -> PlacedBuildingInfo:
        return PlacedBuildingInfo(
            building_id=building.building_id,
            kind=building.kind.value,
            name=self.catalog.definition_of(building.kind).name,
            position=PositionInfo(**building.position.to_dict()),
        )

    def _notifications(self, result: ActionResult) -> list[NotificationInfo]:
        notifications: list[ChallengeNotification] = result.notifications
        return [
            NotificationInfo(
                kind=n.kind.value,
                challenge_id=n.challenge_id,
                title=n.title,
                text=n.text,
                reward=n.reward,
            )
            for n in notifications
        ]

    def _transition_response(self, session: Session, result: ActionResult) -> TransitionResponse:
        return TransitionResponse(
            success=result.success,
            notifications=self._notifications(result),
            game_state=self._state_response(session),
        )

    def _state_response(self, session: Session) -> GameStateResponse:
        store = session.store
        state = store.state

        current_challenge = None
        challenge = get_challenge(state.current_challenge_id)
        if challenge is not None:
            current_challenge = ChallengeInfo(
                challenge_id=challenge.challenge_id.value,
                title=challenge.text.title,
                description=challenge.text.description,
                reward=challenge.text.reward,
            )

        return GameStateResponse(
            session_id=session.session_id,
            player_name=session.player_name,
            current_turn=state.current_turn,
            indicators=IndicatorsInfo(**state.indicators.to_dict()),
            trends={
                indicator.value: TrendDirection(indicator_trend(state.history, indicator).value)
                for indicator in Indicator
            },
            placed_buildings=[self._placed_info(b) for b in state.placed_buildings],
            available_buildings=[k.value for k in store.available_kinds],
            unlocked_terrain_areas=state.unlocked_terrain_areas,
            terrain_limit=state.terrain_limit(store.rules),
            current_challenge=current_challenge,
            completed_challenge_ids=sorted(state.completed_challenge_ids),
            selected_building_id=state.selected_building_id,
            open_overlays=sorted(o.value for o in store.open_overlays),
        )
