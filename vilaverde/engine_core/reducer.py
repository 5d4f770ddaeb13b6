"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying; a rejected action never touches state
- Returns ActionResult with success/failure
- A placement runs to completion: indicators -> unlocks -> history ->
  challenge completion -> challenge selection
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
import logging
import uuid
from typing import Sequence

from ..catalog import BuildingCatalog, BuildingKind, UnknownBuildingKind, create_default_catalog
from .action import Action, ActionType, ActionResult, RejectionCode
from .challenges import Challenge, CHALLENGES, check_completion, select_challenge, close_challenge
from .indicators import recompute_indicators
from .progression import derive_unlocks
from .rules import GameRules, DEFAULT_RULES
from .state import GameState, GridPosition, HistoricDataPoint, PlacedBuilding

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    The catalog provides building effects, the rules provide geometry.
    """
    catalog: BuildingCatalog = field(default_factory=create_default_catalog)
    challenges: Sequence[Challenge] = CHALLENGES
    rules: GameRules = DEFAULT_RULES

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        handler = self._get_handler(action.action_type)
        return handler(state, action)

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PLACE_BUILDING: self._handle_place_building,
            ActionType.CLOSE_CHALLENGE: self._handle_close_challenge,
            ActionType.EVALUATE_CHALLENGES: self._handle_evaluate_challenges,
            ActionType.SELECT_BUILDING_INFO: self._handle_select_building,
            ActionType.CLOSE_BUILDING_INFO: self._handle_close_building_info,
        }
        return handlers[action_type]

    # =========================================================================
    # Placement
    # =========================================================================

    def validate_placement(
        self, state: GameState, kind: BuildingKind | str | None, position: GridPosition | None
    ) -> ActionResult | None:
        """
        Check placement preconditions.

        Returns a failure result if any precondition is violated, None if valid.

        The settlement's first building skips the energy check: the baseline
        balance is 0, and a first house (energy -1) must still be placeable.
        Solar arrays produce energy and are never checked.
        """
        try:
            definition = self.catalog.definition_of(kind)
        except UnknownBuildingKind:
            return ActionResult.failure(
                f"Unknown building kind: {kind!r}",
                error_code=RejectionCode.UNKNOWN_KIND,
            )

        if position is None or not state.within_terrain(position, self.rules):
            limit = state.terrain_limit(self.rules)
            return ActionResult.failure(
                f"Cannot build outside unlocked terrain (|x|, |z| < {limit})",
                error_code=RejectionCode.OUT_OF_BOUNDS,
            )

        if state.is_occupied(position):
            return ActionResult.failure(
                f"Cell ({position.x}, {position.z}) is occupied",
                error_code=RejectionCode.CELL_OCCUPIED,
            )

        cost = definition.energy_cost
        exempt = definition.kind == BuildingKind.SOLAR_PANEL_ARRAY or not state.placed_buildings
        if cost and not exempt and state.indicators.energy_balance < cost:
            return ActionResult.failure(
                f"Insufficient energy to build {definition.name}: "
                f"needs {cost}, balance is {state.indicators.energy_balance}",
                error_code=RejectionCode.INSUFFICIENT_ENERGY,
            )

        return None

    def _handle_place_building(self, state: GameState, action: Action) -> ActionResult:
        """Handle a placement intent."""
        payload = action.payload
        rejection = self.validate_placement(state, payload.kind, payload.position)
        if rejection:
            logger.info("Placement rejected (%s): %s", rejection.error_code.value, rejection.error)
            return rejection

        definition = self.catalog.definition_of(payload.kind)
        kind = definition.kind
        position = replace(payload.position, y=0)
        building = PlacedBuilding(
            building_id=f"{kind.value}-{uuid.uuid4().hex[:12]}",
            kind=kind,
            position=position,
        )

        buildings = state.placed_buildings + (building,)
        turn = state.current_turn + 1
        indicators = recompute_indicators(buildings, self.catalog, self.rules)
        unlocks = derive_unlocks(
            buildings,
            indicators,
            state.available_buildings,
            state.unlocked_terrain_areas,
            self.rules,
        )

        new_state = replace(
            state,
            placed_buildings=buildings,
            indicators=indicators,
            available_buildings=unlocks.available,
            unlocked_terrain_areas=unlocks.terrain,
            history=state.history + (HistoricDataPoint(turn=turn, indicators=indicators),),
            current_turn=turn,
            acknowledged_challenge_id=None,
            selected_building_id=None,
        )

        changes = [f"Placed {definition.name} at ({position.x}, {position.z}) on turn {turn}"]
        for unlocked in unlocks.newly_unlocked:
            changes.append(f"Unlocked {self.catalog.definition_of(unlocked).name}")
        if unlocks.terrain > state.unlocked_terrain_areas:
            changes.append(f"Terrain expanded to {unlocks.terrain} extra ring(s)")

        new_state, notifications = check_completion(new_state, self.challenges)
        if not notifications:
            new_state, notifications = select_challenge(
                new_state, self.challenges, overlay_open=payload.overlay_open
            )

        logger.debug(
            "Turn %d: %s placed, unlocked=%s, terrain=%d, challenge=%s",
            turn,
            kind.value,
            [k.value for k in unlocks.newly_unlocked],
            unlocks.terrain,
            new_state.current_challenge_id,
        )

        return ActionResult.success_with_state(
            new_state,
            changes=changes,
            notifications=notifications,
            newly_unlocked=list(unlocks.newly_unlocked),
        )

    # =========================================================================
    # Challenges
    # =========================================================================

    def _handle_close_challenge(self, state: GameState, action: Action) -> ActionResult:
        """Close the active challenge without completing it."""
        if not state.has_active_challenge:
            return ActionResult.failure(
                "No challenge is active",
                error_code=RejectionCode.NO_ACTIVE_CHALLENGE,
            )
        closed_id = state.current_challenge_id
        new_state = close_challenge(state)
        # Closing frees the slot; another eligible challenge may open
        new_state, notifications = select_challenge(
            new_state, self.challenges, overlay_open=action.payload.overlay_open
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Challenge {closed_id} acknowledged for turn {state.current_turn}"],
            notifications=notifications,
        )

    def _handle_evaluate_challenges(self, state: GameState, action: Action) -> ActionResult:
        """Run completion and selection without advancing the turn."""
        new_state, notifications = check_completion(state, self.challenges)
        if not notifications:
            new_state, notifications = select_challenge(
                new_state, self.challenges, overlay_open=action.payload.overlay_open
            )
        return ActionResult.success_with_state(new_state, notifications=notifications)

    # =========================================================================
    # Building info panel
    # =========================================================================

    def _handle_select_building(self, state: GameState, action: Action) -> ActionResult:
        building_id = action.payload.building_id
        if state.get_building(building_id) is None:
            return ActionResult.failure(
                f"Building {building_id} not found",
                error_code=RejectionCode.UNKNOWN_BUILDING,
            )
        return ActionResult.success_with_state(
            replace(state, selected_building_id=building_id),
            changes=[f"Selected {building_id}"],
        )

    def _handle_close_building_info(self, state: GameState, action: Action) -> ActionResult:
        return ActionResult.success_with_state(replace(state, selected_building_id=None))


def apply_action(
    state: GameState,
    action: Action,
    catalog: BuildingCatalog | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(catalog=catalog or create_default_catalog())
    return reducer.apply(state, action)


def place_building(
    state: GameState,
    position: GridPosition,
    kind: BuildingKind | str,
    catalog: BuildingCatalog | None = None,
    overlay_open: bool = False,
) -> ActionResult:
    """Place a building; `(state, intent) -> state | rejection`."""
    action = Action.place(kind, x=position.x, z=position.z, y=position.y, overlay_open=overlay_open)
    return apply_action(state, action, catalog)
