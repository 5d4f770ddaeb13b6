"""
Action System - Actions, payloads, and results.

Actions represent:
1. Placement intents from the rendering/input layer
2. UI acknowledgements (close challenge, close info panel)
3. Re-evaluation requests when a blocking overlay closes

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..catalog import BuildingKind
from .state import GridPosition


class ActionType(Enum):
    """Types of actions in the system."""
    PLACE_BUILDING = "place_building"

    # UI acknowledgements
    CLOSE_CHALLENGE = "close_challenge"
    SELECT_BUILDING_INFO = "select_building_info"
    CLOSE_BUILDING_INFO = "close_building_info"

    # Overlay closed; challenge selection may run again
    EVALUATE_CHALLENGES = "evaluate_challenges"


class RejectionCode(str, Enum):
    """Why a placement was rejected. Rejections leave state unchanged."""
    INSUFFICIENT_ENERGY = "INSUFFICIENT_ENERGY"
    CELL_OCCUPIED = "CELL_OCCUPIED"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    UNKNOWN_KIND = "UNKNOWN_KIND"

    # Non-placement actions
    NO_ACTIVE_CHALLENGE = "NO_ACTIVE_CHALLENGE"
    UNKNOWN_BUILDING = "UNKNOWN_BUILDING"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    """
    position: GridPosition | None = None
    kind: BuildingKind | str | None = None
    building_id: str | None = None

    # Whether any blocking overlay (dashboard, info panel, welcome) is open.
    # Gates challenge selection and nothing else.
    overlay_open: bool = False


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Logged by the store
    - Validated before application
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None

    @classmethod
    def place(
        cls,
        kind: BuildingKind | str,
        x: int,
        z: int,
        y: int = 0,
        overlay_open: bool = False,
    ) -> Action:
        """Factory for a placement intent."""
        return cls(
            action_type=ActionType.PLACE_BUILDING,
            payload=ActionPayload(
                position=GridPosition(x=x, z=z, y=y),
                kind=kind,
                overlay_open=overlay_open,
            ),
        )

    @classmethod
    def close_challenge(cls, overlay_open: bool = False) -> Action:
        return cls(
            action_type=ActionType.CLOSE_CHALLENGE,
            payload=ActionPayload(overlay_open=overlay_open),
        )

    @classmethod
    def evaluate_challenges(cls, overlay_open: bool = False) -> Action:
        return cls(
            action_type=ActionType.EVALUATE_CHALLENGES,
            payload=ActionPayload(overlay_open=overlay_open),
        )

    @classmethod
    def select_building(cls, building_id: str) -> Action:
        return cls(
            action_type=ActionType.SELECT_BUILDING_INFO,
            payload=ActionPayload(building_id=building_id),
        )

    @classmethod
    def close_building_info(cls) -> Action:
        return cls(action_type=ActionType.CLOSE_BUILDING_INFO)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Error and rejection code (if failed)
    - Side effects for the UI (changes, notifications, unlocks)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: RejectionCode | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)  # Human-readable changes
    notifications: list[Any] = field(default_factory=list)  # ChallengeNotification
    newly_unlocked: list[BuildingKind] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: RejectionCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        notifications: list[Any] | None = None,
        newly_unlocked: list[BuildingKind] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            notifications=notifications or [],
            newly_unlocked=newly_unlocked or [],
        )
