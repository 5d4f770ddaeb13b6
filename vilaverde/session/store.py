"""
Game Store - Host-owned mutable reference to the settlement state.

The engine exposes pure transitions; the store holds the single
committed GameState, the UI overlay flags that gate challenge
selection, and an append-only log of applied transitions.

Every operation is atomic: the reducer runs to completion and the
result is committed (or rejected) before the call returns. Readers
only ever see committed states.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import time
from typing import Callable

from ..catalog import BuildingCatalog, BuildingKind, create_default_catalog
from ..engine_core import (
    Action,
    ActionResult,
    ChallengeNotification,
    GameRules,
    GameState,
    GridPosition,
    Reducer,
    DEFAULT_RULES,
)

logger = logging.getLogger(__name__)


class Overlay(Enum):
    """Blocking UI overlays. While any is open, no challenge is offered."""
    WELCOME = "welcome"
    DASHBOARD = "dashboard"
    INDICATOR_INFO = "indicator_info"


@dataclass(frozen=True)
class TransitionRecord:
    """One entry of the applied-transition log."""
    action: Action
    success: bool
    turn: int
    error_code: str | None = None
    timestamp: float = 0.0


NotificationListener = Callable[[ChallengeNotification], None]


@dataclass
class GameStore:
    """
    Owns the authoritative GameState for one play session.

    Usage:
        store = GameStore()
        result = store.place_building(GridPosition(x=0, z=0), BuildingKind.SUSTAINABLE_HOUSE)
        if not result.success:
            show_error(result.error_code)
    """
    catalog: BuildingCatalog = field(default_factory=create_default_catalog)
    rules: GameRules = DEFAULT_RULES
    state: GameState = field(default_factory=GameState.initial)

    # The welcome screen is open until the player dismisses it
    open_overlays: set[Overlay] = field(default_factory=lambda: {Overlay.WELCOME})

    transitions: list[TransitionRecord] = field(default_factory=list)
    _listeners: list[NotificationListener] = field(default_factory=list)

    def __post_init__(self):
        self._reducer = Reducer(catalog=self.catalog, rules=self.rules)

    @property
    def overlay_open(self) -> bool:
        return bool(self.open_overlays)

    def subscribe(self, listener: NotificationListener) -> None:
        """Register a callback for challenge trigger/completion alerts."""
        self._listeners.append(listener)

    # =========================================================================
    # Transitions
    # =========================================================================

    def dispatch(self, action: Action) -> ActionResult:
        """Apply an action and commit the result if it succeeded."""
        action.timestamp = action.timestamp or time.time()
        result = self._reducer.apply(self.state, action)

        if result.success:
            self.state = result.new_state
        self.transitions.append(TransitionRecord(
            action=action,
            success=result.success,
            turn=self.state.current_turn,
            error_code=result.error_code.value if result.error_code else None,
            timestamp=action.timestamp,
        ))

        for notification in result.notifications:
            logger.info(
                "Challenge %s %s: %s",
                notification.challenge_id,
                notification.kind.value,
                notification.title,
            )
            for listener in self._listeners:
                listener(notification)

        return result

    def place_building(self, position: GridPosition, kind: BuildingKind | str) -> ActionResult:
        """Place a building from a placement intent."""
        action = Action.place(
            kind,
            x=position.x,
            z=position.z,
            y=position.y,
            overlay_open=self.overlay_open,
        )
        return self.dispatch(action)

    def close_challenge(self) -> ActionResult:
        return self.dispatch(Action.close_challenge(overlay_open=self.overlay_open))

    def select_building(self, building_id: str) -> ActionResult:
        return self.dispatch(Action.select_building(building_id))

    def close_building_info(self) -> ActionResult:
        return self.dispatch(Action.close_building_info())

    def open_overlay(self, overlay: Overlay | str) -> None:
        self.open_overlays.add(Overlay(overlay))

    def close_overlay(self, overlay: Overlay | str) -> ActionResult:
        """Close an overlay and let a pending challenge open if nothing else blocks."""
        self.open_overlays.discard(Overlay(overlay))
        return self.dispatch(Action.evaluate_challenges(overlay_open=self.overlay_open))

    # =========================================================================
    # Read projections
    # =========================================================================

    @property
    def available_kinds(self) -> list[BuildingKind]:
        """Available kinds in build-menu order."""
        return self.catalog.sort_kinds(self.state.available_buildings)

    def is_available(self, kind: BuildingKind | str) -> bool:
        try:
            return self.catalog.coerce_kind(kind) in self.state.available_buildings
        except KeyError:
            return False
