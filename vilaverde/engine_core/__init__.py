"""
Engine Core - Deterministic settlement simulation and progression.

The engine is the runtime that:
1. Recomputes indicators from placed buildings
2. Derives unlocks of building kinds and terrain
3. Records a turn-indexed history
4. Runs the challenge state machine
5. Applies actions via the reducer
"""

from .rules import GameRules, DEFAULT_RULES
from .indicators import (
    IndicatorSnapshot,
    INITIAL_INDICATORS,
    Trend,
    recompute_indicators,
    indicator_trend,
    recent_history,
)
from .state import GameState, GridPosition, PlacedBuilding, HistoricDataPoint
from .action import Action, ActionType, ActionPayload, ActionResult, RejectionCode
from .progression import UnlockResult, derive_unlocks
from .challenges import (
    Challenge,
    ChallengeId,
    ChallengeNotification,
    NotificationKind,
    CHALLENGES,
    trigger_met,
    goal_met,
    select_challenge,
    check_completion,
    close_challenge,
)
from .reducer import Reducer, apply_action, place_building
from .action_generator import ActionGenerator, PlaceableKind, legal_actions

__all__ = [
    "GameRules",
    "DEFAULT_RULES",
    "IndicatorSnapshot",
    "INITIAL_INDICATORS",
    "Trend",
    "recompute_indicators",
    "indicator_trend",
    "recent_history",
    "GameState",
    "GridPosition",
    "PlacedBuilding",
    "HistoricDataPoint",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "RejectionCode",
    "UnlockResult",
    "derive_unlocks",
    "Challenge",
    "ChallengeId",
    "ChallengeNotification",
    "NotificationKind",
    "CHALLENGES",
    "trigger_met",
    "goal_met",
    "select_challenge",
    "check_completion",
    "close_challenge",
    "Reducer",
    "apply_action",
    "place_building",
    "ActionGenerator",
    "PlaceableKind",
    "legal_actions",
]
