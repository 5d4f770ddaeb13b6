"""
Session Module - Host-side ownership of settlement state.

A session represents one play-through:
- Created when the player starts
- Holds the single mutable GameState reference (GameStore)
- Destroyed when the player leaves

Sessions are EPHEMERAL: no persistence.
"""

from .store import GameStore, Overlay, TransitionRecord
from .manager import SessionManager, Session, SessionState

__all__ = [
    "GameStore",
    "Overlay",
    "TransitionRecord",
    "SessionManager",
    "Session",
    "SessionState",
]
