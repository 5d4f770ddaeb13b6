"""
Session Manager - Creates and manages play sessions.

LIFECYCLE:
1. Client starts a session -> ephemeral GameStore (in-memory only)
2. During play: placements, challenge acknowledgements, overlays
3. Session ends -> store discarded, ALL state deleted

PERSISTENCE RULES:
- NO database for gameplay
- Game state is session-scoped only
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
import time
import uuid

from ..catalog import BuildingCatalog, create_default_catalog
from .store import GameStore, Overlay

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a play session."""
    ACTIVE = "active"
    ENDED = "ended"


@dataclass
class Session:
    """
    An ephemeral play session.

    The session is destroyed when it ends.
    State is NOT persisted.
    """
    session_id: str
    store: GameStore
    created_at: float
    player_name: str = "Player"
    state: SessionState = SessionState.ACTIVE

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE


class SessionManager:
    """
    Manages play sessions.

    Responsibilities:
    - Create sessions with a fresh GameStore
    - Track active sessions
    - Clean up ended sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, catalog: BuildingCatalog | None = None):
        self._catalog = catalog or create_default_catalog()
        self._sessions: dict[str, Session] = {}

    def create_session(self, player_name: str = "Player", skip_welcome: bool = False) -> Session:
        """
        Create a new play session.

        Args:
            player_name: Display name for the player
            skip_welcome: Start without the welcome overlay blocking challenges

        Returns:
            The new Session
        """
        store = GameStore(catalog=self._catalog)
        if skip_welcome:
            store.open_overlays.discard(Overlay.WELCOME)

        session = Session(
            session_id=str(uuid.uuid4()),
            store=store,
            created_at=time.time(),
            player_name=player_name,
        )
        self._sessions[session.session_id] = session
        logger.info("Session %s created for %s", session.session_id, player_name)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get an active session by ID."""
        session = self._sessions.get(session_id)
        if session and session.is_active():
            return session
        return None

    def require_session(self, session_id: str) -> Session:
        """Get an active session or raise KeyError."""
        session = self.get_session(session_id)
        if session is None:
            raise KeyError(session_id)
        return session

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session and delete its state."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.state = SessionState.ENDED
        logger.info("Session %s ended (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        return [sid for sid, s in self._sessions.items() if s.is_active()]
