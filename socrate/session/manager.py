"""
In-memory session manager: one SessionState per browser tab or terminal.
Nothing is persisted; sessions vanish on idle timeout or restart.
"""

import uuid
from typing import Dict, Optional
from datetime import datetime, timedelta

from socrate.session.state import SessionState
from socrate.shared.config import settings
from socrate.shared.exceptions import SessionNotFoundError
from socrate.shared.logging import get_logger

logger = get_logger(__name__)


class SessionManager:
    """Creates, looks up and expires session state."""

    def __init__(self, idle_timeout_minutes: Optional[int] = None):
        self.idle_timeout = timedelta(
            minutes=idle_timeout_minutes or settings.session.idle_timeout_minutes
        )
        self._sessions: Dict[str, SessionState] = {}

    def create(self) -> SessionState:
        """Create a new empty session."""
        self.purge_expired()
        state = SessionState(session_id=uuid.uuid4().hex)
        self._sessions[state.session_id] = state
        logger.info("Session created", extra={"session_id": state.session_id, "action": "session_created"})
        return state

    def get(self, session_id: str) -> SessionState:
        """Get a live session, expiring it first if idle too long."""
        state = self._sessions.get(session_id)
        if state is None:
            raise SessionNotFoundError(f"Session {session_id} not found")

        if self._is_expired(state):
            del self._sessions[session_id]
            raise SessionNotFoundError(f"Session {session_id} expired")

        state.touch()
        return state

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def active_count(self) -> int:
        return len(self._sessions)

    def purge_expired(self) -> int:
        """Drop idle sessions; returns how many were removed."""
        expired = [sid for sid, state in self._sessions.items() if self._is_expired(state)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(f"Expired {len(expired)} idle sessions", extra={"action": "sessions_expired"})
        return len(expired)

    def _is_expired(self, state: SessionState) -> bool:
        # Busy sessions have an outstanding gateway call and are kept
        if state.conversation_busy or state.socratic_busy:
            return False
        return datetime.now() - state.last_activity > self.idle_timeout
