"""
Session Store for MockRoom

Holds InterviewSession values for the whole application and tells
subscribers about every write. Sessions are only ever written as whole
objects; nothing patches a stored session in place.

When a snapshot path is configured, every write is flushed to a JSON file
and load() restores the sessions at startup.
"""

import json
import logging
from pathlib import Path
from typing import Callable

from pydantic import TypeAdapter

from mockroom.models.interview import InterviewSession

logger = logging.getLogger(__name__)

SessionListener = Callable[[InterviewSession], None]

_sessions_adapter = TypeAdapter(list[InterviewSession])


class SessionStore:
    """In-memory session store with optional JSON snapshot persistence."""
    
    def __init__(self, snapshot_path: str | Path | None = None):
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._sessions: dict[str, InterviewSession] = {}
        self._active_id: str | None = None
        self._listeners: list[SessionListener] = []
    
    # =========================================================================
    # WRITES
    # =========================================================================
    
    def create_session(self, session: InterviewSession) -> InterviewSession:
        """Store a new session. Raises ValueError if the ID is taken."""
        if session.id in self._sessions:
            raise ValueError(f"Session already exists: {session.id}")
        
        self._sessions[session.id] = session
        logger.info(f"Created interview session: {session.id}")
        self._after_write(session)
        return session
    
    def replace_session(self, session: InterviewSession) -> InterviewSession:
        """Replace a stored session with a new value. Raises KeyError if unknown."""
        if session.id not in self._sessions:
            raise KeyError(f"Session not found: {session.id}")
        
        self._sessions[session.id] = session
        self._after_write(session)
        return session
    
    def set_active_session(self, session: InterviewSession) -> None:
        """Mark a session as the one the current screen is working on."""
        if session.id not in self._sessions:
            self._sessions[session.id] = session
        self._active_id = session.id
        self._after_write(session)
    
    # =========================================================================
    # READS
    # =========================================================================
    
    def get_session(self, session_id: str) -> InterviewSession | None:
        return self._sessions.get(session_id)
    
    @property
    def active_session(self) -> InterviewSession | None:
        if self._active_id is None:
            return None
        return self._sessions.get(self._active_id)
    
    def list_sessions(self, user_id: str | None = None) -> list[InterviewSession]:
        """Stored sessions, oldest first, optionally for one user."""
        sessions = sorted(self._sessions.values(), key=lambda s: s.start_time)
        if user_id is not None:
            sessions = [s for s in sessions if s.user_id == user_id]
        return sessions
    
    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================
    
    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener called with every written session.
        
        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)
        
        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        
        return unsubscribe
    
    def _after_write(self, session: InterviewSession) -> None:
        if self.snapshot_path:
            self.save()
        
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception as e:
                logger.error(f"Session listener error: {e}")
    
    # =========================================================================
    # PERSISTENCE
    # =========================================================================
    
    def save(self) -> None:
        """Write every session to the snapshot file."""
        if not self.snapshot_path:
            return
        
        payload = {
            "active_session_id": self._active_id,
            "sessions": json.loads(_sessions_adapter.dump_json(list(self._sessions.values()))),
        }
        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.snapshot_path.with_suffix(self.snapshot_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(self.snapshot_path)
    
    def load(self) -> int:
        """
        Restore sessions from the snapshot file.
        
        Returns:
            Number of sessions loaded (0 when there is no snapshot)
        """
        if not self.snapshot_path or not self.snapshot_path.exists():
            return 0
        
        try:
            payload = json.loads(self.snapshot_path.read_text(encoding="utf-8"))
            sessions = _sessions_adapter.validate_python(payload.get("sessions", []))
        except (OSError, ValueError) as e:
            logger.error(f"Could not restore sessions from {self.snapshot_path}: {e}")
            return 0
        
        self._sessions = {s.id: s for s in sessions}
        active_id = payload.get("active_session_id")
        self._active_id = active_id if active_id in self._sessions else None
        
        logger.info(f"Restored {len(sessions)} sessions from {self.snapshot_path}")
        return len(sessions)
