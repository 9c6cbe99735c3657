from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..core.enums import SessionState
from ..core.exceptions import ConflictError
from .model import Session
from .repository import SessionRepository


class InMemorySessionRepository(SessionRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, Session] = {}
        self._id_by_token: dict[str, str] = {}

    def add(self, session: Session) -> None:
        with self._lock:
            if session.session_id in self._by_id or session.token in self._id_by_token:
                raise ConflictError("Session id or token already exists")
            self._by_id[session.session_id] = session
            self._id_by_token[session.token] = session.session_id

    def save(self, session: Session) -> None:
        with self._lock:
            if session.session_id not in self._by_id:
                raise KeyError(session.session_id)
            self._by_id[session.session_id] = session

    def get_by_id(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._by_id.get(session_id)

    def get_by_token(self, token: str) -> Optional[Session]:
        with self._lock:
            session_id = self._id_by_token.get(token)
            return self._by_id.get(session_id) if session_id else None

    def list_by_state(self, state: SessionState) -> Sequence[Session]:
        with self._lock:
            return [s for s in self._by_id.values() if s.state == state]
