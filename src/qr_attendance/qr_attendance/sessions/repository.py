from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import SessionState
from .model import Session


class SessionRepository(Protocol):
    """Repository interface for attendance sessions.

    The lifecycle service depends on this interface, not on a concrete store.
    """

    def add(self, session: Session) -> None:
        raise NotImplementedError

    def save(self, session: Session) -> None:
        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def get_by_token(self, token: str) -> Optional[Session]:
        raise NotImplementedError

    def list_by_state(self, state: SessionState) -> Sequence[Session]:
        raise NotImplementedError
