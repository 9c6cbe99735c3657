from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import ensure_utc, utc_now
from ..core.enums import SessionState
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..geo.model import GeoPoint
from .model import Session
from .repository import SessionRepository
from .token_issuer import TokenIssuer

logger = logging.getLogger(__name__)


def is_active(session: Session, now: datetime) -> bool:
    """True when ``start_time <= now < deadline`` for a session that was running at ``now``.

    Pure read: expiry is observed from timestamps, never scheduled. A stored
    EXPIRED state only records that the deadline passed, so a timestamp inside
    the window still counts. CLOSED and PENDING sessions are never active.
    """

    if session.state not in (SessionState.ACTIVE, SessionState.EXPIRED) or session.start_time is None:
        return False
    now = ensure_utc(now)
    return session.start_time <= now < session.deadline


def effective_state(session: Session, now: datetime) -> SessionState:
    """Stored state, with an ACTIVE session past its deadline reported as EXPIRED."""

    if session.state == SessionState.ACTIVE and session.deadline is not None and ensure_utc(now) >= session.deadline:
        return SessionState.EXPIRED
    return session.state


class SessionLifecycle:
    """State machine for attendance sessions: PENDING -> ACTIVE -> EXPIRED | CLOSED.

    At most one session may be logically active system-wide. Every
    transition that can affect that rule runs under one process-wide lock,
    so the admission check and the write are a single critical section.
    """

    def __init__(self, sessions: SessionRepository, issuer: TokenIssuer):
        self._sessions = sessions
        self._issuer = issuer
        self._admission = threading.Lock()

    is_active = staticmethod(is_active)
    effective_state = staticmethod(effective_state)

    def get(self, session_id: str) -> Session:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def find_by_token(self, token: str) -> Optional[Session]:
        return self._sessions.get_by_token(token)

    def current_active(self, *, now: Optional[datetime] = None) -> Optional[Session]:
        now = now or utc_now()
        for session in self._sessions.list_by_state(SessionState.ACTIVE):
            if is_active(session, now):
                return session
        return None

    def issue(
        self,
        class_id: str,
        *,
        anchor: Optional[GeoPoint] = None,
        duration_seconds: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Session:
        """Mint and store a PENDING session (not yet scannable)."""

        session = self._issuer.issue(class_id, anchor=anchor, duration_seconds=duration_seconds, now=now)
        self._sessions.add(session)
        logger.info("Issued session %s for class %s", session.session_id, session.class_id)
        return session

    def activate(self, session: Session | str, *, now: Optional[datetime] = None) -> Session:
        session_id = session if isinstance(session, str) else session.session_id
        now = ensure_utc(now or utc_now())

        with self._admission:
            current = self.get(session_id)
            if current.state != SessionState.PENDING:
                raise ValidationError(f"Session {session_id} is {current.state.value}, only PENDING sessions can be activated")

            self._admit(now, exclude=session_id)
            activated = current.with_state(SessionState.ACTIVE, start_time=now)
            self._sessions.save(activated)

        logger.info(
            "Activated session %s for class %s (%ss)",
            activated.session_id,
            activated.class_id,
            activated.duration_seconds,
        )
        return activated

    def open(
        self,
        class_id: str,
        *,
        anchor: Optional[GeoPoint] = None,
        duration_seconds: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Session:
        """Issue and activate in one step, as the instructor's "Start Session" does.

        Nothing is stored when admission fails.
        """

        now = ensure_utc(now or utc_now())
        pending = self._issuer.issue(class_id, anchor=anchor, duration_seconds=duration_seconds, now=now)

        with self._admission:
            self._admit(now)
            session = pending.with_state(SessionState.ACTIVE, start_time=now)
            self._sessions.add(session)

        logger.info(
            "Opened session %s for class %s (%ss)",
            session.session_id,
            session.class_id,
            session.duration_seconds,
        )
        return session

    def close(self, session: Session | str, *, now: Optional[datetime] = None) -> Session:
        """End a session. Idempotent: closing a CLOSED or EXPIRED session is a no-op.

        An ACTIVE session closed after its deadline has already expired; it is
        written back as EXPIRED. Closing exactly at the deadline records CLOSED.
        """

        session_id = session if isinstance(session, str) else session.session_id
        now = ensure_utc(now or utc_now())

        with self._admission:
            current = self.get(session_id)
            if current.state.is_terminal:
                return current
            if effective_state(current, now) == SessionState.EXPIRED and now > current.deadline:
                expired = current.with_state(SessionState.EXPIRED)
                self._sessions.save(expired)
                logger.info("Session %s expired at %s before close", session_id, current.deadline)
                return expired
            closed = current.with_state(SessionState.CLOSED, closed_at=now)
            self._sessions.save(closed)

        logger.info("Closed session %s", session_id)
        return closed

    def expire_stale(self, *, now: Optional[datetime] = None) -> int:
        """Persist EXPIRED for ACTIVE sessions past their deadline. Returns how many changed."""

        now = ensure_utc(now or utc_now())
        with self._admission:
            return self._expire_stale_locked(now)

    def _expire_stale_locked(self, now: datetime, *, exclude: Optional[str] = None) -> int:
        changed = 0
        for other in self._sessions.list_by_state(SessionState.ACTIVE):
            if other.session_id == exclude:
                continue
            if effective_state(other, now) == SessionState.EXPIRED:
                self._sessions.save(other.with_state(SessionState.EXPIRED))
                logger.info("Session %s expired at %s", other.session_id, other.deadline)
                changed += 1
        return changed

    def _admit(self, now: datetime, *, exclude: Optional[str] = None) -> None:
        # Caller holds self._admission.
        self._expire_stale_locked(now, exclude=exclude)
        for other in self._sessions.list_by_state(SessionState.ACTIVE):
            if other.session_id != exclude:
                logger.warning("Admission refused: session %s is still active", other.session_id)
                raise ConflictError(
                    f"Session {other.session_id} for class {other.class_id} is still active; close it first"
                )
