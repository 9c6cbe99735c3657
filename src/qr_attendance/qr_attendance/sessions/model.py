from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import DEFAULT_SESSION_SECONDS
from ..core.enums import SessionState
from ..geo.model import GeoPoint


@dataclass(frozen=True)
class Session:
    """Domain entity: one time-boxed attendance window for a class.

    Immutable value; state transitions produce a new instance that the
    repository stores in place of the old one.
    """

    session_id: str
    class_id: str
    token: str
    issued_at: datetime
    duration_seconds: int = DEFAULT_SESSION_SECONDS
    anchor: Optional[GeoPoint] = None
    state: SessionState = SessionState.PENDING
    start_time: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    @property
    def deadline(self) -> Optional[datetime]:
        if self.start_time is None:
            return None
        return self.start_time + timedelta(seconds=self.duration_seconds)

    def with_state(self, state: SessionState, **changes) -> "Session":
        return replace(self, state=state, **changes)
