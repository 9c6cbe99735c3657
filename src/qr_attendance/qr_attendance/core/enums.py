from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    """Lifecycle state of an attendance session as stored."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CLOSED = "CLOSED"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.EXPIRED, SessionState.CLOSED)


class UrgencyTier(str, Enum):
    """Countdown display tier."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"
    EXPIRED = "expired"
