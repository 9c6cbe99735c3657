from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator, Optional

from ..common.datetime_utils import ensure_utc
from ..core.constants import COUNTDOWN_CADENCE_SECONDS, COUNTDOWN_CRITICAL_SECONDS, COUNTDOWN_WARNING_SECONDS
from ..core.enums import UrgencyTier


@dataclass(frozen=True)
class CountdownState:
    at: datetime
    remaining_seconds: float
    tier: UrgencyTier
    clock: str
    progress_percent: float

    @property
    def expired(self) -> bool:
        return self.tier == UrgencyTier.EXPIRED

    def to_dict(self) -> dict:
        return {
            "remaining_seconds": int(self.remaining_seconds),
            "tier": self.tier.value,
            "clock": self.clock,
            "progress_percent": round(self.progress_percent, 1),
            "expired": self.expired,
        }


def urgency_tier(remaining_seconds: float) -> UrgencyTier:
    if remaining_seconds <= 0:
        return UrgencyTier.EXPIRED
    if remaining_seconds < COUNTDOWN_CRITICAL_SECONDS:
        return UrgencyTier.CRITICAL
    if remaining_seconds < COUNTDOWN_WARNING_SECONDS:
        return UrgencyTier.WARNING
    return UrgencyTier.NORMAL


def format_clock(seconds: float) -> str:
    """``mm:ss`` with both parts zero padded."""
    total = max(0, int(seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


def countdown_state(start_time: datetime, duration_seconds: int, now: datetime) -> CountdownState:
    now = ensure_utc(now)
    elapsed = (now - ensure_utc(start_time)).total_seconds()
    remaining = max(0.0, min(float(duration_seconds), duration_seconds - elapsed))
    progress = (duration_seconds - remaining) / duration_seconds * 100 if duration_seconds > 0 else 100.0
    return CountdownState(
        at=now,
        remaining_seconds=remaining,
        tier=urgency_tier(remaining),
        clock=format_clock(remaining),
        progress_percent=progress,
    )


class CountdownPresenter:
    """Display-only countdown for one session.

    Owns no session state and never expires anything; expiry is decided by
    the lifecycle's ``is_active``. Sampling is driven by the caller's tick.
    """

    def __init__(self, start_time: datetime, duration_seconds: int, *, cadence_seconds: float = COUNTDOWN_CADENCE_SECONDS):
        if cadence_seconds <= 0:
            raise ValueError("cadence_seconds must be positive")
        self.start_time = ensure_utc(start_time)
        self.duration_seconds = int(duration_seconds)
        self.cadence = timedelta(seconds=cadence_seconds)

    def state_at(self, now: datetime) -> CountdownState:
        return countdown_state(self.start_time, self.duration_seconds, now)

    def samples(self, since: Optional[datetime] = None, *, limit: Optional[int] = None) -> Iterator[CountdownState]:
        """Lazily yield one state per cadence step from ``since``.

        Ends after the first expired sample (or after ``limit`` samples).
        Each call starts a fresh sequence.
        """

        at = ensure_utc(since) if since is not None else self.start_time
        produced = 0
        while limit is None or produced < limit:
            state = self.state_at(at)
            yield state
            produced += 1
            if state.expired:
                return
            at += self.cadence
