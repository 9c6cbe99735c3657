from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class LedgerRepository(Protocol):
    def insert_unique(
        self,
        *,
        session_id: str,
        student_id: str,
        recorded_at: datetime,
        distance_meters: Optional[float] = None,
    ) -> Optional[int]:
        """Insert a record unless (session_id, student_id) exists.

        Check and insert happen atomically. Returns the new record id, or
        None when a record for the pair already exists.
        """

        raise NotImplementedError

    def exists(self, session_id: str, student_id: str) -> bool:
        raise NotImplementedError

    def get(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_for_session(self, session_id: str) -> int:
        raise NotImplementedError
