from __future__ import annotations

import threading
from datetime import datetime
from typing import Optional, Sequence

from .model import AttendanceRecord
from .repository import LedgerRepository


class InMemoryLedgerRepository(LedgerRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._by_key: dict[tuple[str, str], AttendanceRecord] = {}
        self._id = 0

    def insert_unique(
        self,
        *,
        session_id: str,
        student_id: str,
        recorded_at: datetime,
        distance_meters: Optional[float] = None,
    ) -> Optional[int]:
        key = (session_id, student_id)
        with self._lock:
            if key in self._by_key:
                return None
            self._id += 1
            self._by_key[key] = AttendanceRecord(
                record_id=self._id,
                session_id=session_id,
                student_id=student_id,
                recorded_at=recorded_at,
                distance_meters=distance_meters,
            )
            return self._id

    def exists(self, session_id: str, student_id: str) -> bool:
        with self._lock:
            return (session_id, student_id) in self._by_key

    def get(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_key.get((session_id, student_id))

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [r for r in self._by_key.values() if r.session_id == session_id]
        items.sort(key=lambda r: r.record_id)
        return items

    def count_for_session(self, session_id: str) -> int:
        with self._lock:
            return sum(1 for (sid, _) in self._by_key if sid == session_id)
