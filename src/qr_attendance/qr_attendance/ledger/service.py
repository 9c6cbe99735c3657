from __future__ import annotations

import logging
from typing import Sequence

from ..common.datetime_utils import ensure_utc
from ..common.validators import require_non_empty
from ..core.exceptions import DuplicateScanError
from .model import AttendanceRecord, RecordMeta
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Append-only attendance records, one per (session, student)."""

    def __init__(self, records: LedgerRepository):
        self._records = records

    def record(self, session_id: str, student_id: str, meta: RecordMeta) -> int:
        session_id = require_non_empty(session_id, "session_id")
        student_id = require_non_empty(student_id, "student_id")

        record_id = self._records.insert_unique(
            session_id=session_id,
            student_id=student_id,
            recorded_at=ensure_utc(meta.recorded_at),
            distance_meters=meta.distance_meters,
        )
        if record_id is None:
            raise DuplicateScanError(f"Attendance already marked for student {student_id} in this session")
        return record_id

    def has(self, session_id: str, student_id: str) -> bool:
        return self._records.exists(session_id, student_id)

    def records_for(self, session_id: str) -> Sequence[AttendanceRecord]:
        return self._records.list_for_session(session_id)

    def count_for(self, session_id: str) -> int:
        return self._records.count_for_session(session_id)
