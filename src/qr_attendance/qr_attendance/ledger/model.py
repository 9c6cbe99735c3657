from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one accepted scan. Never mutated after creation."""

    record_id: int
    session_id: str
    student_id: str
    recorded_at: datetime
    distance_meters: Optional[float] = None


@dataclass(frozen=True)
class RecordMeta:
    recorded_at: datetime
    distance_meters: Optional[float] = None
