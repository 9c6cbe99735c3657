from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..geo.model import GeoPoint


@dataclass(frozen=True)
class ClassInfo:
    class_id: str
    subject: str
    instructor: Optional[str] = None
    room: Optional[str] = None
    location: Optional[GeoPoint] = None
    location_name: Optional[str] = None


@dataclass(frozen=True)
class StudentProfile:
    student_id: str
    display_name: str
