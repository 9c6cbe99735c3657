from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Protocol

from ..geo.model import GeoPoint
from .model import ClassInfo, StudentProfile

logger = logging.getLogger(__name__)


class DirectoryRepository(Protocol):
    """Read-only class/profile directory owned by another system."""

    def get_class(self, class_id: str) -> Optional[ClassInfo]:
        raise NotImplementedError

    def get_student(self, student_id: str) -> Optional[StudentProfile]:
        raise NotImplementedError


class InMemoryDirectory(DirectoryRepository):
    def __init__(self, classes: Iterable[ClassInfo] = (), students: Iterable[StudentProfile] = ()):
        self._classes = {c.class_id: c for c in classes}
        self._students = {s.student_id: s for s in students}

    def get_class(self, class_id: str) -> Optional[ClassInfo]:
        return self._classes.get(class_id)

    def get_student(self, student_id: str) -> Optional[StudentProfile]:
        return self._students.get(student_id)

    @classmethod
    def from_dict(cls, data: dict) -> "InMemoryDirectory":
        classes = []
        for c in data.get("classes", []):
            loc = c.get("location") or None
            classes.append(
                ClassInfo(
                    class_id=str(c["id"]),
                    subject=str(c.get("subject") or c["id"]),
                    instructor=c.get("instructor"),
                    room=c.get("room"),
                    location=GeoPoint.of(loc["lat"], loc["lng"]) if loc else None,
                    location_name=(loc or {}).get("name") or c.get("room"),
                )
            )
        students = [StudentProfile(student_id=str(s["id"]), display_name=str(s["name"])) for s in data.get("students", [])]
        return cls(classes, students)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryDirectory":
        path = Path(path)
        directory = cls.from_dict(json.loads(path.read_text(encoding="utf-8")))
        logger.info(
            "Loaded directory %s (%d classes, %d students)",
            path.name,
            len(directory._classes),
            len(directory._students),
        )
        return directory
