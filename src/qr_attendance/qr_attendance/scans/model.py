from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import ensure_utc, to_iso
from ..common.validators import require_non_empty
from ..core.exceptions import InvalidTokenError
from ..geo.model import GeoPoint
from ..qr.codec import decode_payload, looks_like_payload


@dataclass(frozen=True)
class ScanAttempt:
    """One submitted scan. Ephemeral: only its outcome is kept."""

    token: str
    student_id: str
    scan_time: datetime
    scanner_location: Optional[GeoPoint] = None
    # Set when the full QR payload was submitted instead of the bare token.
    session_id: Optional[str] = None

    @classmethod
    def from_code(
        cls,
        code: str,
        *,
        student_id: str,
        scan_time: datetime,
        scanner_location: Optional[GeoPoint] = None,
    ) -> "ScanAttempt":
        """Build an attempt from whatever the scanner read: a payload or a bare token."""

        code = (code or "").strip()
        if not code:
            raise InvalidTokenError()
        student_id = require_non_empty(student_id, "student_id")

        if looks_like_payload(code):
            payload = decode_payload(code)
            return cls(
                token=payload.token,
                student_id=student_id,
                scan_time=ensure_utc(scan_time),
                scanner_location=scanner_location,
                session_id=payload.session_id,
            )
        return cls(token=code, student_id=student_id, scan_time=ensure_utc(scan_time), scanner_location=scanner_location)


@dataclass(frozen=True)
class ScanOutcome:
    session_id: str
    student_id: str
    record_id: int
    recorded_at: datetime
    distance_meters: Optional[float] = None
    student_name: Optional[str] = None
    class_label: Optional[str] = None
    message: str = "Attendance marked successfully!"

    def to_dict(self) -> dict:
        data = {
            "success": True,
            "message": self.message,
            "session_id": self.session_id,
            "student_id": self.student_id,
            "record_id": self.record_id,
            "recorded_at": to_iso(self.recorded_at),
        }
        if self.distance_meters is not None:
            data["distance_meters"] = round(self.distance_meters, 1)
        if self.student_name:
            data["student_name"] = self.student_name
        if self.class_label:
            data["class_name"] = self.class_label
        return data
