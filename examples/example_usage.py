"""Example: drive the attendance services directly (no Flask).

Walks through one session: open, a good scan, a repeat scan, a far-away
scan and a late scan, printing each outcome.
"""

from datetime import datetime, timedelta, timezone

from src.qr_attendance.qr_attendance.container import build_container
from src.qr_attendance.qr_attendance.core.exceptions import DomainError
from src.qr_attendance.qr_attendance.geo.model import GeoPoint
from src.qr_attendance.qr_attendance.scans.model import ScanAttempt


def main():
    container = build_container(settings={"STORAGE_BACKEND": "memory", "DIRECTORY_PATH": "data/directory.json"})
    t0 = datetime.now(timezone.utc)

    session = container.session_service.open_session("cls001", now=t0)
    payload = container.session_service.payload(session)
    print("payload:", payload)

    attempts = [
        ("stu001", GeoPoint(12.9716, 77.5946), 100),
        ("stu001", GeoPoint(12.9716, 77.5946), 150),
        ("stu003", GeoPoint(12.9761, 77.5946), 50),
        ("stu002", None, 400),
    ]
    for student_id, location, offset in attempts:
        attempt = ScanAttempt.from_code(
            payload,
            student_id=student_id,
            scan_time=t0 + timedelta(seconds=offset),
            scanner_location=location,
        )
        try:
            print(student_id, "->", container.scan_verifier.verify(attempt).to_dict())
        except DomainError as e:
            print(student_id, "->", e.to_dict())


if __name__ == "__main__":
    main()
