from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.qr_attendance.qr_attendance.directory.model import ClassInfo, StudentProfile
from src.qr_attendance.qr_attendance.directory.repository import InMemoryDirectory
from src.qr_attendance.qr_attendance.geo.model import GeoPoint
from src.qr_attendance.qr_attendance.ledger.memory_ledger_repository import InMemoryLedgerRepository
from src.qr_attendance.qr_attendance.ledger.service import AttendanceLedger
from src.qr_attendance.qr_attendance.scans.verifier import ScanVerifier
from src.qr_attendance.qr_attendance.sessions.lifecycle import SessionLifecycle
from src.qr_attendance.qr_attendance.sessions.memory_session_repository import InMemorySessionRepository
from src.qr_attendance.qr_attendance.sessions.token_issuer import TokenIssuer

CLASSROOM = GeoPoint(12.9716, 77.5946)


class RecordingSink:
    def __init__(self):
        self.sent = []

    def notify(self, notification) -> None:
        self.sent.append(notification)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def directory() -> InMemoryDirectory:
    return InMemoryDirectory(
        classes=[
            ClassInfo(class_id="cls001", subject="Data Structures", room="Room 204", location=CLASSROOM, location_name="CS Block"),
            ClassInfo(class_id="cls003", subject="Technical Writing", room="Online"),
        ],
        students=[
            StudentProfile("stu001", "Ananya Sharma"),
            StudentProfile("stu002", "Rahul Verma"),
            StudentProfile("stu003", "Priya Menon"),
        ],
    )


@pytest.fixture
def lifecycle() -> SessionLifecycle:
    return SessionLifecycle(InMemorySessionRepository(), TokenIssuer())


@pytest.fixture
def ledger() -> AttendanceLedger:
    return AttendanceLedger(InMemoryLedgerRepository())


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def verifier(lifecycle, ledger, directory, sink) -> ScanVerifier:
    return ScanVerifier(lifecycle, ledger, directory=directory, notifier=sink)
