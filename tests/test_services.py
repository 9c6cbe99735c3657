from __future__ import annotations

from datetime import timedelta

import pytest

from src.qr_attendance.qr_attendance.container import build_container
from src.qr_attendance.qr_attendance.core.enums import SessionState
from src.qr_attendance.qr_attendance.core.exceptions import ConflictError, OutOfRangeError
from src.qr_attendance.qr_attendance.geo.model import GeoPoint
from src.qr_attendance.qr_attendance.qr.codec import decode_payload
from src.qr_attendance.qr_attendance.scans.model import ScanAttempt


@pytest.fixture
def container(directory, sink):
    return build_container(settings={"STORAGE_BACKEND": "memory"}, directory=directory, notifier=sink)


def test_open_session_uses_class_location_as_anchor(container, fixed_now):
    session = container.session_service.open_session("cls001", now=fixed_now)

    assert session.anchor == GeoPoint(12.9716, 77.5946)
    with pytest.raises(OutOfRangeError):
        container.scan_verifier.verify(
            ScanAttempt(token=session.token, student_id="stu001", scan_time=fixed_now, scanner_location=GeoPoint(12.99, 77.5946))
        )


def test_explicit_anchor_overrides_directory(container, fixed_now):
    anchor = GeoPoint(13.0, 77.6)
    session = container.session_service.open_session("cls001", anchor=anchor, now=fixed_now)
    assert session.anchor == anchor


def test_describe_reports_countdown_and_attendance(container, fixed_now):
    service = container.session_service
    session = service.open_session("cls001", now=fixed_now)
    container.scan_verifier.verify(ScanAttempt(token=session.token, student_id="stu001", scan_time=fixed_now))

    view = service.describe(session, now=fixed_now + timedelta(seconds=280))

    assert view["state"] == "ACTIVE"
    assert view["class_name"] == "Data Structures"
    assert view["scanned"] == 1
    assert view["countdown"]["clock"] == "00:20"
    assert view["countdown"]["tier"] == "critical"
    assert decode_payload(view["payload"]).token == session.token

    assert service.describe(session, now=fixed_now + timedelta(seconds=300))["state"] == "EXPIRED"
    assert service.attendees(session.session_id)[0]["name"] == "Ananya Sharma"


def test_start_session_notification(container, sink, fixed_now):
    container.session_service.open_session("cls003", now=fixed_now)
    assert sink.sent[-1].title == "Session Started"
    assert "Technical Writing" in sink.sent[-1].description


def test_only_one_active_session_through_service(container, fixed_now):
    service = container.session_service
    first = service.open_session("cls001", now=fixed_now)
    with pytest.raises(ConflictError):
        service.open_session("cls003", now=fixed_now + timedelta(seconds=1))

    service.close_session(first.session_id, now=fixed_now + timedelta(seconds=2))
    second = service.open_session("cls003", now=fixed_now + timedelta(seconds=3))

    assert service.get(first.session_id).state == SessionState.CLOSED
    assert service.current_active(now=fixed_now + timedelta(seconds=4)) == second


def test_unknown_storage_backend_is_rejected():
    with pytest.raises(ValueError):
        build_container(settings={"STORAGE_BACKEND": "redis"})


def test_closed_session_has_no_countdown(container, fixed_now):
    service = container.session_service
    session = service.open_session("cls001", now=fixed_now)
    closed = service.close_session(session.session_id, now=fixed_now + timedelta(seconds=5))

    view = service.describe(closed, now=fixed_now + timedelta(seconds=10))

    assert view["state"] == "CLOSED"
    assert view["countdown"] is None
    assert service.countdown(closed, now=fixed_now + timedelta(seconds=10)) is None


def test_expired_session_countdown_reads_zero(container, fixed_now):
    service = container.session_service
    session = service.open_session("cls001", now=fixed_now)

    state = service.countdown(session, now=fixed_now + timedelta(seconds=400))

    assert state.clock == "00:00"
    assert state.expired
