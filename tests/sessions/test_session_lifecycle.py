from __future__ import annotations

from datetime import timedelta

import pytest

from src.qr_attendance.qr_attendance.core.enums import SessionState
from src.qr_attendance.qr_attendance.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.qr_attendance.qr_attendance.sessions.lifecycle import effective_state, is_active


def test_issue_stores_pending_session_that_is_not_scannable(lifecycle, fixed_now):
    session = lifecycle.issue("cls001", now=fixed_now)

    assert session.state == SessionState.PENDING
    assert session.start_time is None
    assert lifecycle.get(session.session_id) == session
    assert not is_active(session, fixed_now)


def test_activate_records_start_time(lifecycle, fixed_now):
    session = lifecycle.issue("cls001", now=fixed_now)
    active = lifecycle.activate(session, now=fixed_now + timedelta(seconds=5))

    assert active.state == SessionState.ACTIVE
    assert active.start_time == fixed_now + timedelta(seconds=5)
    assert active.deadline == fixed_now + timedelta(seconds=305)


@pytest.mark.parametrize("offset", [0, 1, 150, 299, 299.999])
def test_is_active_strictly_before_deadline(lifecycle, fixed_now, offset):
    session = lifecycle.open("cls001", now=fixed_now)
    assert is_active(session, fixed_now + timedelta(seconds=offset))


@pytest.mark.parametrize("offset", [300, 300.001, 301, 3600])
def test_is_active_false_at_or_after_deadline(lifecycle, fixed_now, offset):
    session = lifecycle.open("cls001", now=fixed_now)
    at = fixed_now + timedelta(seconds=offset)

    assert not is_active(session, at)
    assert effective_state(session, at) == SessionState.EXPIRED


def test_is_active_is_a_pure_read(lifecycle, fixed_now):
    session = lifecycle.open("cls001", now=fixed_now)
    is_active(session, fixed_now + timedelta(hours=1))

    assert lifecycle.get(session.session_id).state == SessionState.ACTIVE


def test_second_activation_conflicts_while_first_is_active(lifecycle, fixed_now):
    lifecycle.open("cls001", now=fixed_now)
    other = lifecycle.issue("cls002", now=fixed_now)

    with pytest.raises(ConflictError):
        lifecycle.activate(other, now=fixed_now + timedelta(seconds=10))
    with pytest.raises(ConflictError):
        lifecycle.open("cls003", now=fixed_now + timedelta(seconds=10))

    assert lifecycle.get(other.session_id).state == SessionState.PENDING


def test_conflict_is_global_not_per_class(lifecycle, fixed_now):
    lifecycle.open("cls001", now=fixed_now)
    with pytest.raises(ConflictError):
        lifecycle.open("cls001", now=fixed_now + timedelta(seconds=1))


def test_activation_succeeds_after_previous_session_closed(lifecycle, fixed_now):
    first = lifecycle.open("cls001", now=fixed_now)
    lifecycle.close(first, now=fixed_now + timedelta(seconds=30))

    second = lifecycle.open("cls002", now=fixed_now + timedelta(seconds=31))
    assert second.state == SessionState.ACTIVE


def test_activation_succeeds_after_previous_session_expired(lifecycle, fixed_now):
    first = lifecycle.open("cls001", now=fixed_now)

    second = lifecycle.open("cls002", now=fixed_now + timedelta(seconds=300))

    assert second.state == SessionState.ACTIVE
    assert lifecycle.get(first.session_id).state == SessionState.EXPIRED
    assert lifecycle.current_active(now=fixed_now + timedelta(seconds=301)) == second


def test_close_is_idempotent(lifecycle, fixed_now):
    session = lifecycle.open("cls001", now=fixed_now)

    closed = lifecycle.close(session.session_id, now=fixed_now + timedelta(seconds=10))
    again = lifecycle.close(session.session_id, now=fixed_now + timedelta(seconds=20))

    assert closed.state == SessionState.CLOSED
    assert again == closed
    assert again.closed_at == fixed_now + timedelta(seconds=10)
    assert not is_active(again, fixed_now + timedelta(seconds=11))


def test_close_exactly_at_deadline_records_closed(lifecycle, fixed_now):
    session = lifecycle.open("cls001", now=fixed_now)

    closed = lifecycle.close(session, now=fixed_now + timedelta(seconds=300))

    assert closed.state == SessionState.CLOSED


def test_close_past_deadline_records_expired(lifecycle, fixed_now):
    session = lifecycle.open("cls001", now=fixed_now)

    result = lifecycle.close(session, now=fixed_now + timedelta(seconds=400))

    assert result.state == SessionState.EXPIRED
    assert result.closed_at is None
    assert lifecycle.get(session.session_id).state == SessionState.EXPIRED
    assert lifecycle.close(session, now=fixed_now + timedelta(seconds=500)) == result


def test_close_on_materialized_expiry_is_noop(lifecycle, fixed_now):
    session = lifecycle.open("cls001", now=fixed_now)
    assert lifecycle.expire_stale(now=fixed_now + timedelta(seconds=400)) == 1

    result = lifecycle.close(session, now=fixed_now + timedelta(seconds=401))

    assert result.state == SessionState.EXPIRED


def test_activate_rejects_non_pending_session(lifecycle, fixed_now):
    session = lifecycle.open("cls001", now=fixed_now)
    with pytest.raises(ValidationError):
        lifecycle.activate(session, now=fixed_now)


def test_unknown_session_raises_not_found(lifecycle):
    with pytest.raises(NotFoundError):
        lifecycle.close("sess-missing")


def test_stored_expiry_still_honours_timestamps_inside_window(lifecycle, fixed_now):
    session = lifecycle.open("cls001", now=fixed_now)
    lifecycle.expire_stale(now=fixed_now + timedelta(seconds=400))
    expired = lifecycle.get(session.session_id)

    assert expired.state == SessionState.EXPIRED
    assert is_active(expired, fixed_now + timedelta(seconds=299))
    assert not is_active(expired, fixed_now + timedelta(seconds=300))
    assert lifecycle.current_active(now=fixed_now + timedelta(seconds=10)) is None
