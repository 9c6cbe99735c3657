from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import PROXIMITY_THRESHOLD_METERS
from ..core.exceptions import (
    DomainError,
    DuplicateScanError,
    InvalidTokenError,
    OutOfRangeError,
    SessionExpiredError,
    ValidationError,
)
from ..directory.repository import DirectoryRepository
from ..geo.distance import distance_meters
from ..ledger.model import RecordMeta
from ..ledger.service import AttendanceLedger
from ..notifications.sink import Notification, NotificationSink, send_quietly
from ..sessions.lifecycle import SessionLifecycle, is_active
from .model import ScanAttempt, ScanOutcome

logger = logging.getLogger(__name__)


class ScanVerifier:
    """Accept or reject a scan, recording attendance on success.

    Checks run in a fixed order and the first failure wins:
    token -> active window -> proximity -> duplicate -> commit.
    Every check uses the scan's own timestamp, so a delayed verification
    gives the same answer as an immediate one. Nothing is written unless
    all checks pass.

    Scanner location and student id are reported by the client and taken
    as given.
    """

    def __init__(
        self,
        lifecycle: SessionLifecycle,
        ledger: AttendanceLedger,
        *,
        directory: Optional[DirectoryRepository] = None,
        notifier: Optional[NotificationSink] = None,
        proximity_threshold_meters: float = PROXIMITY_THRESHOLD_METERS,
    ):
        self._lifecycle = lifecycle
        self._ledger = ledger
        self._directory = directory
        self._notifier = notifier
        self._threshold = float(proximity_threshold_meters)

    def verify(self, attempt: ScanAttempt) -> ScanOutcome:
        try:
            outcome = self._verify(attempt)
        except DomainError as e:
            logger.info("Scan rejected for student %s: %s", attempt.student_id, e.code)
            send_quietly(
                self._notifier,
                Notification(title="Attendance Failed", description=e.message, success=False, recipient=attempt.student_id),
            )
            raise

        logger.info(
            "Scan accepted: student %s in session %s (distance=%s)",
            outcome.student_id,
            outcome.session_id,
            "n/a" if outcome.distance_meters is None else f"{outcome.distance_meters:.1f}m",
        )
        send_quietly(
            self._notifier,
            Notification(
                title="Attendance Marked",
                description=f"Successfully marked attendance for {outcome.class_label or outcome.session_id}",
                success=True,
                recipient=outcome.student_id,
            ),
        )
        return outcome

    def _verify(self, attempt: ScanAttempt) -> ScanOutcome:
        student_name = None
        if self._directory is not None:
            student = self._directory.get_student(attempt.student_id)
            if not student:
                raise ValidationError("Student not found")
            student_name = student.display_name

        session = self._lifecycle.find_by_token(attempt.token) if attempt.token else None
        if session is None or (attempt.session_id and attempt.session_id != session.session_id):
            raise InvalidTokenError()

        if not is_active(session, attempt.scan_time):
            raise SessionExpiredError()

        class_info = self._directory.get_class(session.class_id) if self._directory is not None else None

        measured = None
        if session.anchor is not None and attempt.scanner_location is not None:
            measured = distance_meters(attempt.scanner_location, session.anchor)
            if measured > self._threshold:
                raise OutOfRangeError(measured, self._threshold, class_info.location_name if class_info else None)

        if self._ledger.has(session.session_id, attempt.student_id):
            raise DuplicateScanError()

        # The ledger insert is atomic; a concurrent duplicate still ends here as DuplicateScanError.
        record_id = self._ledger.record(
            session.session_id,
            attempt.student_id,
            RecordMeta(recorded_at=attempt.scan_time, distance_meters=measured),
        )
        return ScanOutcome(
            session_id=session.session_id,
            student_id=attempt.student_id,
            record_id=record_id,
            recorded_at=attempt.scan_time,
            distance_meters=measured,
            student_name=student_name,
            class_label=class_info.subject if class_info else session.class_id,
        )
