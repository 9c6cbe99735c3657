from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso, utc_now
from ..core.enums import SessionState
from ..countdown.presenter import CountdownPresenter, CountdownState
from ..directory.repository import DirectoryRepository
from ..geo.model import GeoPoint
from ..ledger.service import AttendanceLedger
from ..notifications.sink import Notification, NotificationSink, send_quietly
from ..qr.codec import QrPayload, encode_payload
from ..qr.image import render_png, to_data_url
from .lifecycle import SessionLifecycle, effective_state
from .model import Session


class SessionService:
    """Instructor-facing operations: open, inspect, render and close sessions."""

    def __init__(
        self,
        lifecycle: SessionLifecycle,
        ledger: AttendanceLedger,
        directory: DirectoryRepository,
        *,
        notifier: Optional[NotificationSink] = None,
    ):
        self._lifecycle = lifecycle
        self._ledger = ledger
        self._directory = directory
        self._notifier = notifier

    def open_session(
        self,
        class_id: str,
        *,
        anchor: Optional[GeoPoint] = None,
        duration_seconds: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Session:
        class_info = self._directory.get_class(class_id)
        if anchor is None and class_info is not None:
            anchor = class_info.location

        session = self._lifecycle.open(class_id, anchor=anchor, duration_seconds=duration_seconds, now=now)
        send_quietly(
            self._notifier,
            Notification(
                title="Session Started",
                description=f"New attendance session started for {self.class_label(session)}",
                success=True,
            ),
        )
        return session

    def close_session(self, session_id: str, *, now: Optional[datetime] = None) -> Session:
        return self._lifecycle.close(session_id, now=now)

    def get(self, session_id: str) -> Session:
        return self._lifecycle.get(session_id)

    def current_active(self, *, now: Optional[datetime] = None) -> Optional[Session]:
        return self._lifecycle.current_active(now=now)

    def class_label(self, session: Session) -> str:
        info = self._directory.get_class(session.class_id)
        return info.subject if info else session.class_id

    def payload(self, session: Session) -> str:
        return encode_payload(QrPayload.for_session(session, self.class_label(session)))

    def qr_png(self, session: Session) -> bytes:
        return render_png(self.payload(session))

    def qr_data_url(self, session: Session) -> str:
        return to_data_url(self.qr_png(session))

    def countdown(self, session: Session, *, now: Optional[datetime] = None) -> Optional[CountdownState]:
        # Pending sessions have not started; closed ones stop counting.
        if session.start_time is None or session.state == SessionState.CLOSED:
            return None
        return CountdownPresenter(session.start_time, session.duration_seconds).state_at(now or utc_now())

    def attendees(self, session_id: str) -> list[dict]:
        rows = []
        for r in self._ledger.records_for(session_id):
            profile = self._directory.get_student(r.student_id)
            rows.append(
                {
                    "student_id": r.student_id,
                    "name": profile.display_name if profile else None,
                    "recorded_at": to_iso(r.recorded_at),
                    "distance_meters": None if r.distance_meters is None else round(r.distance_meters, 1),
                }
            )
        return rows

    def describe(self, session: Session, *, now: Optional[datetime] = None) -> dict:
        now = now or utc_now()
        countdown = self.countdown(session, now=now)
        return {
            "session_id": session.session_id,
            "class_id": session.class_id,
            "class_name": self.class_label(session),
            "token": session.token,
            "state": effective_state(session, now).value,
            "start_time": to_iso(session.start_time) if session.start_time else None,
            "duration_seconds": session.duration_seconds,
            "anchor": session.anchor.to_dict() if session.anchor else None,
            "scanned": self._ledger.count_for(session.session_id),
            "countdown": countdown.to_dict() if countdown else None,
            "payload": self.payload(session),
        }
