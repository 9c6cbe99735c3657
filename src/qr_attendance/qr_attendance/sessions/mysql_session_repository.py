from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import SessionState
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, from_db_datetime, query_all, query_one, to_db_datetime
from ..geo.model import GeoPoint
from .model import Session
from .repository import SessionRepository

_COLUMNS = (
    "session_id, class_id, token, issued_at, duration_seconds, "
    "anchor_lat, anchor_lng, state, start_time, closed_at"
)


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_session(r: dict) -> Session:
        anchor = None
        if r.get("anchor_lat") is not None and r.get("anchor_lng") is not None:
            anchor = GeoPoint(float(r["anchor_lat"]), float(r["anchor_lng"]))
        return Session(
            session_id=r["session_id"],
            class_id=r["class_id"],
            token=r["token"],
            issued_at=from_db_datetime(r["issued_at"]),
            duration_seconds=int(r["duration_seconds"]),
            anchor=anchor,
            state=SessionState(r["state"]),
            start_time=from_db_datetime(r.get("start_time")),
            closed_at=from_db_datetime(r.get("closed_at")),
        )

    def add(self, session: Session) -> None:
        anchor = session.anchor
        try:
            with db_cursor(self._conn_factory) as cur:
                cur.execute(
                    f"""
                    INSERT INTO attendance_sessions({_COLUMNS})
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        session.session_id,
                        session.class_id,
                        session.token,
                        to_db_datetime(session.issued_at),
                        int(session.duration_seconds),
                        anchor.latitude if anchor else None,
                        anchor.longitude if anchor else None,
                        session.state.value,
                        to_db_datetime(session.start_time),
                        to_db_datetime(session.closed_at),
                    ),
                )
        except mysql_errors.IntegrityError:
            raise ConflictError("Session id or token already exists")

    def save(self, session: Session) -> None:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                """
                UPDATE attendance_sessions
                SET state=%s, start_time=%s, closed_at=%s
                WHERE session_id=%s
                """,
                (
                    session.state.value,
                    to_db_datetime(session.start_time),
                    to_db_datetime(session.closed_at),
                    session.session_id,
                ),
            )
            if cur.rowcount == 0:
                raise KeyError(session.session_id)

    def _find_one(self, where: str, value: str) -> Optional[Session]:
        r = query_one(self._conn_factory, f"SELECT {_COLUMNS} FROM attendance_sessions WHERE {where}=%s", (value,))
        return self._to_session(r) if r else None

    def get_by_id(self, session_id: str) -> Optional[Session]:
        return self._find_one("session_id", session_id)

    def get_by_token(self, token: str) -> Optional[Session]:
        return self._find_one("token", token)

    def list_by_state(self, state: SessionState) -> Sequence[Session]:
        rows = query_all(
            self._conn_factory,
            f"SELECT {_COLUMNS} FROM attendance_sessions WHERE state=%s ORDER BY issued_at DESC",
            (state.value,),
        )
        return [self._to_session(r) for r in rows]
