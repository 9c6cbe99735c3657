from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, from_db_datetime, query_all, query_one, to_db_datetime
from .model import AttendanceRecord
from .repository import LedgerRepository

logger = logging.getLogger(__name__)

_COLUMNS = "record_id, session_id, student_id, recorded_at, distance_meters"


class MySQLLedgerRepository(LedgerRepository):
    """Ledger backed by ``attendance_records``.

    Uniqueness comes from the UNIQUE KEY on (session_id, student_id); a
    duplicate-key error on INSERT is the "already recorded" signal.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_record(r: dict) -> AttendanceRecord:
        distance = r.get("distance_meters")
        return AttendanceRecord(
            record_id=int(r["record_id"]),
            session_id=r["session_id"],
            student_id=r["student_id"],
            recorded_at=from_db_datetime(r["recorded_at"]),
            distance_meters=float(distance) if distance is not None else None,
        )

    def insert_unique(
        self,
        *,
        session_id: str,
        student_id: str,
        recorded_at: datetime,
        distance_meters: Optional[float] = None,
    ) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as cur:
                cur.execute(
                    """
                    INSERT INTO attendance_records(session_id, student_id, recorded_at, distance_meters)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (session_id, student_id, to_db_datetime(recorded_at), distance_meters),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError as e:
            if e.errno != errorcode.ER_DUP_ENTRY:
                raise
            logger.debug("Duplicate attendance insert for %s/%s", session_id, student_id)
            return None

    def exists(self, session_id: str, student_id: str) -> bool:
        return self.get(session_id, student_id) is not None

    def get(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        r = query_one(
            self._conn_factory,
            f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s AND student_id=%s",
            (session_id, student_id),
        )
        return self._to_record(r) if r else None

    def list_for_session(self, session_id: str) -> Sequence[AttendanceRecord]:
        rows = query_all(
            self._conn_factory,
            f"SELECT {_COLUMNS} FROM attendance_records WHERE session_id=%s ORDER BY record_id ASC",
            (session_id,),
        )
        return [self._to_record(r) for r in rows]

    def count_for_session(self, session_id: str) -> int:
        r = query_one(self._conn_factory, "SELECT COUNT(*) AS n FROM attendance_records WHERE session_id=%s", (session_id,))
        return int(r["n"]) if r else 0
