from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .core.constants import DEFAULT_SESSION_SECONDS, PROXIMITY_THRESHOLD_METERS
from .database.connection import DBConfig, DatabaseConnection
from .directory.repository import DirectoryRepository, InMemoryDirectory
from .ledger.memory_ledger_repository import InMemoryLedgerRepository
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.repository import LedgerRepository
from .ledger.service import AttendanceLedger
from .notifications.sink import LoggingNotificationSink, NotificationSink
from .scans.verifier import ScanVerifier
from .sessions.lifecycle import SessionLifecycle
from .sessions.memory_session_repository import InMemorySessionRepository
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .sessions.token_issuer import TokenIssuer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    sessions_repo: SessionRepository
    ledger_repo: LedgerRepository
    directory: DirectoryRepository
    notifier: NotificationSink

    token_issuer: TokenIssuer
    lifecycle: SessionLifecycle
    ledger: AttendanceLedger
    scan_verifier: ScanVerifier
    session_service: SessionService

    settings: dict = field(default_factory=dict)
    conn: Optional[DatabaseConnection] = None


def build_container(
    *,
    settings: dict,
    directory: Optional[DirectoryRepository] = None,
    notifier: Optional[NotificationSink] = None,
) -> Container:
    backend = str(settings.get("STORAGE_BACKEND", "memory")).lower()

    conn = None
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings["DB_CONFIG"]))
        sessions_repo: SessionRepository = MySQLSessionRepository(conn)
        ledger_repo: LedgerRepository = MySQLLedgerRepository(conn)
    elif backend == "memory":
        sessions_repo = InMemorySessionRepository()
        ledger_repo = InMemoryLedgerRepository()
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")

    if directory is None:
        path = settings.get("DIRECTORY_PATH")
        directory = InMemoryDirectory.from_json_file(path) if path else InMemoryDirectory()
    notifier = notifier or LoggingNotificationSink()

    token_issuer = TokenIssuer(
        default_duration_seconds=int(settings.get("SESSION_DURATION_SECONDS", DEFAULT_SESSION_SECONDS)),
    )
    lifecycle = SessionLifecycle(sessions_repo, token_issuer)
    ledger = AttendanceLedger(ledger_repo)
    scan_verifier = ScanVerifier(
        lifecycle,
        ledger,
        directory=directory,
        notifier=notifier,
        proximity_threshold_meters=float(settings.get("PROXIMITY_THRESHOLD_METERS", PROXIMITY_THRESHOLD_METERS)),
    )
    session_service = SessionService(lifecycle, ledger, directory, notifier=notifier)

    logger.info("Container built (storage=%s)", backend)

    return Container(
        sessions_repo=sessions_repo,
        ledger_repo=ledger_repo,
        directory=directory,
        notifier=notifier,
        token_issuer=token_issuer,
        lifecycle=lifecycle,
        ledger=ledger,
        scan_verifier=scan_verifier,
        session_service=session_service,
        settings=dict(settings),
        conn=conn,
    )
