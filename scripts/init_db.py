"""Create the database and the attendance tables for the configured environment.

    APP_ENV=production python scripts/init_db.py
    python scripts/init_db.py --settings config.development
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.qr_attendance.qr_attendance.core.logging_config import configure_logging
from src.qr_attendance.qr_attendance.database.bootstrap import apply_schema, list_tables
from src.qr_attendance.qr_attendance.main import load_settings

logger = logging.getLogger("init_db")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--settings", help="settings module, defaults to the one APP_ENV selects")
    parser.add_argument("--schema", default=str(REPO_ROOT / "database" / "schema.sql"))
    args = parser.parse_args(argv)

    settings = load_settings(args.settings)
    configure_logging(settings.get("LOG_LEVEL", "INFO"), settings.get("LOG_FILE"))

    db_config = settings.get("DB_CONFIG")
    if not db_config:
        logger.error("Settings define no DB_CONFIG; nothing to initialise")
        return 1

    apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)
    logger.info(
        "Schema ready on %s@%s/%s: %s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("database"),
        ", ".join(sorted(tables)),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
