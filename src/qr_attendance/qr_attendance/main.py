from __future__ import annotations

import importlib
import logging
import time
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, request

from config import get_settings_module

from .container import Container, build_container
from .core.logging_config import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .scans.controller import register as register_scans
from .sessions.controller import register as register_sessions

logger = logging.getLogger(__name__)

SETTING_NAMES = (
    "SECRET_KEY",
    "DEBUG",
    "STORAGE_BACKEND",
    "DB_CONFIG",
    "AUTO_INIT_DB",
    "SESSION_DURATION_SECONDS",
    "PROXIMITY_THRESHOLD_METERS",
    "DIRECTORY_PATH",
    "LOG_LEVEL",
    "LOG_FILE",
)


def load_settings(settings_module: Optional[str] = None) -> dict:
    settings = importlib.import_module(settings_module or get_settings_module())
    return {name: getattr(settings, name) for name in SETTING_NAMES if hasattr(settings, name)}


def create_app(settings: Optional[dict] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings = dict(settings) if settings is not None else load_settings()

    configure_logging(settings.get("LOG_LEVEL", "INFO"), settings.get("LOG_FILE"))

    app = Flask(__name__)
    app.secret_key = settings.get("SECRET_KEY")
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))

    if settings.get("STORAGE_BACKEND") == "mysql" and settings.get("AUTO_INIT_DB"):
        db_config = settings["DB_CONFIG"]
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    container = container or build_container(settings=settings)
    app.extensions["qr_attendance"] = container

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.pop("request_started", None)
        if started is not None:
            logger.debug(
                "%s %s -> %s in %.4f secs",
                request.method,
                request.path,
                response.status_code,
                time.perf_counter() - started,
            )
        return response

    register_sessions(app, container)
    register_scans(app, container)

    return app
