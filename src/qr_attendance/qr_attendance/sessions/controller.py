from __future__ import annotations

import io
import logging

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import to_iso
from ..common.http import error_response, server_error_response
from ..common.validators import parse_location, require_non_empty
from ..container import Container
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.session_service

    @app.route("/api/sessions", methods=["POST"], endpoint="api_open_session")
    def api_open_session():
        """Start a new attendance session for a class (instructor action)."""
        try:
            data = request.get_json(silent=True) or {}
            class_id = require_non_empty(data.get("class_id"), "class_id")
            anchor = parse_location(data.get("anchor"))
            duration = data.get("duration_seconds")

            session = service.open_session(class_id, anchor=anchor, duration_seconds=duration)
            return jsonify(
                {
                    "success": True,
                    "session_id": session.session_id,
                    "token": session.token,
                    "start_time": to_iso(session.start_time),
                    "duration_seconds": session.duration_seconds,
                    "payload": service.payload(session),
                    "qr_data_url": service.qr_data_url(session),
                }
            ), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to open session")
            return server_error_response("System error while starting the session")

    @app.route("/api/sessions/active", methods=["GET"], endpoint="api_active_session")
    def api_active_session():
        session = service.current_active()
        if session is None:
            return jsonify({"success": True, "active": None})
        return jsonify({"success": True, "active": service.describe(session)})

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="api_get_session")
    def api_get_session(session_id: str):
        try:
            return jsonify({"success": True, "session": service.describe(service.get(session_id))})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/sessions/<session_id>/countdown", methods=["GET"], endpoint="api_session_countdown")
    def api_session_countdown(session_id: str):
        try:
            state = service.countdown(service.get(session_id))
            return jsonify({"success": True, "countdown": state.to_dict() if state else None})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/sessions/<session_id>/qr.png", methods=["GET"], endpoint="api_session_qr")
    def api_session_qr(session_id: str):
        try:
            png = service.qr_png(service.get(session_id))
            return send_file(io.BytesIO(png), mimetype="image/png")
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to render QR for session %s", session_id)
            return server_error_response("System error while rendering the QR code")

    @app.route("/api/sessions/<session_id>/attendance", methods=["GET"], endpoint="api_session_attendance")
    def api_session_attendance(session_id: str):
        try:
            service.get(session_id)
            rows = service.attendees(session_id)
            return jsonify({"success": True, "count": len(rows), "attendees": rows})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/sessions/<session_id>/close", methods=["POST"], endpoint="api_close_session")
    def api_close_session(session_id: str):
        try:
            session = service.close_session(session_id)
            return jsonify({"success": True, "session_id": session.session_id, "state": session.state.value})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to close session %s", session_id)
            return server_error_response("System error while closing the session")
