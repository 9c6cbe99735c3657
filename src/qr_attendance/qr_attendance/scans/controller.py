from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime, utc_now
from ..common.http import error_response, server_error_response
from ..common.validators import parse_location
from ..container import Container
from ..core.exceptions import DomainError, ValidationError
from ..qr.image import decode_image
from .model import ScanAttempt

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    verifier = container.scan_verifier

    def _scan_time(value):
        return parse_iso_datetime(value) if value else utc_now()

    @app.route("/api/scans", methods=["POST"], endpoint="api_submit_scan")
    def api_submit_scan():
        """Submit a decoded QR code (payload string or bare token) for a student."""
        try:
            data = request.get_json(silent=True) or {}
            code = data.get("payload") or data.get("token") or ""
            attempt = ScanAttempt.from_code(
                str(code),
                student_id=data.get("student_id"),
                scan_time=_scan_time(data.get("scan_time")),
                scanner_location=parse_location(data.get("location")),
            )
            outcome = verifier.verify(attempt)
            return jsonify(outcome.to_dict()), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Scan verification failed")
            return server_error_response("System error while marking attendance")

    @app.route("/api/scans/image", methods=["POST"], endpoint="api_submit_scan_image")
    def api_submit_scan_image():
        """Same as /api/scans but the QR code is read from an uploaded photo."""
        try:
            file = request.files.get("file")
            if file is None or not file.filename:
                raise ValidationError("No image uploaded")

            location = None
            if request.form.get("lat") or request.form.get("lng"):
                location = parse_location({"lat": request.form.get("lat"), "lng": request.form.get("lng")})

            attempt = ScanAttempt.from_code(
                decode_image(file.stream),
                student_id=request.form.get("student_id"),
                scan_time=_scan_time(request.form.get("scan_time")),
                scanner_location=location,
            )
            outcome = verifier.verify(attempt)
            return jsonify(outcome.to_dict()), 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Scan-by-image verification failed")
            return server_error_response("System error while marking attendance")
