from __future__ import annotations

from flask import jsonify

from ..core.exceptions import (
    ConflictError,
    DomainError,
    DuplicateScanError,
    InvalidTokenError,
    NotFoundError,
    OutOfRangeError,
    SessionExpiredError,
    ValidationError,
)

# Most specific first: lookup walks the exception's MRO.
_STATUS_BY_ERROR = {
    ValidationError: 400,
    InvalidTokenError: 400,
    NotFoundError: 404,
    OutOfRangeError: 403,
    ConflictError: 409,
    DuplicateScanError: 409,
    SessionExpiredError: 410,
}


def status_for(error: DomainError) -> int:
    for cls in type(error).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return 400


def error_response(error: DomainError):
    body = {"success": False}
    body.update(error.to_dict())
    return jsonify(body), status_for(error)


def server_error_response(message: str = "Internal error"):
    return jsonify({"success": False, "code": "internal_error", "message": message}), 500
