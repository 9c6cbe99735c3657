from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable machine-readable ``code`` so callers can
    branch on the reason without parsing the message.
    """

    code = "domain_error"
    default_message = "Request rejected"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = str(self)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"
    default_message = "Invalid input"


class InvalidCoordinateError(ValidationError):
    """Raised when a latitude/longitude pair is NaN or out of range."""

    code = "invalid_coordinate"
    default_message = "Invalid coordinates"


class NotFoundError(DomainError):
    """Raised when a referenced session does not exist."""

    code = "not_found"
    default_message = "Session not found"


class ConflictError(DomainError):
    """Raised when another session is already active."""

    code = "conflict"
    default_message = "Another attendance session is already active"


class InvalidTokenError(DomainError):
    """Raised for unknown or malformed tokens."""

    code = "invalid_token"
    default_message = "Invalid QR code or session not found"


class SessionExpiredError(DomainError):
    """Raised when the session window elapsed or the session was closed."""

    code = "session_expired"
    default_message = "QR code has expired. Please ask instructor for a new code."


class OutOfRangeError(DomainError):
    """Raised when the scanner is further from the anchor than allowed."""

    code = "out_of_range"

    def __init__(self, distance_meters: float, threshold_meters: float, location_name: Optional[str] = None):
        self.distance_meters = float(distance_meters)
        self.threshold_meters = float(threshold_meters)
        self.location_name = location_name
        where = location_name or "the classroom"
        super().__init__(
            f"You must be within {threshold_meters:.0f}m of {where}. "
            f"You are {round(distance_meters)}m away."
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["distance_meters"] = round(self.distance_meters, 1)
        data["threshold_meters"] = self.threshold_meters
        return data


class DuplicateScanError(DomainError):
    """Raised when the student is already recorded for the session."""

    code = "duplicate_scan"
    default_message = "Attendance already marked for this session"


class ConfigurationError(RuntimeError):
    """Fatal misconfiguration that needs operator intervention."""


class EntropyExhaustedError(ConfigurationError):
    """Raised when the system randomness source cannot produce a token."""
