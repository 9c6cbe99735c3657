from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import parse_iso_datetime, to_iso
from ..core.exceptions import InvalidTokenError, ValidationError
from ..sessions.model import Session

_KEYS = ("sessionId", "token", "timestamp", "class")


@dataclass(frozen=True)
class QrPayload:
    """What the QR code carries: session id, token, issued-at and class label."""

    session_id: str
    token: str
    issued_at: datetime
    class_label: Optional[str] = None

    @classmethod
    def for_session(cls, session: Session, class_label: Optional[str] = None) -> "QrPayload":
        return cls(
            session_id=session.session_id,
            token=session.token,
            issued_at=session.start_time or session.issued_at,
            class_label=class_label if class_label is not None else session.class_id,
        )


def encode_payload(payload: QrPayload) -> str:
    data = {
        "sessionId": payload.session_id,
        "token": payload.token,
        "timestamp": to_iso(payload.issued_at),
        "class": payload.class_label,
    }
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def decode_payload(text: str) -> QrPayload:
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        raise InvalidTokenError()
    if not isinstance(data, dict) or set(data) != set(_KEYS):
        raise InvalidTokenError()

    session_id, token, label = data["sessionId"], data["token"], data["class"]
    if not isinstance(session_id, str) or not isinstance(token, str) or not session_id or not token:
        raise InvalidTokenError()
    if label is not None and not isinstance(label, str):
        raise InvalidTokenError()
    try:
        issued_at = parse_iso_datetime(str(data["timestamp"]))
    except ValidationError:
        raise InvalidTokenError()
    return QrPayload(session_id=session_id, token=token, issued_at=issued_at, class_label=label)


def looks_like_payload(text: str) -> bool:
    return (text or "").lstrip().startswith("{")
