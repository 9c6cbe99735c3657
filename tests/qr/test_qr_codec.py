from __future__ import annotations

import json

import pytest

from src.qr_attendance.qr_attendance.core.exceptions import InvalidTokenError
from src.qr_attendance.qr_attendance.qr.codec import QrPayload, decode_payload, encode_payload
from src.qr_attendance.qr_attendance.qr.image import render_png, to_data_url
from src.qr_attendance.qr_attendance.scans.model import ScanAttempt


def test_payload_has_exactly_the_four_fields(lifecycle, fixed_now):
    session = lifecycle.open("cls001", now=fixed_now)
    text = encode_payload(QrPayload.for_session(session, "Data Structures"))

    data = json.loads(text)
    assert data == {
        "sessionId": session.session_id,
        "token": session.token,
        "timestamp": "2026-02-02T09:00:00Z",
        "class": "Data Structures",
    }
    assert " " not in text.replace("Data Structures", "")

    decoded = decode_payload(text)
    assert decoded == QrPayload(session.session_id, session.token, fixed_now, "Data Structures")


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not json",
        "[1, 2]",
        '{"sessionId": "s", "token": "t", "timestamp": "2026-02-02T09:00:00Z"}',
        '{"sessionId": "s", "token": "", "timestamp": "2026-02-02T09:00:00Z", "class": null}',
        '{"sessionId": "s", "token": "t", "timestamp": "yesterday", "class": null}',
        '{"sessionId": "s", "token": "t", "timestamp": "2026-02-02T09:00:00Z", "class": 7}',
        '{"sessionId": "s", "token": "t", "timestamp": "2026-02-02T09:00:00Z", "class": null, "x": 1}',
    ],
)
def test_malformed_payload_is_invalid_token(text):
    with pytest.raises(InvalidTokenError):
        decode_payload(text)


def test_scan_attempt_accepts_bare_token(fixed_now):
    attempt = ScanAttempt.from_code(" abc123 ", student_id="stu001", scan_time=fixed_now)
    assert attempt.token == "abc123"
    assert attempt.session_id is None


def test_scan_attempt_rejects_empty_code(fixed_now):
    with pytest.raises(InvalidTokenError):
        ScanAttempt.from_code("   ", student_id="stu001", scan_time=fixed_now)


def test_render_png_produces_png_bytes():
    png = render_png('{"sessionId":"sess1"}')

    assert png.startswith(b"\x89PNG\r\n\x1a\n")
    assert to_data_url(png).startswith("data:image/png;base64,iVBOR")


def test_rendered_png_decodes_back_to_payload():
    pytest.importorskip("pyzbar.pyzbar")
    from src.qr_attendance.qr_attendance.qr.image import decode_image

    text = '{"sessionId":"sess1","token":"abc","timestamp":"2026-02-02T09:00:00Z","class":"DS"}'
    assert decode_image(render_png(text)) == text


def test_non_text_qr_content_is_invalid_token(monkeypatch):
    pyzbar = pytest.importorskip("pyzbar.pyzbar")
    from types import SimpleNamespace

    from src.qr_attendance.qr_attendance.qr.image import decode_image

    monkeypatch.setattr(pyzbar, "decode", lambda img: [SimpleNamespace(data=b"\xff\xfe\xfd")])

    with pytest.raises(InvalidTokenError):
        decode_image(render_png("anything"))
