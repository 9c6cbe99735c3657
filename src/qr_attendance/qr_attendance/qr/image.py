from __future__ import annotations

import base64
import io
from typing import BinaryIO

import qrcode
from PIL import Image, UnidentifiedImageError

from ..core.exceptions import InvalidTokenError, ValidationError


def render_png(data: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """Render ``data`` as a black-on-white QR code PNG."""

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def to_data_url(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def decode_image(stream: BinaryIO | bytes) -> str:
    """Return the text of the first QR code found in an image."""
    # zbar is a system library; only scanning by image needs it.
    from pyzbar.pyzbar import decode as pyzbar_decode

    if isinstance(stream, (bytes, bytearray)):
        stream = io.BytesIO(stream)
    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError):
        raise ValidationError("Uploaded file is not a readable image")

    decoded = pyzbar_decode(img)
    if not decoded:
        raise InvalidTokenError("No QR code detected in the image")
    try:
        return decoded[0].data.decode("utf-8").strip()
    except UnicodeDecodeError:
        raise InvalidTokenError("QR code does not contain readable text")
