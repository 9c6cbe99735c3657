from __future__ import annotations

import base64
import logging
import secrets
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import utc_now
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DEFAULT_SESSION_SECONDS, SESSION_ID_PREFIX, TOKEN_BYTES
from ..core.exceptions import EntropyExhaustedError
from ..geo.model import GeoPoint
from .model import Session

logger = logging.getLogger(__name__)


class TokenIssuer:
    """Mint new, inactive sessions carrying an unguessable token.

    ``random_bytes`` defaults to ``secrets.token_bytes`` and is injectable so
    tests can simulate a failing randomness source.
    """

    def __init__(
        self,
        *,
        token_bytes: int = TOKEN_BYTES,
        default_duration_seconds: int = DEFAULT_SESSION_SECONDS,
        random_bytes: Optional[Callable[[int], bytes]] = None,
    ):
        if token_bytes < 10:
            raise ValueError("token_bytes must provide at least 80 bits of randomness")
        self._token_bytes = int(token_bytes)
        self._default_duration = int(default_duration_seconds)
        self._random_bytes = random_bytes or secrets.token_bytes

    def _entropy(self, n: int) -> bytes:
        try:
            raw = self._random_bytes(n)
        except (OSError, NotImplementedError) as e:
            logger.critical("Randomness source failed while issuing a token: %s", e)
            raise EntropyExhaustedError("System randomness source is unavailable") from e
        if len(raw) < n:
            logger.critical("Randomness source returned %d of %d bytes", len(raw), n)
            raise EntropyExhaustedError("System randomness source returned too few bytes")
        return raw

    def issue(
        self,
        class_id: str,
        *,
        anchor: Optional[GeoPoint] = None,
        duration_seconds: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Session:
        class_id = require_non_empty(class_id, "class_id")
        duration = self._default_duration if duration_seconds is None else require_positive_int(duration_seconds, "duration_seconds")
        if anchor is not None:
            anchor.validate()

        token = base64.urlsafe_b64encode(self._entropy(self._token_bytes)).rstrip(b"=").decode("ascii")
        session_id = f"{SESSION_ID_PREFIX}{self._entropy(6).hex()}"

        return Session(
            session_id=session_id,
            class_id=class_id,
            token=token,
            issued_at=now or utc_now(),
            duration_seconds=duration,
            anchor=anchor,
        )
