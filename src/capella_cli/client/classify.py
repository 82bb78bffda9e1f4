"""Map a failed HTTP response onto a classified APIError.

Classification is pure: it never performs I/O and never raises, whatever the
body contains.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from capella_cli.client.errors import (
    APIError,
    AuthenticationError,
    ConflictError,
    FatalError,
    NotFoundError,
    RateLimitedError,
    TransientError,
)


def _decode_body(body: bytes | str | None) -> tuple[dict[str, Any] | None, str]:
    if body is None:
        return None, ""
    if isinstance(body, bytes):
        text = body.decode("utf-8", errors="replace")
    else:
        text = body
    try:
        data = json.loads(text)
    except ValueError:
        return None, text.strip()
    if isinstance(data, dict):
        return data, text.strip()
    return None, text.strip()


def parse_retry_after(value: str | None, *, now: datetime | None = None) -> float | None:
    """Parse a Retry-After value given as delta-seconds or an HTTP-date."""
    if not value:
        return None
    value = value.strip()
    try:
        seconds = float(value)
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        seconds = (when - (now or datetime.now(timezone.utc))).total_seconds()
    return max(seconds, 0.0)


def _retry_after(headers: Mapping[str, str] | None, data: dict[str, Any] | None) -> float | None:
    if headers is not None:
        hint = parse_retry_after(headers.get("retry-after") or headers.get("Retry-After"))
        if hint is not None:
            return hint
    if data is not None:
        raw = data.get("retryAfter")
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return max(float(raw), 0.0)
        if isinstance(raw, str):
            return parse_retry_after(raw)
    return None


def classify_error(
    status_code: int,
    body: bytes | str | None,
    headers: Mapping[str, str] | None = None,
) -> APIError:
    """Classify a response whose status was not the expected success status."""
    data, text = _decode_body(body)
    message = ""
    code: int | None = None
    hint: str | None = None
    if data is not None:
        raw_message = data.get("message")
        if isinstance(raw_message, str):
            message = raw_message
        raw_code = data.get("code")
        if isinstance(raw_code, int) and not isinstance(raw_code, bool):
            code = raw_code
        raw_hint = data.get("hint")
        if isinstance(raw_hint, str) and raw_hint:
            hint = raw_hint
    if not message:
        message = text or f"unexpected status {status_code}"

    if status_code == 404:
        return NotFoundError(status_code, message, code=code, hint=hint)
    if status_code == 409:
        return ConflictError(status_code, message, code=code, hint=hint)
    if status_code == 429:
        return RateLimitedError(
            status_code, message, code=code, hint=hint,
            retry_after=_retry_after(headers, data),
        )
    if 500 <= status_code <= 599:
        return TransientError(status_code, message, code=code, hint=hint)
    if status_code in (401, 403):
        return AuthenticationError(status_code, message, code=code, hint=hint)
    return FatalError(status_code, message, code=code, hint=hint)
