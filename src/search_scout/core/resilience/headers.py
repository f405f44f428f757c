"""Rate-limit header parsing.

Pure helpers that turn HTTP response headers into the numbers the
classifier needs. They accept either an ``httpx.Response`` or any header
mapping; lookups are case-insensitive.
"""

from __future__ import annotations

import time
from email.utils import parsedate_to_datetime
from typing import Callable, Mapping, Optional, Union

import httpx

HeaderSource = Union[httpx.Response, httpx.Headers, Mapping[str, str]]


def _headers(source: HeaderSource) -> httpx.Headers:
    if isinstance(source, httpx.Response):
        return source.headers
    if isinstance(source, httpx.Headers):
        return source
    return httpx.Headers(dict(source))


def parse_retry_after(
    source: HeaderSource,
    *,
    now: Callable[[], float] = time.time,
) -> Optional[float]:
    """Parse the ``Retry-After`` header.

    Handles both forms allowed by RFC 9110: a number of seconds and an
    HTTP-date. Dates in the past yield ``0.0``.

    Args:
        source: Response or headers to read.
        now: Wall clock, injectable for tests.

    Returns:
        Seconds to wait before retrying, or ``None`` if the header is
        missing or unparseable.
    """
    value = _headers(source).get("Retry-After")
    if not value:
        return None
    value = value.strip()
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when is None:
        return None
    return max(0.0, when.timestamp() - now())


def parse_rate_limit_reset(
    source: HeaderSource,
    *,
    now: Callable[[], float] = time.time,
) -> Optional[float]:
    """Seconds until ``X-RateLimit-Reset`` (an epoch timestamp), if present."""
    value = _headers(source).get("X-RateLimit-Reset")
    if not value:
        return None
    try:
        reset_at = float(value)
    except ValueError:
        return None
    return max(0.0, reset_at - now())


def parse_rate_limit_quota(source: HeaderSource) -> tuple[Optional[int], Optional[int]]:
    """Return ``(limit, remaining)`` from the X-RateLimit headers."""
    headers = _headers(source)

    def _int(name: str) -> Optional[int]:
        raw = headers.get(name)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    return _int("X-RateLimit-Limit"), _int("X-RateLimit-Remaining")
