"""Parsing and normalization helpers for configuration values.

Each helper returns ``None`` for a value it cannot accept and logs why, so
callers keep the previously loaded value.
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _parse_int(
    value: Any,
    *,
    name: str,
    source: str,
    check: Optional[Callable[[int], bool]] = None,
    expected: str = "an integer",
) -> Optional[int]:
    if isinstance(value, bool):
        parsed = None
    else:
        try:
            parsed = int(str(value).strip())
        except ValueError:
            parsed = None
    if parsed is None or (check is not None and not check(parsed)):
        logger.warning("Ignoring %s from %s: expected %s, got %r", name, source, expected, value)
        return None
    return parsed


def _parse_float(
    value: Any,
    *,
    name: str,
    source: str,
    check: Optional[Callable[[float], bool]] = None,
    expected: str = "a number",
) -> Optional[float]:
    if isinstance(value, bool):
        parsed = None
    else:
        try:
            parsed = float(str(value).strip())
        except ValueError:
            parsed = None
    if parsed is None or (check is not None and not check(parsed)):
        logger.warning("Ignoring %s from %s: expected %s, got %r", name, source, expected, value)
        return None
    return parsed


def _normalize_log_level(value: Any, *, source: str) -> Optional[str]:
    normalized = str(value).strip().upper()
    if normalized not in _VALID_LOG_LEVELS:
        logger.warning(
            "Ignoring log level %r from %s. Valid options: %s",
            value,
            source,
            ", ".join(sorted(_VALID_LOG_LEVELS)),
        )
        return None
    return normalized
