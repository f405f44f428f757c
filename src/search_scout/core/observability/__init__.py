"""
Observability utilities for search-scout.

Provides logging setup, secret redaction and audit logging for the
resilience and batch layers.

Example:
    from search_scout.core.observability import audit_log, configure_logging

    configure_logging("DEBUG")
    audit_log("retry_attempt", label="batch search 'configs'", attempt=1)
"""

import logging
import sys
from typing import Optional, TextIO

from search_scout.core.observability.audit import (
    AuditEvent,
    AuditEventType,
    AuditLogger,
    audit_log,
)
from search_scout.core.observability.redaction import (
    SENSITIVE_PATTERNS,
    redact_secrets,
)

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a stream handler to the ``search_scout`` logger.

    Safe to call more than once; the level is updated and no duplicate
    handler is added.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO").
        stream: Output stream, defaults to stderr.

    Returns:
        The package logger.
    """
    package_logger = logging.getLogger("search_scout")
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    package_logger.setLevel(numeric_level)

    if not any(getattr(h, "_search_scout", False) for h in package_logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._search_scout = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)

    return package_logger


__all__ = [
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "audit_log",
    "SENSITIVE_PATTERNS",
    "redact_secrets",
    "configure_logging",
]
