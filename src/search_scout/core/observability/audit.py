"""Audit logging for resilience and batch events.

Provides structured audit events (retries, rate-limit hits, batch
lifecycle) written to a dedicated logger so they can be filtered apart
from ordinary diagnostics.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

logger = logging.getLogger(__name__)


class AuditEventType(Enum):
    """Types of audit events."""

    RETRY_ATTEMPT = "retry_attempt"
    RETRY_EXHAUSTED = "retry_exhausted"
    NON_RETRYABLE = "non_retryable"
    RATE_LIMIT = "rate_limit"
    ABUSE_DETECTION = "abuse_detection"
    BATCH_DELAY = "batch_delay"
    BATCH_ABORTED = "batch_aborted"
    BATCH_COMPLETED = "batch_completed"
    CANCELLED = "cancelled"


@dataclass
class AuditEvent:
    """Structured audit event."""

    event_type: AuditEventType
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "details": self.details,
        }


class AuditLogger:
    """
    Structured audit logging.

    Audit logs are written to a separate logger for easy filtering.
    """

    def __init__(self):
        self._logger = logging.getLogger(f"{__name__}.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._logger.info(f"AUDIT: {event.event_type.value}", extra={"audit": event.to_dict()})


_audit = AuditLogger()


def audit_log(event_type: str, **details: Any) -> None:
    """
    Convenience function for audit logging.

    Args:
        event_type: Type of event (one of the AuditEventType values)
        **details: Additional details to include in the audit log
    """
    try:
        event_enum = AuditEventType(event_type)
    except ValueError:
        logger.warning("Unknown audit event type %r", event_type)
        return

    _audit.log(AuditEvent(event_type=event_enum, details=details))
