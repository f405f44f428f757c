"""Resilience error classes.

Raised by the retry executor, the delay scheduler and cancellable sleeps.
Cancellation is kept apart from retry failures so callers can tell
"asked to stop" from "gave up".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from search_scout.core.resilience.models import ErrorClassification


class OperationCancelledError(Exception):
    """The cancellation token fired before or during a wait.

    Attributes:
        label: Operation label, if the wait belonged to one.
        phase: Where cancellation was observed ("before_attempt",
            "retry_delay", "batch_delay" or "sleep").
        reason: "cancelled" or "deadline_exceeded".
        task_name: Batch task that was running, set by the batch executor.
    """

    def __init__(
        self,
        message: str,
        label: Optional[str] = None,
        phase: str = "sleep",
        reason: str = "cancelled",
    ):
        super().__init__(message)
        self.label = label
        self.phase = phase
        self.reason = reason
        self.task_name: Optional[str] = None


class RetryError(Exception):
    """Base class for failures surfaced by ``RetryExecutor.with_retry``.

    Attributes:
        label: Operation label passed to ``with_retry``.
        classification: How the final underlying error was classified.
        cause: The final underlying error (also chained as ``__cause__``).
    """

    def __init__(
        self,
        message: str,
        label: str,
        classification: "ErrorClassification",
        cause: BaseException,
    ):
        super().__init__(message)
        self.label = label
        self.classification = classification
        self.cause = cause


class NonRetryableError(RetryError):
    """The operation failed with an error a retry cannot fix."""

    def __init__(
        self,
        label: str,
        classification: "ErrorClassification",
        cause: BaseException,
    ):
        super().__init__(
            f"non-retryable error in {label}: {cause}",
            label=label,
            classification=classification,
            cause=cause,
        )


_RATE_LIMIT_GUIDANCE = """Suggestions:
  - Wait until your rate limit resets
  - Use authenticated requests for a higher quota
  - Reduce how often batch operations run
  - Add delays between operations"""

_ABUSE_GUIDANCE = """Suggestions:
  - Requests are being sent too rapidly
  - Wait at least 1 minute before retrying
  - Use longer delays between batch operations
  - Reduce concurrent operations"""

_SERVER_GUIDANCE = """Suggestions:
  - This is usually a temporary server-side issue
  - Check the API provider's status page
  - Try again later with smaller batch sizes
  - Enable debug logging to monitor retry attempts"""


class RetryExhaustedError(RetryError):
    """Every allowed attempt failed with a retryable error.

    The message is tailored to the error class so it can be shown to a
    user as-is.
    """

    def __init__(
        self,
        label: str,
        retries: int,
        classification: "ErrorClassification",
        cause: BaseException,
    ):
        self.retries = retries
        super().__init__(
            self._format_message(label, retries, classification, cause),
            label=label,
            classification=classification,
            cause=cause,
        )

    @staticmethod
    def _format_message(
        label: str,
        retries: int,
        classification: "ErrorClassification",
        cause: BaseException,
    ) -> str:
        # Imported lazily: the resilience package imports this module.
        from search_scout.core.resilience.models import ErrorClass

        error_class = classification.error_class
        if error_class is ErrorClass.RATE_LIMIT:
            return (
                f"rate limit exceeded during {label} after {retries} retries: "
                f"{cause}\n\n{_RATE_LIMIT_GUIDANCE}"
            )
        if error_class is ErrorClass.ABUSE_DETECTION:
            return (
                f"abuse detection triggered during {label} after {retries} retries: "
                f"{cause}\n\n{_ABUSE_GUIDANCE}"
            )
        if error_class is ErrorClass.SERVER_ERROR:
            return (
                f"server error during {label} after {retries} retries: "
                f"{cause}\n\n{_SERVER_GUIDANCE}"
            )
        return f"operation {label} failed after {retries} retries: {cause}"
