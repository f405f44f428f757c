"""Async retry with classified, exponential backoff.

``RetryExecutor`` runs one operation with a bounded number of retries.
Each failure is classified; permanent errors surface immediately, transient
ones are retried after the classified delay. Every wait races the caller's
cancellation token.
"""

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from search_scout.core.cancellation import CancellationToken, cancellable_sleep
from search_scout.core.errors.resilience import (
    NonRetryableError,
    OperationCancelledError,
    RetryExhaustedError,
)
from search_scout.core.observability import audit_log, redact_secrets
from search_scout.core.resilience.classifier import ErrorClassifier
from search_scout.core.resilience.models import (
    ErrorClass,
    ErrorClassification,
    RetryObserver,
    RetryPolicy,
    SleepFunc,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExecutor:
    """Run operations with bounded retries and exponential backoff.

    Args:
        policy: Retry policy (default ``RetryPolicy()``).
        classifier: Error classifier; built from ``policy`` when omitted.
        sleep_func: Injectable cancellable sleep, for time control in tests.

    Example:
        >>> executor = RetryExecutor(RetryPolicy(max_retries=2))
        >>> count = await executor.with_retry(
        ...     "search 'configs'",
        ...     lambda: client.search(query),
        ...     token=CancellationToken(timeout=60.0),
        ... )
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        *,
        classifier: Optional[ErrorClassifier] = None,
        sleep_func: Optional[SleepFunc] = None,
    ) -> None:
        self.policy = policy or RetryPolicy()
        self.classifier = classifier or ErrorClassifier(self.policy)
        self._sleep = sleep_func or cancellable_sleep

    async def with_retry(
        self,
        label: str,
        operation: Callable[[], Awaitable[T]],
        *,
        token: Optional[CancellationToken] = None,
        observer: Optional[RetryObserver] = None,
    ) -> T:
        """Execute ``operation`` until it succeeds or retries run out.

        The operation is invoked at most ``max_retries + 1`` times. No delay
        follows the first success or the final failed attempt.

        Args:
            label: Human-readable operation name used in errors and logs.
            operation: Zero-argument callable returning an awaitable.
            token: Cancellation token checked before every attempt and
                raced against every retry delay.
            observer: Receives ``record_retry()`` for each scheduled retry
                and ``record_delay()`` for each completed backoff.

        Returns:
            The operation's result.

        Raises:
            OperationCancelledError: If the token is cancelled before an
                attempt or during a retry delay.
            NonRetryableError: On the first error a retry cannot fix.
            RetryExhaustedError: When the final attempt fails.
        """
        last_error: Optional[Exception] = None
        last_classification: Optional[ErrorClassification] = None

        for attempt in range(self.policy.max_retries + 1):
            if token is not None:
                try:
                    token.raise_if_cancelled("before_attempt", label)
                except OperationCancelledError as exc:
                    audit_log("cancelled", label=label, phase=exc.phase, reason=exc.reason)
                    raise

            try:
                return await operation()
            except OperationCancelledError:
                raise
            except Exception as exc:
                last_error = exc

            classification = self.classifier.classify(last_error, attempt)
            last_classification = classification

            if not classification.retryable:
                logger.info(
                    "Non-retryable %s error in %s: %s",
                    classification.reason,
                    label,
                    redact_secrets(str(last_error)),
                )
                audit_log(
                    "non_retryable",
                    label=label,
                    attempt=attempt + 1,
                    reason=classification.reason,
                )
                raise NonRetryableError(label, classification, last_error) from last_error

            if attempt == self.policy.max_retries:
                break

            self._record_transient(label, attempt, classification, last_error)
            if observer is not None:
                observer.record_retry()

            try:
                await self._sleep(
                    classification.delay, token, phase="retry_delay", label=label
                )
            except OperationCancelledError as exc:
                audit_log("cancelled", label=label, phase=exc.phase, reason=exc.reason)
                raise

            if observer is not None and classification.delay > 0:
                observer.record_delay(classification.delay)

        if last_error is None or last_classification is None:
            raise RuntimeError("RetryExecutor.with_retry: unexpected state")
        logger.warning(
            "%s failed after %d retries (%s)",
            label,
            self.policy.max_retries,
            last_classification.error_class.value,
        )
        audit_log(
            "retry_exhausted",
            label=label,
            retries=self.policy.max_retries,
            error_class=last_classification.error_class.value,
        )
        raise RetryExhaustedError(
            label, self.policy.max_retries, last_classification, last_error
        ) from last_error

    def _record_transient(
        self,
        label: str,
        attempt: int,
        classification: ErrorClassification,
        error: Exception,
    ) -> None:
        logger.warning(
            "%s attempt %d/%d failed (%s), retrying in %.2fs: %s",
            label,
            attempt + 1,
            self.policy.max_retries + 1,
            classification.error_class.value,
            classification.delay,
            redact_secrets(str(error), max_length=200),
        )
        audit_log(
            "retry_attempt",
            label=label,
            attempt=attempt + 1,
            max_attempts=self.policy.max_retries + 1,
            error_class=classification.error_class.value,
            delay_seconds=classification.delay,
        )
        if classification.error_class is ErrorClass.RATE_LIMIT:
            audit_log("rate_limit", label=label, delay_seconds=classification.delay)
        elif classification.error_class is ErrorClass.ABUSE_DETECTION:
            audit_log("abuse_detection", label=label, delay_seconds=classification.delay)
