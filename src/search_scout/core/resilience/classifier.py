"""Error classification for retry decisions.

Maps an arbitrary exception to an ``ErrorClassification``: its
``ErrorClass``, whether a retry can help, and how long to wait first.

Recognition order:
1. Errors already wrapped by the retry executor keep their classification.
2. Structured search API errors (``search_scout.core.errors.search``).
3. Transport exceptions (``httpx`` and builtin timeout/connection errors),
   including ``httpx.HTTPStatusError`` mapped by status code.
4. Best-effort matching on the lowercased message, for collaborators that
   only raise plain exceptions.
Everything else is non-retryable.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from search_scout.core.errors.resilience import OperationCancelledError, RetryError
from search_scout.core.errors.search import (
    AbuseRateLimitError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    RateLimitError,
    SearchAPIError,
    ServerError,
    ValidationError,
)
from search_scout.core.resilience.headers import (
    parse_rate_limit_quota,
    parse_rate_limit_reset,
    parse_retry_after,
)
from search_scout.core.resilience.models import (
    ErrorClass,
    ErrorClassification,
    RetryPolicy,
)

logger = logging.getLogger(__name__)

# Secondary limits ask for a long cooldown: one minute, plus 30s per attempt.
ABUSE_BASE_DELAY = 60.0
ABUSE_ATTEMPT_INCREMENT = 30.0

# Timeouts back off more gently than other transient failures.
TIMEOUT_BACKOFF_FACTOR = 1.5

_ABUSE_PATTERNS = ("secondary rate limit", "abuse detection", "abuse rate limit")
_RATE_LIMIT_PATTERNS = ("rate limit", "rate_limit", "too many requests")
_SERVER_PATTERNS = (
    "500",
    "502",
    "503",
    "504",
    "internal server error",
    "bad gateway",
    "service unavailable",
    "gateway timeout",
)
_TIMEOUT_PATTERNS = ("timeout", "timed out", "deadline exceeded")
_NETWORK_PATTERNS = (
    "connection refused",
    "network unreachable",
    "no such host",
    "connection reset",
)

_TIMEOUT_TYPES = (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)
_NETWORK_TYPES = (ConnectionError, httpx.TransportError)

_PERMANENT_TYPES: tuple[tuple[type, str], ...] = (
    (AuthenticationError, "authentication"),
    (AuthorizationError, "authorization"),
    (NotFoundError, "not_found"),
    (ValidationError, "validation"),
)


def _permanent(reason: str) -> ErrorClassification:
    return ErrorClassification(
        error_class=ErrorClass.NON_RETRYABLE,
        retryable=False,
        delay=0.0,
        reason=reason,
    )


class ErrorClassifier:
    """Classify failures and compute the delay before the next attempt.

    Args:
        policy: Retry policy supplying backoff parameters and caps.
    """

    def __init__(self, policy: Optional[RetryPolicy] = None) -> None:
        self.policy = policy or RetryPolicy()

    # ------------------------------------------------------------------
    # Delay calculation
    # ------------------------------------------------------------------

    def cap_delay(self, delay: float) -> float:
        return min(delay, self.policy.max_delay)

    def exponential_backoff(self, attempt: int, factor: Optional[float] = None) -> float:
        """``base_delay * factor**attempt`` capped at ``max_delay``."""
        factor = self.policy.backoff_factor if factor is None else factor
        return self.cap_delay(self.policy.base_delay * (factor**attempt))

    def rate_limit_delay(self, reset_after: Optional[float], attempt: int) -> float:
        if reset_after is None:
            return self.exponential_backoff(attempt)
        return min(max(0.0, reset_after), self.policy.rate_limit_reset_cap)

    def abuse_delay(self, retry_after: Optional[float], attempt: int) -> float:
        if retry_after is not None:
            return max(0.0, retry_after)
        return self.cap_delay(ABUSE_BASE_DELAY + attempt * ABUSE_ATTEMPT_INCREMENT)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, error: BaseException, attempt: int = 0) -> ErrorClassification:
        """Classify ``error`` raised on the zero-based ``attempt``."""
        if isinstance(error, RetryError):
            return error.classification
        if isinstance(error, OperationCancelledError):
            return _permanent("cancelled")

        classification = (
            self._classify_structured(error, attempt)
            or self._classify_transport(error, attempt)
            or self._classify_message(str(error).lower(), attempt)
        )
        if classification is None:
            if isinstance(error, SearchAPIError) and error.retryable:
                classification = ErrorClassification(
                    error_class=ErrorClass.SERVER_ERROR,
                    retryable=True,
                    delay=self.exponential_backoff(attempt),
                    reason="server_error",
                )
            else:
                classification = _permanent("unclassified")

        logger.debug(
            "Classified %s as %s (retryable=%s, delay=%.2fs)",
            type(error).__name__,
            classification.error_class.value,
            classification.retryable,
            classification.delay,
        )
        return classification

    def _classify_structured(
        self, error: BaseException, attempt: int
    ) -> Optional[ErrorClassification]:
        if isinstance(error, RateLimitError):
            return ErrorClassification(
                error_class=ErrorClass.RATE_LIMIT,
                retryable=True,
                delay=self.rate_limit_delay(error.reset_after, attempt),
                reason="rate_limit",
            )
        if isinstance(error, AbuseRateLimitError):
            return ErrorClassification(
                error_class=ErrorClass.ABUSE_DETECTION,
                retryable=True,
                delay=self.abuse_delay(error.retry_after, attempt),
                reason="abuse_detection",
            )
        if isinstance(error, ServerError):
            return self._server_error(attempt)
        for error_type, reason in _PERMANENT_TYPES:
            if isinstance(error, error_type):
                return _permanent(reason)
        return None

    def _classify_transport(
        self, error: BaseException, attempt: int
    ) -> Optional[ErrorClassification]:
        if isinstance(error, httpx.HTTPStatusError):
            return self._classify_response(error.response, attempt)
        if isinstance(error, _TIMEOUT_TYPES):
            return self._timeout(attempt)
        if isinstance(error, _NETWORK_TYPES):
            return self._network_error(attempt)
        return None

    def _classify_response(self, response: httpx.Response, attempt: int) -> ErrorClassification:
        status = response.status_code
        try:
            body = response.text.lower()
        except httpx.ResponseNotRead:
            body = ""

        is_abuse = any(p in body for p in _ABUSE_PATTERNS)
        if status == 429 or (status == 403 and is_abuse):
            if is_abuse:
                return ErrorClassification(
                    error_class=ErrorClass.ABUSE_DETECTION,
                    retryable=True,
                    delay=self.abuse_delay(parse_retry_after(response), attempt),
                    reason="abuse_detection",
                )
            reset_after = parse_retry_after(response)
            if reset_after is None:
                reset_after = parse_rate_limit_reset(response)
            return ErrorClassification(
                error_class=ErrorClass.RATE_LIMIT,
                retryable=True,
                delay=self.rate_limit_delay(reset_after, attempt),
                reason="rate_limit",
            )
        _, remaining = parse_rate_limit_quota(response)
        if status == 403 and remaining == 0:
            return ErrorClassification(
                error_class=ErrorClass.RATE_LIMIT,
                retryable=True,
                delay=self.rate_limit_delay(parse_rate_limit_reset(response), attempt),
                reason="rate_limit",
            )
        if status == 401:
            return _permanent("authentication")
        if status == 403:
            return _permanent("authorization")
        if status == 404:
            return _permanent("not_found")
        if status == 422:
            return _permanent("validation")
        if 500 <= status < 600:
            return self._server_error(attempt)
        # the message embeds the request URL, so known statuses never fall back to it
        if 400 <= status < 500:
            return _permanent("client_error")
        return _permanent("unclassified")

    def _classify_message(self, message: str, attempt: int) -> Optional[ErrorClassification]:
        # Abuse phrases contain "rate limit", so they are checked first.
        if any(p in message for p in _ABUSE_PATTERNS):
            return ErrorClassification(
                error_class=ErrorClass.ABUSE_DETECTION,
                retryable=True,
                delay=self.abuse_delay(None, attempt),
                reason="abuse_detection",
            )
        if any(p in message for p in _RATE_LIMIT_PATTERNS):
            return ErrorClassification(
                error_class=ErrorClass.RATE_LIMIT,
                retryable=True,
                delay=self.rate_limit_delay(None, attempt),
                reason="rate_limit",
            )
        if any(p in message for p in _SERVER_PATTERNS):
            return self._server_error(attempt)
        if any(p in message for p in _TIMEOUT_PATTERNS):
            return self._timeout(attempt)
        if any(p in message for p in _NETWORK_PATTERNS):
            return self._network_error(attempt)
        return None

    def _server_error(self, attempt: int) -> ErrorClassification:
        return ErrorClassification(
            error_class=ErrorClass.SERVER_ERROR,
            retryable=True,
            delay=self.exponential_backoff(attempt),
            reason="server_error",
        )

    def _timeout(self, attempt: int) -> ErrorClassification:
        return ErrorClassification(
            error_class=ErrorClass.TIMEOUT,
            retryable=True,
            delay=self.exponential_backoff(attempt, factor=TIMEOUT_BACKOFF_FACTOR),
            reason="timeout",
        )

    def _network_error(self, attempt: int) -> ErrorClassification:
        return ErrorClassification(
            error_class=ErrorClass.NETWORK_ERROR,
            retryable=True,
            delay=self.exponential_backoff(attempt),
            reason="network",
        )
