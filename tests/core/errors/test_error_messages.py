"""Unit tests for error hierarchy messages and attributes."""

import pytest

from search_scout.core.errors import (
    AbuseRateLimitError,
    AuthenticationError,
    BatchSearchError,
    NonRetryableError,
    RateLimitError,
    RetryExhaustedError,
    SearchAPIError,
    ServerError,
    ValidationError,
)
from search_scout.core.resilience import ErrorClass, ErrorClassification


def _classification(error_class, retryable=True):
    return ErrorClassification(error_class=error_class, retryable=retryable)


class TestSearchAPIErrors:
    """Tests for structured search API errors."""

    @pytest.mark.parametrize(
        "error, retryable",
        [
            (RateLimitError(), True),
            (AbuseRateLimitError(), True),
            (ServerError(), True),
            (AuthenticationError(), False),
            (ValidationError(), False),
        ],
    )
    def test_retryable_flag(self, error, retryable):
        """Transient error types are marked retryable."""
        assert isinstance(error, SearchAPIError)
        assert error.retryable is retryable

    def test_validation_error_includes_first_detail(self):
        """The first validation message is appended."""
        error = ValidationError(errors=["query too long", "bad qualifier"])
        assert str(error) == "Validation Failed: query too long"
        assert str(ValidationError()) == "Validation Failed"


class TestRetryErrors:
    """Tests for retry failure messages."""

    @pytest.mark.parametrize(
        "error_class, prefix, hint",
        [
            (ErrorClass.RATE_LIMIT, "rate limit exceeded during", "Wait until your rate limit resets"),
            (ErrorClass.ABUSE_DETECTION, "abuse detection triggered during", "Wait at least 1 minute"),
            (ErrorClass.SERVER_ERROR, "server error during", "Check the API provider's status page"),
        ],
    )
    def test_exhausted_message_guidance(self, error_class, prefix, hint):
        """Exhausted retries carry class-specific suggestions."""
        cause = RuntimeError("boom")
        error = RetryExhaustedError("search 'a'", 3, _classification(error_class), cause)

        message = str(error)
        assert message.startswith(f"{prefix} search 'a' after 3 retries: boom")
        assert hint in message
        assert error.retries == 3
        assert error.cause is cause

    def test_exhausted_message_generic(self):
        """Other classes get a plain message."""
        error = RetryExhaustedError(
            "fetch", 2, _classification(ErrorClass.TIMEOUT), TimeoutError("slow")
        )
        assert str(error) == "operation fetch failed after 2 retries: slow"

    def test_non_retryable_message(self):
        """Non-retryable failures name the label and cause."""
        error = NonRetryableError(
            "fetch", _classification(ErrorClass.NON_RETRYABLE, False), AuthenticationError()
        )
        assert str(error) == "non-retryable error in fetch: Authentication required"


class TestBatchSearchError:
    """Tests for BatchSearchError."""

    def test_message_names_task(self):
        """The message names the failed task and its cause."""
        error = BatchSearchError("vite", ServerError("502 Bad Gateway"))
        assert str(error) == "failed to execute search 'vite': 502 Bad Gateway"
        assert error.metrics is None
        assert error.report is None
