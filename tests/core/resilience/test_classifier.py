"""Unit tests for ErrorClassifier.

Tests cover:
- Structured search API errors and their delays
- httpx status and transport exceptions
- Message fallback, including abuse-before-rate-limit ordering
- Delay caps for every transient class
"""

import httpx
import pytest

from search_scout.core.errors import (
    AbuseRateLimitError,
    AuthenticationError,
    AuthorizationError,
    NonRetryableError,
    NotFoundError,
    OperationCancelledError,
    RateLimitError,
    SearchAPIError,
    ServerError,
    ValidationError,
)
from search_scout.core.resilience import (
    ErrorClass,
    ErrorClassification,
    ErrorClassifier,
    RetryPolicy,
)


def _status_error(status: int, body: str = "", headers=None) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.example.test/search/code")
    response = httpx.Response(status, text=body, headers=headers or {}, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


@pytest.fixture
def classifier():
    return ErrorClassifier(RetryPolicy(base_delay=1.0, max_delay=300.0, backoff_factor=2.0))


class TestStructuredErrors:
    """Tests for typed search API errors."""

    def test_rate_limit_uses_reported_reset(self, classifier):
        """A known reset below the cap is used as-is."""
        result = classifier.classify(RateLimitError(reset_after=12.0))
        assert result.error_class == ErrorClass.RATE_LIMIT
        assert result.retryable is True
        assert result.delay == 12.0
        assert result.reason == "rate_limit"

    def test_rate_limit_reset_is_capped(self, classifier):
        """A reset of an hour is capped at rate_limit_reset_cap."""
        result = classifier.classify(RateLimitError(reset_after=3600.0))
        assert result.delay == 30.0

    def test_rate_limit_without_reset_backs_off(self, classifier):
        """No reset falls back to exponential backoff."""
        result = classifier.classify(RateLimitError(), attempt=2)
        assert result.delay == 4.0

    def test_abuse_uses_retry_after(self, classifier):
        """Retry-After wins over the default abuse cooldown."""
        result = classifier.classify(AbuseRateLimitError(retry_after=45.0), attempt=3)
        assert result.error_class == ErrorClass.ABUSE_DETECTION
        assert result.delay == 45.0

    def test_abuse_default_cooldown_grows_per_attempt(self, classifier):
        """Without Retry-After the cooldown is 60s + 30s per attempt."""
        assert classifier.classify(AbuseRateLimitError(), attempt=0).delay == 60.0
        assert classifier.classify(AbuseRateLimitError(), attempt=2).delay == 120.0

    def test_abuse_default_cooldown_is_capped(self):
        """The abuse cooldown never exceeds max_delay."""
        classifier = ErrorClassifier(RetryPolicy(max_delay=90.0))
        assert classifier.classify(AbuseRateLimitError(), attempt=5).delay == 90.0

    def test_server_error_backs_off(self, classifier):
        """Server errors use base_delay * factor**attempt."""
        result = classifier.classify(ServerError(status_code=502), attempt=3)
        assert result.error_class == ErrorClass.SERVER_ERROR
        assert result.delay == 8.0

    @pytest.mark.parametrize(
        "error, reason",
        [
            (AuthenticationError(), "authentication"),
            (AuthorizationError(), "authorization"),
            (NotFoundError(), "not_found"),
            (ValidationError(errors=["bad qualifier"]), "validation"),
        ],
    )
    def test_permanent_errors(self, classifier, error, reason):
        """Permanent errors are non-retryable with zero delay."""
        result = classifier.classify(error)
        assert result.error_class == ErrorClass.NON_RETRYABLE
        assert result.retryable is False
        assert result.delay == 0.0
        assert result.reason == reason

    def test_generic_retryable_api_error(self, classifier):
        """A bare SearchAPIError flagged retryable is treated as a server error."""
        result = classifier.classify(SearchAPIError("upstream hiccup", retryable=True))
        assert result.error_class == ErrorClass.SERVER_ERROR
        assert result.retryable is True

    def test_wrapped_error_keeps_classification(self, classifier):
        """Retry wrapper errors report the classification they carry."""
        inner = ErrorClassification(ErrorClass.NON_RETRYABLE, False, reason="not_found")
        wrapped = NonRetryableError("search", inner, NotFoundError())
        assert classifier.classify(wrapped) is inner

    def test_cancellation_is_not_retryable(self, classifier):
        """Cancellation is never retried."""
        result = classifier.classify(OperationCancelledError("stop"))
        assert result.retryable is False
        assert result.reason == "cancelled"


class TestTransportErrors:
    """Tests for httpx and builtin transport exceptions."""

    def test_timeout_uses_gentler_backoff(self, classifier):
        """Timeouts back off by a factor of 1.5."""
        result = classifier.classify(httpx.ReadTimeout("read timed out"), attempt=2)
        assert result.error_class == ErrorClass.TIMEOUT
        assert result.delay == pytest.approx(2.25)

    def test_builtin_timeout(self, classifier):
        """Builtin TimeoutError is a timeout."""
        assert classifier.classify(TimeoutError()).error_class == ErrorClass.TIMEOUT

    def test_connect_error_is_network(self, classifier):
        """httpx connection failures are network errors."""
        result = classifier.classify(httpx.ConnectError("boom"))
        assert result.error_class == ErrorClass.NETWORK_ERROR
        assert result.reason == "network"

    def test_builtin_connection_error(self, classifier):
        """Builtin ConnectionError is a network error."""
        assert classifier.classify(ConnectionResetError()).error_class == ErrorClass.NETWORK_ERROR

    def test_429_with_retry_after(self, classifier):
        """429 uses Retry-After as the reset, capped."""
        result = classifier.classify(_status_error(429, headers={"Retry-After": "7"}))
        assert result.error_class == ErrorClass.RATE_LIMIT
        assert result.delay == 7.0

    def test_403_secondary_limit_body_is_abuse(self, classifier):
        """A 403 whose body mentions the secondary limit is abuse detection."""
        error = _status_error(403, body="You have exceeded a secondary rate limit")
        result = classifier.classify(error)
        assert result.error_class == ErrorClass.ABUSE_DETECTION
        assert result.delay == 60.0

    def test_403_with_exhausted_quota_is_rate_limit(self, classifier):
        """A 403 with X-RateLimit-Remaining: 0 is a primary rate limit."""
        error = _status_error(403, headers={"X-RateLimit-Remaining": "0"})
        assert classifier.classify(error).error_class == ErrorClass.RATE_LIMIT

    @pytest.mark.parametrize(
        "status, reason",
        [(401, "authentication"), (403, "authorization"), (404, "not_found"), (422, "validation")],
    )
    def test_client_status_codes(self, classifier, status, reason):
        """4xx status codes map to permanent reasons."""
        result = classifier.classify(_status_error(status))
        assert result.retryable is False
        assert result.reason == reason

    def test_5xx_status_is_server_error(self, classifier):
        """5xx responses are retryable server errors."""
        assert classifier.classify(_status_error(503)).error_class == ErrorClass.SERVER_ERROR

    def test_other_4xx_ignores_url_text(self, classifier):
        """A 400 is permanent even when the query in its URL looks transient."""
        request = httpx.Request("GET", "https://api.example.test/search/code?q=port+8500+timeout")
        response = httpx.Response(400, request=request)
        error = httpx.HTTPStatusError(
            f"Client error '400 Bad Request' for url '{request.url}'",
            request=request,
            response=response,
        )

        result = classifier.classify(error)

        assert result.retryable is False
        assert result.error_class == ErrorClass.NON_RETRYABLE
        assert result.reason == "client_error"


class TestMessageFallback:
    """Tests for classification of plain exceptions by message."""

    def test_secondary_rate_limit_is_abuse_not_rate_limit(self, classifier):
        """Abuse phrases win even though they contain 'rate limit'."""
        result = classifier.classify(Exception("You have exceeded a secondary rate limit"))
        assert result.error_class == ErrorClass.ABUSE_DETECTION

    def test_rate_limit_phrase(self, classifier):
        """'API rate limit exceeded' is a primary rate limit."""
        result = classifier.classify(Exception("API rate limit exceeded for user"))
        assert result.error_class == ErrorClass.RATE_LIMIT

    def test_server_phrase(self, classifier):
        """5xx phrases are server errors."""
        result = classifier.classify(Exception("502 Bad Gateway"))
        assert result.error_class == ErrorClass.SERVER_ERROR

    def test_timeout_phrase(self, classifier):
        """Timeout phrases are timeouts."""
        result = classifier.classify(Exception("context deadline exceeded"))
        assert result.error_class == ErrorClass.TIMEOUT

    def test_network_phrase(self, classifier):
        """Network phrases are network errors."""
        result = classifier.classify(Exception("dial tcp: connection refused"))
        assert result.error_class == ErrorClass.NETWORK_ERROR

    def test_unknown_error_is_not_retryable(self, classifier):
        """Anything else is non-retryable and unclassified."""
        result = classifier.classify(ValueError("unexpected payload"))
        assert result.error_class == ErrorClass.NON_RETRYABLE
        assert result.reason == "unclassified"


class TestDelayCaps:
    """Tests for the max_delay ceiling."""

    @pytest.mark.parametrize(
        "error",
        [ServerError(), httpx.ReadTimeout("slow"), httpx.ConnectError("down"), RateLimitError()],
    )
    def test_backoff_never_exceeds_max_delay(self, error):
        """Computed delays stay within max_delay at high attempts."""
        classifier = ErrorClassifier(RetryPolicy(max_delay=10.0))
        for attempt in range(12):
            assert classifier.classify(error, attempt).delay <= 10.0
