"""Search API error classes.

Structured failures raised (or returned on a SearchOutcome) by the
collaborator that talks to the remote search API. The resilience layer
classifies these by type first and only falls back to message matching
for unstructured exceptions.
"""

from typing import Optional, Sequence


class SearchAPIError(Exception):
    """Base exception for search API errors.

    Attributes:
        message: Human-readable error description
        retryable: Whether the error is potentially transient
        original_error: The underlying exception if available
    """

    def __init__(
        self,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        super().__init__(message)


class RateLimitError(SearchAPIError):
    """Raised when the primary (hourly) rate limit is exceeded.

    ``reset_after`` is the number of seconds until the quota resets, when
    the API reported one.
    """

    def __init__(
        self,
        message: str = "API rate limit exceeded",
        reset_after: Optional[float] = None,
        limit: Optional[int] = None,
        remaining: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.reset_after = reset_after
        self.limit = limit
        self.remaining = remaining
        super().__init__(message, retryable=True, original_error=original_error)


class AbuseRateLimitError(SearchAPIError):
    """Raised when the secondary rate limit (abuse detection) triggers.

    ``retry_after`` mirrors the Retry-After header when the API sent one.
    """

    def __init__(
        self,
        message: str = "You have exceeded a secondary rate limit",
        retry_after: Optional[float] = None,
        original_error: Optional[Exception] = None,
    ):
        self.retry_after = retry_after
        super().__init__(message, retryable=True, original_error=original_error)


class ServerError(SearchAPIError):
    """Raised for 5xx responses from the search API."""

    def __init__(
        self,
        message: str = "Server error",
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        super().__init__(message, retryable=True, original_error=original_error)


class AuthenticationError(SearchAPIError):
    """Raised when API authentication fails.

    This error is NOT retryable - the token or credentials
    need to be fixed before retrying.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, retryable=False, original_error=original_error)


class AuthorizationError(SearchAPIError):
    """Raised when the credentials lack access to the requested resource."""

    def __init__(
        self,
        message: str = "Access forbidden",
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, retryable=False, original_error=original_error)


class NotFoundError(SearchAPIError):
    """Raised when the requested resource does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, retryable=False, original_error=original_error)


class ValidationError(SearchAPIError):
    """Raised when the API rejects a query as malformed.

    ``errors`` holds the individual validation messages; the first one is
    appended to the string form.
    """

    def __init__(
        self,
        message: str = "Validation Failed",
        errors: Optional[Sequence[str]] = None,
        original_error: Optional[Exception] = None,
    ):
        self.errors = list(errors or [])
        super().__init__(message, retryable=False, original_error=original_error)

    def __str__(self) -> str:
        if self.errors:
            return f"{self.message}: {self.errors[0]}"
        return self.message
