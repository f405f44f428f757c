"""Unified error hierarchy for search-scout.

All custom exception classes are defined in domain-specific modules within
this package. This __init__.py re-exports everything for convenient access.

Usage:
    # Import from domain modules for specificity
    from search_scout.core.errors.search import RateLimitError

    # Or import from the package
    from search_scout.core.errors import RetryExhaustedError
"""

# --- Batch errors ---
from search_scout.core.errors.batch import BatchSearchError

# --- Config errors ---
from search_scout.core.errors.config import ConfigError

# --- Resilience errors ---
from search_scout.core.errors.resilience import (
    NonRetryableError,
    OperationCancelledError,
    RetryError,
    RetryExhaustedError,
)

# --- Search API errors ---
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

__all__ = [
    # Search API errors
    "SearchAPIError",
    "RateLimitError",
    "AbuseRateLimitError",
    "ServerError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ValidationError",
    # Resilience errors
    "OperationCancelledError",
    "RetryError",
    "NonRetryableError",
    "RetryExhaustedError",
    # Batch errors
    "BatchSearchError",
    # Config errors
    "ConfigError",
]
