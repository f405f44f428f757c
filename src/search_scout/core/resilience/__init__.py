"""Retry, error classification and pacing for search API calls.

Centralized resilience utilities including:
- ErrorClassifier for unified retry decisions
- RetryExecutor for bounded, cancellable exponential backoff
- estimate_complexity and DelayScheduler for inter-search pacing
- Retry-After / rate-limit header parsing
"""

from search_scout.core.errors.resilience import (
    NonRetryableError,
    OperationCancelledError,
    RetryError,
    RetryExhaustedError,
)
from search_scout.core.resilience.classifier import ErrorClassifier
from search_scout.core.resilience.headers import (
    parse_rate_limit_quota,
    parse_rate_limit_reset,
    parse_retry_after,
)
from search_scout.core.resilience.models import (
    ErrorClass,
    ErrorClassification,
    OperationComplexity,
    RetryObserver,
    RetryPolicy,
    SleepFunc,
)
from search_scout.core.resilience.retry import RetryExecutor
from search_scout.core.resilience.scheduling import (
    DEFAULT_DELAYS,
    DelayScheduler,
    estimate_complexity,
)

__all__ = [
    # Models & enums
    "ErrorClass",
    "ErrorClassification",
    "OperationComplexity",
    "RetryPolicy",
    "RetryObserver",
    "SleepFunc",
    # Classification
    "ErrorClassifier",
    "parse_retry_after",
    "parse_rate_limit_reset",
    "parse_rate_limit_quota",
    # Retry
    "RetryExecutor",
    # Scheduling
    "DEFAULT_DELAYS",
    "DelayScheduler",
    "estimate_complexity",
    # Error re-exports
    "OperationCancelledError",
    "RetryError",
    "NonRetryableError",
    "RetryExhaustedError",
]
