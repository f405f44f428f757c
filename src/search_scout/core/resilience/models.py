"""Resilience data models, enums, and protocols.

Defines the core types used across the resilience sub-package:
- ErrorClass enum for error classification
- OperationComplexity enum for inter-operation pacing
- RetryPolicy for retry/backoff tuning
- ErrorClassification for retry decisions
- SleepFunc and RetryObserver protocols for injectable behaviour
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol

if TYPE_CHECKING:
    from search_scout.core.cancellation import CancellationToken


class ErrorClass(str, Enum):
    """Classification of error types for retry decisions."""

    RATE_LIMIT = "rate_limit"
    ABUSE_DETECTION = "abuse_detection"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    NON_RETRYABLE = "non_retryable"


class OperationComplexity(str, Enum):
    """Expected server-side load of a single search."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RetryPolicy:
    """Retry and backoff configuration.

    Attributes:
        max_retries: Retries after the first attempt (0 = single attempt)
        base_delay: Initial backoff delay in seconds
        max_delay: Ceiling for any computed backoff in seconds
        backoff_factor: Multiplier applied per attempt
        rate_limit_reset_cap: Ceiling on an API-reported rate-limit reset
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 300.0
    backoff_factor: float = 2.0
    rate_limit_reset_cap: float = 30.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay <= 0:
            raise ValueError("base_delay must be > 0")
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be >= 1")
        if self.rate_limit_reset_cap <= 0:
            raise ValueError("rate_limit_reset_cap must be > 0")

    @classmethod
    def from_overrides(
        cls,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
        max_delay: Optional[float] = None,
        backoff_factor: Optional[float] = None,
        rate_limit_reset_cap: Optional[float] = None,
    ) -> "RetryPolicy":
        """Build a policy, keeping defaults for unset or non-positive values.

        ``max_retries=0`` is honoured; a negative value keeps the default.
        A ``max_delay`` below the resulting ``base_delay`` is raised to it.
        """
        defaults = cls()
        base = base_delay if base_delay and base_delay > 0 else defaults.base_delay
        ceiling = max_delay if max_delay and max_delay > 0 else defaults.max_delay
        return cls(
            max_retries=(
                max_retries if max_retries is not None and max_retries >= 0 else defaults.max_retries
            ),
            base_delay=base,
            max_delay=max(ceiling, base),
            backoff_factor=(
                backoff_factor if backoff_factor and backoff_factor >= 1 else defaults.backoff_factor
            ),
            rate_limit_reset_cap=(
                rate_limit_reset_cap
                if rate_limit_reset_cap and rate_limit_reset_cap > 0
                else defaults.rate_limit_reset_cap
            ),
        )


@dataclass(frozen=True)
class ErrorClassification:
    """Classification result for an error.

    Determines whether and after how long the retry executor tries again.
    ``reason`` is a finer-grained tag than ``error_class`` (for example
    "authentication" or "not_found" for non-retryable errors) used in
    metrics and logs.
    """

    error_class: ErrorClass
    retryable: bool
    delay: float = 0.0
    reason: str = "unclassified"


class SleepFunc(Protocol):
    """Protocol for injectable cancellable sleep."""

    async def __call__(
        self,
        seconds: float,
        token: Optional["CancellationToken"] = None,
        *,
        phase: str = ...,
        label: Optional[str] = ...,
    ) -> Any: ...


class RetryObserver(Protocol):
    """Receives retry bookkeeping from the retry executor.

    ``PerformanceTracker`` satisfies this protocol.
    """

    def record_retry(self) -> None: ...

    def record_delay(self, delay: float) -> None: ...
