"""Core retry, pacing, metrics and batch execution for search-scout."""

from search_scout.core.batch import (
    BatchExecutor,
    BatchOptions,
    BatchResult,
    ReportLevel,
    SearchOutcome,
    SearchTask,
)
from search_scout.core.cancellation import CancellationToken, cancellable_sleep
from search_scout.core.metrics import PerformanceTracker
from search_scout.core.resilience import (
    DelayScheduler,
    ErrorClassifier,
    RetryExecutor,
    RetryPolicy,
    estimate_complexity,
)

__all__ = [
    "BatchExecutor",
    "BatchOptions",
    "BatchResult",
    "ReportLevel",
    "SearchOutcome",
    "SearchTask",
    "CancellationToken",
    "cancellable_sleep",
    "PerformanceTracker",
    "DelayScheduler",
    "ErrorClassifier",
    "RetryExecutor",
    "RetryPolicy",
    "estimate_complexity",
]
