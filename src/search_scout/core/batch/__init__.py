"""Batch search execution, result models and comparisons."""

from search_scout.core.batch.comparison import build_comparisons
from search_scout.core.batch.executor import BatchExecutor
from search_scout.core.batch.models import (
    DEFAULT_MAX_RESULTS,
    BatchComparison,
    BatchOptions,
    BatchResult,
    BatchSearchResult,
    ReportLevel,
    SearchFunc,
    SearchOutcome,
    SearchTask,
)

__all__ = [
    "BatchExecutor",
    "build_comparisons",
    "DEFAULT_MAX_RESULTS",
    "BatchComparison",
    "BatchOptions",
    "BatchResult",
    "BatchSearchResult",
    "ReportLevel",
    "SearchFunc",
    "SearchOutcome",
    "SearchTask",
]
