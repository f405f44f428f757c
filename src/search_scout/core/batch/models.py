"""Batch search data models.

Tasks and outcomes exchanged with the search collaborator, plus the
aggregated results a batch run returns.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from search_scout.core.metrics.performance import BatchMetrics

DEFAULT_MAX_RESULTS = 50


class ReportLevel(str, Enum):
    """How much of the performance report a batch result carries."""

    NONE = "none"
    SUMMARY = "summary"
    DETAILED = "detailed"


@dataclass(frozen=True)
class SearchTask:
    """One search in a batch.

    Attributes:
        name: Unique, human-readable task name
        query: Raw query text handed to the search collaborator
        max_results: Requested page size
        filters: Qualifier filters, opaque to the batch layer
        tags: Free-form labels carried through to the results
    """

    name: str
    query: str
    max_results: int = DEFAULT_MAX_RESULTS
    filters: Mapping[str, Any] = field(default_factory=dict)
    tags: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("SearchTask.name must not be empty")
        if self.max_results <= 0:
            raise ValueError("SearchTask.max_results must be > 0")

    @property
    def has_filters(self) -> bool:
        return any(bool(value) for value in self.filters.values())


@dataclass
class SearchOutcome:
    """What the search collaborator returns for one task.

    An outcome carrying ``error`` is handled exactly as if the collaborator
    had raised it.
    """

    result_count: int = 0
    results: Any = None
    error: Optional[BaseException] = None


SearchFunc = Callable[[SearchTask], Awaitable[SearchOutcome]]
"""Async collaborator that executes one search."""


@dataclass(frozen=True)
class BatchSearchResult:
    name: str
    query: str
    tags: Tuple[str, ...]
    result_count: int
    results: Any = None


@dataclass
class BatchComparison:
    """Cross-search analysis attached to a batch result."""

    name: str
    search_names: List[str]
    common_patterns: List[str] = field(default_factory=list)
    key_differences: List[str] = field(default_factory=list)
    summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "search_names": list(self.search_names),
            "common_patterns": list(self.common_patterns),
            "key_differences": list(self.key_differences),
            "summary": self.summary,
        }


@dataclass
class BatchOptions:
    """Per-run options for ``BatchExecutor.run``."""

    name: str = ""
    description: str = ""
    compare: bool = False
    report: ReportLevel = ReportLevel.SUMMARY


@dataclass
class BatchResult:
    """Aggregated outcome of a fully successful batch."""

    name: str
    description: str
    search_count: int
    total_results: int
    results: List[BatchSearchResult]
    comparisons: List[BatchComparison]
    metrics: BatchMetrics
    performance_report: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "search_count": self.search_count,
            "total_results": self.total_results,
            "results": [
                {
                    "name": result.name,
                    "query": result.query,
                    "tags": list(result.tags),
                    "result_count": result.result_count,
                }
                for result in self.results
            ],
            "comparisons": [comparison.to_dict() for comparison in self.comparisons],
            "metrics": self.metrics.to_dict(),
        }
