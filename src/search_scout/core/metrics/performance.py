"""Per-search and per-batch performance tracking.

``PerformanceTracker`` follows one batch at a time: a single search is open
between ``start_search`` and ``end_search``, retries and backoff delays
recorded while it is open are attributed to it, and pauses recorded between
searches count toward the batch only. ``end_batch`` computes the summary
figures and freezes the metrics.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from search_scout.core.metrics.report import format_detailed, format_summary
from search_scout.core.resilience.classifier import ErrorClassifier
from search_scout.core.resilience.models import ErrorClass, ErrorClassification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchMetric:
    """Immutable record of one finished search."""

    task_name: str
    query: str
    start_time: datetime
    duration: float
    result_count: int
    retry_count: int = 0
    delay_time: float = 0.0
    error_class: Optional[ErrorClass] = None
    error_reason: Optional[str] = None
    success: bool = True

    @property
    def response_time(self) -> float:
        """Duration minus backoff delays taken during the search."""
        return max(0.0, self.duration - self.delay_time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_name": self.task_name,
            "query": self.query,
            "start_time": self.start_time.isoformat(),
            "duration": self.duration,
            "result_count": self.result_count,
            "retry_count": self.retry_count,
            "delay_time": self.delay_time,
            "error_class": self.error_class.value if self.error_class else None,
            "error_reason": self.error_reason,
            "success": self.success,
        }


@dataclass
class BatchMetrics:
    """Aggregate figures for one batch.

    Durations are in seconds. ``finalized`` is set by
    ``PerformanceTracker.end_batch``; the tracker ignores further updates
    once it is set.
    """

    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    end_time: Optional[datetime] = None
    total_duration: float = 0.0
    total_searches: int = 0
    successful_searches: int = 0
    failed_searches: int = 0
    total_results: int = 0
    retry_count: int = 0
    delay_time: float = 0.0
    average_response_time: float = 0.0
    rate_limit_hits: int = 0
    abuse_detections: int = 0
    server_errors: int = 0
    error_counts: Dict[ErrorClass, int] = field(default_factory=dict)
    finalized: bool = False

    @property
    def completed_searches(self) -> int:
        return self.successful_searches + self.failed_searches

    @property
    def success_rate(self) -> float:
        """Successful searches as a percentage of planned searches."""
        if self.total_searches <= 0:
            return 0.0
        return self.successful_searches / self.total_searches * 100

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "total_duration": self.total_duration,
            "total_searches": self.total_searches,
            "successful_searches": self.successful_searches,
            "failed_searches": self.failed_searches,
            "total_results": self.total_results,
            "retry_count": self.retry_count,
            "total_delay_time": self.delay_time,
            "average_response_time": self.average_response_time,
            "rate_limit_hits": self.rate_limit_hits,
            "abuse_detections": self.abuse_detections,
            "server_errors": self.server_errors,
            "error_counts": {cls.value: count for cls, count in self.error_counts.items()},
        }


@dataclass
class _OpenSearch:
    task_name: str
    query: str
    start_time: datetime
    started_at: float
    retry_count: int = 0
    delay_time: float = 0.0


class PerformanceTracker:
    """Collect timing, retry and error metrics for a batch of searches.

    Also usable as the ``observer`` argument of
    ``RetryExecutor.with_retry``, which reports retries and completed
    backoff delays through ``record_retry`` and ``record_delay``.

    Args:
        classifier: Used to classify failures that carry no classification.
        clock: Monotonic clock in seconds; injectable for tests.
    """

    def __init__(
        self,
        classifier: Optional[ErrorClassifier] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._classifier = classifier or ErrorClassifier()
        self._clock = clock
        self._metrics = BatchMetrics()
        self._search_metrics: List[SearchMetric] = []
        self._current: Optional[_OpenSearch] = None
        self._batch_started_at = clock()

    @property
    def metrics(self) -> BatchMetrics:
        return self._metrics

    @property
    def search_metrics(self) -> List[SearchMetric]:
        return list(self._search_metrics)

    def start_batch(self, total_searches: int) -> None:
        """Reset all state and start timing a batch of ``total_searches``."""
        self._metrics = BatchMetrics(total_searches=total_searches)
        self._search_metrics = []
        self._current = None
        self._batch_started_at = self._clock()

    def start_search(self, task_name: str, query: str) -> None:
        if self._refuse("start_search"):
            return
        if self._current is not None:
            logger.debug("Search '%s' replaced before end_search", self._current.task_name)
        self._current = _OpenSearch(
            task_name=task_name,
            query=query,
            start_time=datetime.now(timezone.utc),
            started_at=self._clock(),
        )

    def record_retry(self) -> None:
        if self._refuse("record_retry"):
            return
        if self._current is not None:
            self._current.retry_count += 1
        self._metrics.retry_count += 1

    def record_delay(self, seconds: float) -> None:
        if self._refuse("record_delay"):
            return
        if self._current is not None:
            self._current.delay_time += seconds
        self._metrics.delay_time += seconds

    def end_search(self, result_count: int, error: Optional[BaseException] = None) -> None:
        """Close the open search. A no-op when no search is open."""
        if self._refuse("end_search") or self._current is None:
            return

        current = self._current
        self._current = None
        metrics = self._metrics

        # duration never drops below the attributed backoff delay
        duration = max(self._clock() - current.started_at, current.delay_time)

        error_class: Optional[ErrorClass] = None
        error_reason: Optional[str] = None
        if error is not None:
            classification = self._classification_for(error)
            error_class = classification.error_class
            error_reason = classification.reason
            metrics.failed_searches += 1
            metrics.error_counts[error_class] = metrics.error_counts.get(error_class, 0) + 1
            if error_class is ErrorClass.RATE_LIMIT:
                metrics.rate_limit_hits += 1
            elif error_class is ErrorClass.ABUSE_DETECTION:
                metrics.abuse_detections += 1
            elif error_class is ErrorClass.SERVER_ERROR:
                metrics.server_errors += 1
            result_count = 0
        else:
            metrics.successful_searches += 1
            metrics.total_results += result_count

        self._search_metrics.append(
            SearchMetric(
                task_name=current.task_name,
                query=current.query,
                start_time=current.start_time,
                duration=duration,
                result_count=result_count,
                retry_count=current.retry_count,
                delay_time=current.delay_time,
                error_class=error_class,
                error_reason=error_reason,
                success=error is None,
            )
        )

    def end_batch(self) -> BatchMetrics:
        """Compute totals and averages, then freeze the metrics.

        Calling it again returns the already-frozen metrics unchanged.
        """
        metrics = self._metrics
        if metrics.finalized:
            return metrics

        if self._current is not None:
            logger.debug("Batch ended with search '%s' still open", self._current.task_name)
            self._current = None

        metrics.end_time = datetime.now(timezone.utc)
        metrics.total_duration = max(0.0, self._clock() - self._batch_started_at)

        successful = [m for m in self._search_metrics if m.success]
        if successful:
            total_response = sum(m.response_time for m in successful)
            metrics.average_response_time = total_response / len(successful)

        metrics.finalized = True
        return metrics

    def generate_report(self) -> str:
        return format_summary(self._metrics)

    def generate_detailed_report(self) -> str:
        return format_detailed(self._metrics, self._search_metrics)

    def _classification_for(self, error: BaseException) -> ErrorClassification:
        attached = getattr(error, "classification", None)
        if isinstance(attached, ErrorClassification):
            return attached
        return self._classifier.classify(error)

    def _refuse(self, operation: str) -> bool:
        if self._metrics.finalized:
            logger.debug("Ignoring %s on finalized batch metrics", operation)
            return True
        return False
