"""Sequential, fail-fast batch search execution.

Runs each task through the retry executor, paces successive tasks by their
estimated complexity, and records everything in a performance tracker.
The first task that fails unrecoverably aborts the batch.
"""

import logging
from typing import List, Optional, Sequence

from search_scout.core.batch.comparison import build_comparisons
from search_scout.core.batch.models import (
    BatchOptions,
    BatchResult,
    BatchSearchResult,
    ReportLevel,
    SearchFunc,
    SearchTask,
)
from search_scout.core.cancellation import CancellationToken
from search_scout.core.errors.batch import BatchSearchError
from search_scout.core.errors.resilience import OperationCancelledError
from search_scout.core.metrics.performance import PerformanceTracker
from search_scout.core.observability import audit_log, redact_secrets
from search_scout.core.resilience.retry import RetryExecutor
from search_scout.core.resilience.scheduling import DelayScheduler, estimate_complexity

logger = logging.getLogger(__name__)


class BatchExecutor:
    """Execute an ordered list of searches against one rate-limited API.

    Args:
        search: Async collaborator that runs one ``SearchTask``.
        retry_executor: Retry engine (default ``RetryExecutor()``).
        scheduler: Inter-task pacing (default ``DelayScheduler()``).
        tracker: Performance tracker; a fresh one is used when omitted.

    Example:
        >>> executor = BatchExecutor(client.search)
        >>> result = await executor.run(tasks, BatchOptions(compare=True))
        >>> print(result.performance_report)
    """

    def __init__(
        self,
        search: SearchFunc,
        *,
        retry_executor: Optional[RetryExecutor] = None,
        scheduler: Optional[DelayScheduler] = None,
        tracker: Optional[PerformanceTracker] = None,
    ) -> None:
        self._search = search
        self.retry_executor = retry_executor or RetryExecutor()
        self.scheduler = scheduler or DelayScheduler()
        self.tracker = tracker or PerformanceTracker(self.retry_executor.classifier)

    async def run(
        self,
        tasks: Sequence[SearchTask],
        options: Optional[BatchOptions] = None,
        token: Optional[CancellationToken] = None,
    ) -> BatchResult:
        """Run ``tasks`` in order and aggregate their results.

        Args:
            tasks: Validated tasks, executed strictly in order.
            options: Naming, comparison and report options.
            token: Cancellation token for every attempt and wait.

        Returns:
            The aggregated result, with finalized metrics.

        Raises:
            BatchSearchError: When a task fails after retries or with a
                permanent error. Later tasks are not attempted.
            OperationCancelledError: When ``token`` fires; ``task_name``
                names the task that was running or had just finished.
        """
        options = options or BatchOptions()
        tracker = self.tracker
        tracker.start_batch(len(tasks))
        logger.info("Executing %d searches", len(tasks))

        results: List[BatchSearchResult] = []
        total_results = 0

        for index, task in enumerate(tasks):
            logger.info("Executing search %d/%d: %s", index + 1, len(tasks), task.name)
            tracker.start_search(task.name, task.query)

            try:
                result = await self.retry_executor.with_retry(
                    f"batch search '{task.name}'",
                    lambda task=task: self._execute_one(task),
                    token=token,
                    observer=tracker,
                )
            except OperationCancelledError as exc:
                tracker.end_search(0, exc)
                self._abort(task, exc)
                exc.task_name = task.name
                raise
            except Exception as exc:
                tracker.end_search(0, exc)
                self._abort(task, exc)
                raise BatchSearchError(
                    task.name,
                    exc,
                    metrics=tracker.metrics,
                    report=tracker.generate_report(),
                ) from exc

            tracker.end_search(result.result_count)
            results.append(result)
            total_results += result.result_count
            logger.info("  Found %d results", result.result_count)

            if index < len(tasks) - 1:
                complexity = estimate_complexity(task.query, task.max_results, task.has_filters)
                delay = self.scheduler.delay_for(complexity)
                logger.debug("Adding %.2fs delay for %s complexity", delay, complexity.value)
                tracker.record_delay(delay)
                audit_log(
                    "batch_delay",
                    task=task.name,
                    complexity=complexity.value,
                    delay_seconds=delay,
                )
                try:
                    await self.scheduler.intelligent_delay(complexity, token)
                except OperationCancelledError as exc:
                    self._abort(task, exc)
                    exc.task_name = task.name
                    raise

        comparisons = []
        if options.compare and len(results) > 1:
            logger.info("Generating comparison analysis")
            comparisons = build_comparisons(tasks[: len(results)], results)

        metrics = tracker.end_batch()
        audit_log(
            "batch_completed",
            name=options.name,
            searches=len(results),
            total_results=total_results,
            duration_seconds=metrics.total_duration,
        )

        report: Optional[str] = None
        if options.report is ReportLevel.SUMMARY:
            report = tracker.generate_report()
        elif options.report is ReportLevel.DETAILED:
            report = tracker.generate_detailed_report()

        return BatchResult(
            name=options.name,
            description=options.description,
            search_count=len(tasks),
            total_results=total_results,
            results=results,
            comparisons=comparisons,
            metrics=metrics,
            performance_report=report,
        )

    async def _execute_one(self, task: SearchTask) -> BatchSearchResult:
        outcome = await self._search(task)
        if outcome.error is not None:
            raise outcome.error
        return BatchSearchResult(
            name=task.name,
            query=task.query,
            tags=tuple(task.tags),
            result_count=outcome.result_count,
            results=outcome.results,
        )

    def _abort(self, task: SearchTask, error: BaseException) -> None:
        self.tracker.end_batch()
        logger.warning(
            "Batch aborted at search '%s': %s", task.name, redact_secrets(str(error), max_length=200)
        )
        audit_log(
            "batch_aborted",
            task=task.name,
            error_type=type(error).__name__,
            cancelled=isinstance(error, OperationCancelledError),
        )
