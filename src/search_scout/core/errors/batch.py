"""Batch execution error classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from search_scout.core.metrics.performance import BatchMetrics


class BatchSearchError(Exception):
    """A task failed unrecoverably and the batch was aborted.

    Attributes:
        task_name: Name of the task that failed.
        cause: The retry error (or other exception) that ended the task.
        metrics: Finalized batch metrics at the time of the abort.
        report: Summary performance report, for callers that show one.
    """

    def __init__(
        self,
        task_name: str,
        cause: BaseException,
        metrics: Optional["BatchMetrics"] = None,
        report: Optional[str] = None,
    ):
        super().__init__(f"failed to execute search '{task_name}': {cause}")
        self.task_name = task_name
        self.cause = cause
        self.metrics = metrics
        self.report = report
