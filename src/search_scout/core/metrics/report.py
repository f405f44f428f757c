"""Human-readable performance reports.

Pure functions of ``BatchMetrics`` (and, for the detailed report, the
per-search metrics); nothing here touches the clock or the tracker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from search_scout.core.metrics.performance import BatchMetrics, SearchMetric

SLOW_RESPONSE_SECONDS = 2.0
SPARSE_RESPONSE_SECONDS = 1.0
SPARSE_RESULTS_PER_SEARCH = 10
LOW_SUCCESS_RATE = 90.0


def _seconds(value: float) -> str:
    return f"{value:.2f}s"


def _percent(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def performance_insights(metrics: "BatchMetrics") -> List[str]:
    """Observations about response time, limits, retries and success rate."""
    insights: List[str] = []

    if metrics.average_response_time > SLOW_RESPONSE_SECONDS:
        insights.append("Slower than expected response times - consider smaller batch sizes")
    else:
        insights.append("Good response times")

    if metrics.rate_limit_hits > 0:
        insights.append(
            f"Hit rate limits {metrics.rate_limit_hits} times - consider adding delays"
        )
    if metrics.abuse_detections > 0:
        insights.append(
            f"Triggered abuse detection {metrics.abuse_detections} times"
            " - reduce request frequency"
        )
    if metrics.retry_count > metrics.total_searches:
        insights.append("High retry rate - check network connection and API status")

    if metrics.total_searches > 0:
        if metrics.success_rate < LOW_SUCCESS_RATE:
            insights.append("Low success rate - investigate common failure patterns")
        else:
            insights.append("High success rate")

    return insights


def recommendations(metrics: "BatchMetrics") -> List[str]:
    """Tuning suggestions derived from the same metrics."""
    suggestions: List[str] = []

    if metrics.delay_time > metrics.total_duration / 2:
        suggestions.append(
            "Consider optimizing delays - they account for most of the execution time"
        )

    if metrics.rate_limit_hits > 0 or metrics.abuse_detections > 0:
        suggestions.append("Implement longer delays between searches")
        suggestions.append("Use more specific filters to reduce API load")

    per_search = metrics.total_results // max(metrics.successful_searches, 1)
    if (
        metrics.average_response_time > SPARSE_RESPONSE_SECONDS
        and per_search < SPARSE_RESULTS_PER_SEARCH
    ):
        suggestions.append(
            "Consider increasing max_results per search to get more data per API call"
        )

    return suggestions


def format_summary(metrics: "BatchMetrics") -> str:
    """Render the batch summary report."""
    total = metrics.total_searches
    lines = [
        "Batch Operation Performance Report",
        "",
        "Timing:",
        f"  - Total duration: {_seconds(metrics.total_duration)}",
        f"  - Average response time: {_seconds(metrics.average_response_time)}",
        f"  - Total delay time: {_seconds(metrics.delay_time)}",
        f"  - Actual work time: {_seconds(max(0.0, metrics.total_duration - metrics.delay_time))}",
        "",
        "Results:",
        f"  - Total searches: {total}",
        f"  - Successful: {metrics.successful_searches}"
        f" ({_percent(metrics.successful_searches, total):.1f}%)",
        f"  - Failed: {metrics.failed_searches} ({_percent(metrics.failed_searches, total):.1f}%)",
        f"  - Total results found: {metrics.total_results}",
        f"  - Average results per search:"
        f" {metrics.total_results / max(metrics.successful_searches, 1):.1f}",
        "",
        "Reliability:",
        f"  - Total retries: {metrics.retry_count}",
        f"  - Rate limit hits: {metrics.rate_limit_hits}",
        f"  - Abuse detections: {metrics.abuse_detections}",
        f"  - Server errors: {metrics.server_errors}",
        "",
        "Performance Insights:",
    ]
    lines.extend(f"  - {insight}" for insight in performance_insights(metrics))

    suggestions = recommendations(metrics)
    if suggestions:
        lines.append("")
        lines.append("Recommendations:")
        lines.extend(f"  - {suggestion}" for suggestion in suggestions)

    return "\n".join(lines)


def format_detailed(metrics: "BatchMetrics", searches: Sequence["SearchMetric"]) -> str:
    """Render the summary followed by one entry per finished search."""
    report = format_summary(metrics)
    if not searches:
        return report

    lines = ["", "", "Individual Search Performance:"]
    for index, search in enumerate(searches, start=1):
        status = "ok" if search.success else "FAILED"
        lines.append(f"  {index}. [{status}] {search.task_name}")
        detail = f"     Duration: {_seconds(search.duration)} | Results: {search.result_count}"
        if search.retry_count > 0:
            detail += f" | Retries: {search.retry_count}"
        if search.delay_time > 0:
            detail += f" | Delays: {_seconds(search.delay_time)}"
        if not search.success and search.error_class is not None:
            detail += f" | Error: {search.error_reason or search.error_class.value}"
        lines.append(detail)

    return report + "\n".join(lines)
