"""
Batch performance metrics and reports.

This package consolidates the metrics infrastructure:
- performance: SearchMetric, BatchMetrics, PerformanceTracker
- report: summary/detailed report rendering, insights, recommendations
"""

from search_scout.core.metrics.performance import (
    BatchMetrics,
    PerformanceTracker,
    SearchMetric,
)
from search_scout.core.metrics.report import (
    format_detailed,
    format_summary,
    performance_insights,
    recommendations,
)

__all__ = [
    # performance
    "BatchMetrics",
    "PerformanceTracker",
    "SearchMetric",
    # report
    "format_detailed",
    "format_summary",
    "performance_insights",
    "recommendations",
]
