"""Session analytics for the screening pipeline."""

from bountyscout.analytics.aggregator import (
    PipelineAnalytics,
    QualityGateResult,
    SessionMetrics,
)
from bountyscout.analytics.report import print_summary, save_metrics

__all__ = [
    "PipelineAnalytics",
    "QualityGateResult",
    "SessionMetrics",
    "print_summary",
    "save_metrics",
]
