"""Models package for procmon_analytics."""

from .events import (
    AggregateStatistics,
    EventRecord,
    ProcessingResult,
    ProgressEvent,
    ResultCategory,
    classify_result,
)
from .results import AnalyticsResult, Anomaly, Metrics, RankedItem, RiskAssessment, RiskLevel, Severity

__all__ = [
    "AggregateStatistics",
    "EventRecord",
    "ProcessingResult",
    "ProgressEvent",
    "ResultCategory",
    "classify_result",
    "AnalyticsResult",
    "Anomaly",
    "Metrics",
    "RankedItem",
    "RiskAssessment",
    "RiskLevel",
    "Severity",
]
