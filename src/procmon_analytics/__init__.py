"""
Procmon Analytics - streaming analytics for process activity logs.

Aggregates large Process Monitor CSV exports in bounded memory and derives
metrics, z-score anomalies, a weighted risk assessment and a health score.
"""

__version__ = "1.0.0"
__author__ = "Security Team"

from .core.analyzer import AnalyticsEngine
from .core.cache import ResultCache
from .core.ingestion import StreamingLogProcessor, merge_statistics
from .models.events import AggregateStatistics, ProcessingResult, ProgressEvent
from .models.results import AnalyticsResult, Anomaly, RiskAssessment, RiskLevel

__all__ = [
    "AnalyticsEngine",
    "ResultCache",
    "StreamingLogProcessor",
    "merge_statistics",
    "AggregateStatistics",
    "ProcessingResult",
    "ProgressEvent",
    "AnalyticsResult",
    "Anomaly",
    "RiskAssessment",
    "RiskLevel",
]
