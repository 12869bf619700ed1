"""Core package for procmon_analytics."""

from .analyzer import AnalyticsEngine
from .anomaly import AnomalyDetector
from .cache import ResultCache, compute_fingerprint
from .ingestion import StreamingLogProcessor, merge_statistics
from .risk import RiskScoringEngine

__all__ = [
    "AnalyticsEngine",
    "AnomalyDetector",
    "ResultCache",
    "compute_fingerprint",
    "StreamingLogProcessor",
    "merge_statistics",
    "RiskScoringEngine",
]
