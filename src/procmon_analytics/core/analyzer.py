"""
Analytics orchestration for aggregated process activity.

This module drives metric derivation, anomaly detection, risk scoring,
health scoring and rule-based insight generation for one set of aggregate
statistics, memoizing complete results in a bounded cache.
"""

from typing import Dict, List, Optional

from loguru import logger

from ..models.events import AggregateStatistics, ResultCategory
from ..models.results import AnalyticsResult, Anomaly, Metrics, RankedItem, RiskAssessment, RiskLevel
from ..utils.config import AnalysisConfig, CacheConfig
from .anomaly import AnomalyDetector
from .cache import ResultCache, compute_fingerprint
from .risk import RiskScoringEngine

NO_DATA_INSIGHT = "No data available for analysis"
NO_DATA_RECOMMENDATION = "Ensure data is properly loaded before analysis"
CONTINUE_MONITORING = "Continue monitoring - no immediate action required"


def _rank(counts: Dict[str, int], limit: int) -> List[RankedItem]:
    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [RankedItem(name=name, count=count) for name, count in ranked[:limit]]


class AnalyticsEngine:
    """Produces AnalyticsResult objects from aggregate statistics."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        cache: Optional[ResultCache] = None,
        cache_config: Optional[CacheConfig] = None,
    ):
        """
        Initialize analytics engine.

        Args:
            config: Analysis thresholds and weights
            cache: Result cache to use; built from ``cache_config`` when omitted
            cache_config: Capacity and enablement for a default cache
        """
        self.config = config or AnalysisConfig()
        if cache is None:
            cache_config = cache_config or CacheConfig()
            cache = ResultCache(max_entries=cache_config.max_entries, enabled=cache_config.enabled)
        self.cache = cache
        self.anomaly_detector = AnomalyDetector(self.config)
        self.risk_engine = RiskScoringEngine(self.config)

    def analyze(
        self,
        statistics: Optional[AggregateStatistics],
        source_hash: Optional[str] = None,
        source_timestamp: Optional[str] = None,
    ) -> AnalyticsResult:
        """
        Run the full analytics pipeline.

        Args:
            statistics: Aggregates produced by ingestion
            source_hash: Optional content hash of the input, strengthens the cache key
            source_timestamp: Optional modification time of the input

        Returns:
            AnalyticsResult, served from cache when the fingerprint matches
        """
        if statistics is None or statistics.is_empty():
            logger.warning("No statistics provided for analysis")
            return self.default_result()

        fingerprint = compute_fingerprint(statistics, source_hash, source_timestamp)
        cached = self.cache.get(fingerprint)
        if cached is not None:
            logger.debug(f"Serving analytics for {fingerprint[:12]} from cache")
            return cached

        logger.info(f"Analyzing {sum(statistics.results.values()):,} events")

        metrics = self.compute_metrics(statistics)
        anomalies = self.anomaly_detector.detect(statistics.process_types)
        risk = self.risk_engine.assess(metrics)
        health_score = self.compute_health_score(metrics, anomalies, risk)

        result = AnalyticsResult(
            statistics=statistics.copy(deep=True),
            metrics=metrics,
            anomalies=anomalies,
            risk_assessment=risk,
            health_score=health_score,
            insights=self.generate_insights(metrics, anomalies),
            recommendations=self.generate_recommendations(metrics, anomalies, risk),
            fingerprint=fingerprint,
        )

        if not self.cache.put(fingerprint, result):
            logger.debug("Analytics result not cached")

        logger.success(
            f"Analysis complete: health {health_score}, risk {risk.total} ({risk.level}), "
            f"{len(anomalies)} anomalies"
        )
        return result

    def default_result(self) -> AnalyticsResult:
        """Result returned for missing or empty input."""
        return AnalyticsResult(
            insights=[NO_DATA_INSIGHT],
            recommendations=[NO_DATA_RECOMMENDATION],
            is_default=True,
        )

    def compute_metrics(self, statistics: AggregateStatistics) -> Metrics:
        """Derive metrics from aggregate statistics."""
        total_events = 0
        error_events = 0
        access_denied = 0
        errors: Dict[str, int] = {}

        for label, count in statistics.results.items():
            total_events += count
            category = statistics.result_category(label)
            if category == ResultCategory.SUCCESS:
                continue
            error_events += count
            errors[label] = count
            if category == ResultCategory.ACCESS_DENIED:
                access_denied += count

        error_rate = error_events / total_events if total_events else 0.0
        span = statistics.time_span_seconds
        events_per_second = round(total_events / span, 2) if span > 0 else 0.0
        top_n = self.config.top_n

        return Metrics(
            total_events=total_events,
            error_rate=error_rate,
            success_rate=1.0 - error_rate,
            unique_processes=len(statistics.process_types),
            unique_operations=len(statistics.operations),
            unique_errors=len(errors),
            events_per_second=events_per_second,
            access_denied_count=access_denied,
            top_processes=_rank(statistics.process_types, top_n),
            top_operations=_rank(statistics.operations, top_n),
            top_errors=_rank(errors, top_n),
        )

    def compute_health_score(
        self,
        metrics: Metrics,
        anomalies: List[Anomaly],
        risk: RiskAssessment,
    ) -> float:
        """Composite 0-100 health score, higher is healthier."""
        cfg = self.config
        score = 100.0
        score -= metrics.error_rate * 100 * cfg.health_error_weight
        score -= min(cfg.health_anomaly_cap, len(anomalies) * cfg.health_anomaly_penalty)
        score -= risk.total * cfg.health_risk_weight
        return round(min(100.0, max(0.0, score)), 2)

    def generate_insights(self, metrics: Metrics, anomalies: List[Anomaly]) -> List[str]:
        """Rule-based observations about the analysed data."""
        cfg = self.config
        insights = []
        error_pct = metrics.error_rate * 100

        if metrics.error_rate > cfg.high_error_rate:
            insights.append(f"High error rate detected: {error_pct:.2f}% of operations failed")
        elif metrics.error_rate > cfg.moderate_error_rate:
            insights.append(f"Moderate error rate: {error_pct:.2f}% of operations failed")
        else:
            insights.append(f"Low error rate: {error_pct:.2f}% of operations failed - system operating normally")

        if len(anomalies) > cfg.many_anomalies:
            insights.append(f"Multiple anomalies detected ({len(anomalies)}) - unusual process activity patterns")
        elif anomalies:
            insights.append(f"{len(anomalies)} anomalous process(es) detected")

        if metrics.access_denied_count > cfg.access_denied_alert:
            insights.append(
                f"High number of access denied events ({metrics.access_denied_count:,}) - potential permission issues"
            )

        if metrics.events_per_second > cfg.high_event_rate:
            insights.append(
                f"High event frequency ({metrics.events_per_second:,.2f} events/sec) - system under heavy load"
            )

        return insights

    def generate_recommendations(
        self,
        metrics: Metrics,
        anomalies: List[Anomaly],
        risk: RiskAssessment,
    ) -> List[str]:
        """Rule-based follow-up actions."""
        cfg = self.config
        recommendations = []

        if metrics.error_rate > cfg.high_error_rate:
            recommendations.append("Investigate the most frequent error results and the processes causing them")
        elif metrics.error_rate > cfg.moderate_error_rate:
            recommendations.append("Monitor error trends and address recurring failures")

        if len(anomalies) > cfg.many_anomalies:
            recommendations.append("Review anomalous processes for potential security threats or misconfiguration")
        elif anomalies:
            recommendations.append("Review the flagged processes to confirm their activity is expected")

        if metrics.access_denied_count > cfg.access_denied_alert:
            recommendations.append("Audit file and registry permissions for processes receiving access denied results")

        if metrics.events_per_second > cfg.high_event_rate:
            recommendations.append("Consider filtering high-volume processes to reduce event load")

        if risk.level in (RiskLevel.CRITICAL, RiskLevel.HIGH):
            recommendations.append(f"Risk level is {RiskLevel(risk.level).value} - prioritize remediation of identified issues")

        if not recommendations:
            recommendations.append(CONTINUE_MONITORING)

        return recommendations
