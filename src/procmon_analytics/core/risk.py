"""
Weighted risk scoring.

Sub-scores are normalised to 0-100 against fixed ceilings and combined with
configured weights. The result is a heuristic, not a calibrated model.
"""

from typing import Optional

from ..models.results import Metrics, RiskAssessment, RiskLevel
from ..utils.config import AnalysisConfig


def _bounded(value: float) -> float:
    return min(100.0, max(0.0, value))


class RiskScoringEngine:
    """Converts metrics into a risk assessment."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def level_for(self, total: float) -> RiskLevel:
        """Step function from total score to risk level."""
        if total >= self.config.critical_risk_threshold:
            return RiskLevel.CRITICAL
        if total >= self.config.high_risk_threshold:
            return RiskLevel.HIGH
        if total >= self.config.medium_risk_threshold:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def assess(self, metrics: Metrics) -> RiskAssessment:
        """
        Score the given metrics.

        Args:
            metrics: Derived metrics of an analysed log

        Returns:
            RiskAssessment with sub-scores, weighted total and level
        """
        cfg = self.config
        weights = cfg.risk_weights

        error_score = _bounded(metrics.error_rate * 100)
        frequency_score = _bounded(metrics.events_per_second / cfg.events_per_second_ceiling * 100)
        impact_score = _bounded(metrics.unique_errors / cfg.unique_errors_ceiling * 100)
        security_score = _bounded(metrics.access_denied_count / cfg.access_denied_ceiling * 100)

        total = round(
            error_score * weights.error
            + frequency_score * weights.frequency
            + impact_score * weights.impact
            + security_score * weights.security,
            2,
        )
        total = _bounded(total)

        return RiskAssessment(
            error_score=error_score,
            frequency_score=frequency_score,
            impact_score=impact_score,
            security_score=security_score,
            total=total,
            level=self.level_for(total),
        )
