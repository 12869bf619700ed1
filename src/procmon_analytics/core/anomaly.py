"""
Z-score anomaly detection over category counts.

The baseline is the whole mapping: every category is compared with the mean
and population standard deviation of all counts in the same mapping.
"""

from typing import Dict, List, Optional

from loguru import logger

from ..models.results import Anomaly, Severity
from ..utils.config import AnalysisConfig
from .statistics import mean, stddev, z_score


class AnomalyDetector:
    """Flags categories whose counts are statistical outliers."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize anomaly detector.

        Args:
            config: Analysis configuration providing the z-score thresholds
        """
        self.config = config or AnalysisConfig()

    def classify(self, z: float) -> Optional[Severity]:
        """Map a z-score to a severity, None when it is not anomalous."""
        magnitude = abs(z)
        if magnitude > self.config.critical_z_score:
            return Severity.CRITICAL
        if magnitude > self.config.z_score_threshold:
            return Severity.HIGH
        return None

    def detect(self, data: Dict[str, float]) -> List[Anomaly]:
        """
        Detect anomalous categories.

        Args:
            data: Category label to count

        Returns:
            Anomalies in the iteration order of the mapping
        """
        if not data:
            return []

        values = list(data.values())
        avg = mean(values)
        std = stddev(values)

        # Identical counts carry no outlier signal
        if std == 0:
            return []

        anomalies = []
        for key, value in data.items():
            z = z_score(value, avg, std)
            severity = self.classify(z)
            if severity is None:
                continue
            anomalies.append(Anomaly(key=key, value=value, z_score=z, severity=severity))

        if anomalies:
            logger.info(f"Detected {len(anomalies)} anomalies across {len(data)} categories")
        return anomalies
