"""
Result models for process activity analytics.

This module contains Pydantic models for the derived metrics, anomalies,
risk assessment and the complete analytics result handed to renderers.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, validator

from .events import AggregateStatistics


class Severity(str, Enum):
    """Severity levels for anomalies."""

    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class RiskLevel(str, Enum):
    """Qualitative risk buckets."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class RankedItem(BaseModel):
    """A category label with its event count."""

    name: str = Field(..., description="Category label")
    count: int = Field(..., ge=0, description="Number of events")

    class Config:
        """Pydantic configuration."""
        frozen = True


class Metrics(BaseModel):
    """Derived view over aggregate statistics."""

    total_events: int = Field(0, ge=0, description="Total number of events")
    error_rate: float = Field(0.0, ge=0.0, le=1.0, description="Fraction of non-success results")
    success_rate: float = Field(1.0, ge=0.0, le=1.0, description="Fraction of success results")
    unique_processes: int = Field(0, ge=0, description="Distinct process names")
    unique_operations: int = Field(0, ge=0, description="Distinct operations")
    unique_errors: int = Field(0, ge=0, description="Distinct non-success result labels")
    events_per_second: float = Field(0.0, ge=0.0, description="Event rate over the observed time span")
    access_denied_count: int = Field(0, ge=0, description="Events with an access denied result")
    top_processes: List[RankedItem] = Field(default_factory=list, description="Most active processes")
    top_operations: List[RankedItem] = Field(default_factory=list, description="Most frequent operations")
    top_errors: List[RankedItem] = Field(default_factory=list, description="Most frequent error results")

    class Config:
        """Pydantic configuration."""
        frozen = True


class Anomaly(BaseModel):
    """A category whose count lies far from the mean of its mapping."""

    key: str = Field(..., description="Category label")
    value: float = Field(..., description="Observed count")
    z_score: float = Field(..., description="Standard deviations from the mean")
    severity: Severity = Field(..., description="Severity level")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


class RiskAssessment(BaseModel):
    """Weighted risk score with its component sub-scores."""

    error_score: float = Field(0.0, ge=0.0, le=100.0, description="Score from error rate")
    frequency_score: float = Field(0.0, ge=0.0, le=100.0, description="Score from event rate")
    impact_score: float = Field(0.0, ge=0.0, le=100.0, description="Score from distinct errors")
    security_score: float = Field(0.0, ge=0.0, le=100.0, description="Score from access denials")
    total: float = Field(0.0, ge=0.0, le=100.0, description="Weighted total")
    level: RiskLevel = Field(RiskLevel.LOW, description="Qualitative risk level")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


class AnalyticsResult(BaseModel):
    """Complete analytics output for one ingestion cycle."""

    statistics: AggregateStatistics = Field(default_factory=AggregateStatistics)
    metrics: Metrics = Field(default_factory=Metrics)
    anomalies: List[Anomaly] = Field(default_factory=list, description="Detected anomalies")
    risk_assessment: RiskAssessment = Field(default_factory=RiskAssessment)
    health_score: float = Field(0.0, ge=0.0, le=100.0, description="Composite health score")
    insights: List[str] = Field(default_factory=list, description="Ordered insight messages")
    recommendations: List[str] = Field(default_factory=list, description="Ordered recommendations")
    fingerprint: Optional[str] = Field(None, description="Cache key the result was computed for")
    is_default: bool = Field(False, description="True when produced for missing or empty input")

    @validator('health_score')
    def validate_health_score(cls, v):
        """Validate health score is between 0 and 100."""
        if not 0.0 <= v <= 100.0:
            raise ValueError('Health score must be between 0 and 100')
        return v

    def get_anomalies_by_severity(self, severity: Severity) -> List[Anomaly]:
        """Get anomalies filtered by severity level."""
        return [anomaly for anomaly in self.anomalies if anomaly.severity == severity]

    def get_critical_anomalies(self) -> List[Anomaly]:
        """Get critical severity anomalies."""
        return self.get_anomalies_by_severity(Severity.CRITICAL)

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True
