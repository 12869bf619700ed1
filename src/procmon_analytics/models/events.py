"""
Event models for process activity log analysis.

This module contains Pydantic models for representing individual log rows,
the per-file aggregate statistics built from them, and ingestion results.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, Optional
from pydantic import BaseModel, Field, validator


class ResultCategory(str, Enum):
    """Closed classification of a log row's Result field."""

    SUCCESS = "success"
    ACCESS_DENIED = "access_denied"
    OTHER_ERROR = "other_error"


def classify_result(result: Optional[str]) -> ResultCategory:
    """
    Classify a raw Result value.

    Args:
        result: Result text as exported, e.g. "SUCCESS" or "NAME NOT FOUND"

    Returns:
        The matching ResultCategory
    """
    normalized = (result or "").strip().upper()
    if normalized == "SUCCESS":
        return ResultCategory.SUCCESS
    if "ACCESS DENIED" in normalized:
        return ResultCategory.ACCESS_DENIED
    return ResultCategory.OTHER_ERROR


def _increment(mapping: Dict[str, int], values: Iterable[str]) -> None:
    # Keys keep first-seen order; ranking ties rely on it
    for value in values:
        mapping[value] = mapping.get(value, 0) + 1


class EventRecord(BaseModel):
    """Model for a single process activity row."""

    timestamp: str = Field(..., description="Time of day as exported")
    process_name: str = Field(..., description="Process image name")
    pid: int = Field(..., description="Process ID")
    operation: str = Field(..., description="Operation name")
    path: str = Field("", description="Target path")
    result: str = Field(..., description="Operation result")
    detail: str = Field("", description="Free-form operation detail")

    @validator('pid')
    def validate_pid(cls, v):
        """Validate process ID is not negative."""
        if v < 0:
            raise ValueError('Process ID cannot be negative')
        return v

    @property
    def category(self) -> ResultCategory:
        """Result classification for this row."""
        return classify_result(self.result)


class ProgressEvent(BaseModel):
    """Batch-completion notification emitted during ingestion."""

    records_processed: int = Field(..., ge=0, description="Valid records processed so far")
    file_size_bytes: int = Field(..., ge=0, description="Size of the file being processed")

    class Config:
        """Pydantic configuration."""
        frozen = True


class AggregateStatistics(BaseModel):
    """Category counts summarizing an ingested log."""

    process_types: Dict[str, int] = Field(default_factory=dict, description="Events per process name")
    operations: Dict[str, int] = Field(default_factory=dict, description="Events per operation")
    results: Dict[str, int] = Field(default_factory=dict, description="Events per result label")
    result_categories: Dict[str, ResultCategory] = Field(
        default_factory=dict, description="Classification of each result label"
    )
    total_records: int = Field(0, ge=0, description="Valid records aggregated")
    skipped_rows: int = Field(0, ge=0, description="Malformed rows skipped")
    first_timestamp: Optional[datetime] = Field(None, description="Earliest parsed event time")
    last_timestamp: Optional[datetime] = Field(None, description="Latest parsed event time")

    @validator('process_types', 'operations', 'results')
    def validate_counts(cls, v):
        """Validate counts are non-negative."""
        for key, count in v.items():
            if count < 0:
                raise ValueError(f"Count for '{key}' cannot be negative")
        return v

    def is_empty(self) -> bool:
        """Check whether nothing has been aggregated."""
        return not (self.process_types or self.operations or self.results)

    def record_processes(self, values: Iterable[str]) -> None:
        """Count process names."""
        _increment(self.process_types, values)

    def record_operations(self, values: Iterable[str]) -> None:
        """Count operation names."""
        _increment(self.operations, values)

    def record_results(self, values: Iterable[str]) -> None:
        """Count result labels, classifying each new label exactly once."""
        for value in values:
            if value not in self.result_categories:
                self.result_categories[value] = classify_result(value)
            self.results[value] = self.results.get(value, 0) + 1

    def result_category(self, label: str) -> ResultCategory:
        """Get the classification for a result label without recording it."""
        category = self.result_categories.get(label)
        if category is None:
            return classify_result(label)
        return ResultCategory(category)

    def observe_time_range(self, start: Optional[datetime], end: Optional[datetime]) -> None:
        """Widen the observed time range."""
        if start is not None and (self.first_timestamp is None or start < self.first_timestamp):
            self.first_timestamp = start
        if end is not None and (self.last_timestamp is None or end > self.last_timestamp):
            self.last_timestamp = end

    @property
    def time_span_seconds(self) -> float:
        """Seconds between first and last parsed event, 0 when unknown."""
        if self.first_timestamp is None or self.last_timestamp is None:
            return 0.0
        return max(0.0, (self.last_timestamp - self.first_timestamp).total_seconds())

    def merge(self, other: "AggregateStatistics") -> "AggregateStatistics":
        """
        Combine two aggregates by elementwise addition.

        Args:
            other: Aggregates of another file

        Returns:
            A new AggregateStatistics; neither input is modified
        """
        merged = AggregateStatistics(
            process_types=dict(self.process_types),
            operations=dict(self.operations),
            results=dict(self.results),
            result_categories=dict(self.result_categories),
            total_records=self.total_records + other.total_records,
            skipped_rows=self.skipped_rows + other.skipped_rows,
            first_timestamp=self.first_timestamp,
            last_timestamp=self.last_timestamp,
        )
        for source, target in (
            (other.process_types, merged.process_types),
            (other.operations, merged.operations),
            (other.results, merged.results),
        ):
            for key, count in source.items():
                target[key] = target.get(key, 0) + count
        for key, category in other.result_categories.items():
            merged.result_categories.setdefault(key, category)
        merged.observe_time_range(other.first_timestamp, other.last_timestamp)
        return merged


class ProcessingResult(BaseModel):
    """Outcome of ingesting one file."""

    success: bool = Field(..., description="Whether the file was fully read")
    file_path: str = Field(..., description="Path of the processed file")
    record_count: int = Field(0, ge=0, description="Valid records aggregated")
    skipped_rows: int = Field(0, ge=0, description="Malformed rows skipped")
    statistics: AggregateStatistics = Field(default_factory=AggregateStatistics)
    error: Optional[str] = Field(None, description="Failure description")
