"""
Configuration management for procmon_analytics.

This module provides configuration management functionality using YAML/JSON files.
"""

import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
from pydantic import BaseModel, Field, validator
from loguru import logger


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field("INFO", description="Logging level")
    format: str = Field(
        "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        description="Log format"
    )
    file_path: Optional[str] = Field(None, description="Log file path")
    rotation: str = Field("10 MB", description="Log rotation size")
    retention: str = Field("30 days", description="Log retention period")

    @validator('level')
    def validate_level(cls, v):
        """Validate logging level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid logging level. Must be one of: {valid_levels}")
        return v.upper()


class IngestionConfig(BaseModel):
    """Configuration for streaming CSV ingestion."""

    batch_size: int = Field(50000, description="Rows read per batch")
    delimiter: str = Field(",", description="Field delimiter")
    quote_char: str = Field('"', description="Field quote character")
    encoding: str = Field("utf-8-sig", description="File encoding")
    timestamp_column: str = Field("Time of Day", description="Timestamp column name")
    process_column: str = Field("Process Name", description="Process name column name")
    pid_column: str = Field("PID", description="Process ID column name")
    operation_column: str = Field("Operation", description="Operation column name")
    path_column: str = Field("Path", description="Path column name")
    result_column: str = Field("Result", description="Result column name")
    detail_column: str = Field("Detail", description="Detail column name")

    @validator('batch_size')
    def validate_batch_size(cls, v):
        """Validate batch size is positive."""
        if v <= 0:
            raise ValueError("Batch size must be positive")
        return v

    @validator('delimiter', 'quote_char')
    def validate_single_char(cls, v):
        """Validate delimiter and quote are single characters."""
        if len(v) != 1:
            raise ValueError("Delimiter and quote character must be a single character")
        return v

    @property
    def required_columns(self) -> List[str]:
        """Columns every input file must provide."""
        return [
            self.timestamp_column,
            self.process_column,
            self.pid_column,
            self.operation_column,
            self.path_column,
            self.result_column,
            self.detail_column,
        ]


class RiskWeights(BaseModel):
    """Weights applied to the risk sub-scores."""

    error: float = Field(0.4, ge=0.0, le=1.0, description="Weight of the error score")
    frequency: float = Field(0.3, ge=0.0, le=1.0, description="Weight of the frequency score")
    impact: float = Field(0.2, ge=0.0, le=1.0, description="Weight of the impact score")
    security: float = Field(0.1, ge=0.0, le=1.0, description="Weight of the security score")

    @validator('security', always=True)
    def validate_sum(cls, v, values):
        """Validate the weights sum to 1.0."""
        total = v + sum(values.get(name, 0.0) for name in ('error', 'frequency', 'impact'))
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Risk weights must sum to 1.0, got {total}")
        return v


class AnalysisConfig(BaseModel):
    """Configuration for anomaly, risk and health analysis."""

    z_score_threshold: float = Field(3.0, description="Minimum |z| reported as an anomaly")
    critical_z_score: float = Field(4.0, description="|z| above which an anomaly is critical")
    top_n: int = Field(10, description="Length of ranked top lists")

    risk_weights: RiskWeights = Field(default_factory=RiskWeights)
    events_per_second_ceiling: float = Field(1000.0, description="Event rate scoring 100")
    unique_errors_ceiling: float = Field(10.0, description="Distinct errors scoring 100")
    access_denied_ceiling: float = Field(100.0, description="Access denials scoring 100")
    critical_risk_threshold: float = Field(70.0, description="Total at or above which risk is critical")
    high_risk_threshold: float = Field(50.0, description="Total at or above which risk is high")
    medium_risk_threshold: float = Field(30.0, description="Total at or above which risk is medium")

    high_error_rate: float = Field(0.10, description="Error rate above which errors are high")
    moderate_error_rate: float = Field(0.05, description="Error rate above which errors are moderate")
    many_anomalies: int = Field(5, description="Anomaly count above which anomalies are many")
    access_denied_alert: int = Field(100, description="Access denials above which permissions are flagged")
    high_event_rate: float = Field(1000.0, description="Events per second above which load is high")

    health_error_weight: float = Field(0.4, description="Health penalty per error percentage point")
    health_anomaly_penalty: float = Field(2.0, description="Health penalty per anomaly")
    health_anomaly_cap: float = Field(20.0, description="Maximum total anomaly penalty")
    health_risk_weight: float = Field(0.3, description="Health penalty per risk point")

    @validator('critical_z_score')
    def validate_z_scores(cls, v, values):
        """Validate the critical z-score is not below the reporting threshold."""
        threshold = values.get('z_score_threshold')
        if threshold is not None and v < threshold:
            raise ValueError("Critical z-score must not be below the anomaly threshold")
        return v

    @validator('top_n')
    def validate_top_n(cls, v):
        """Validate ranked list length."""
        if v <= 0:
            raise ValueError("top_n must be positive")
        return v

    @validator('medium_risk_threshold')
    def validate_risk_thresholds(cls, v, values):
        """Validate risk breakpoints are ordered."""
        high = values.get('high_risk_threshold')
        critical = values.get('critical_risk_threshold')
        if high is not None and critical is not None and not v <= high <= critical:
            raise ValueError("Risk thresholds must satisfy medium <= high <= critical")
        return v


class CacheConfig(BaseModel):
    """Configuration for the analytics result cache."""

    enabled: bool = Field(True, description="Enable result caching")
    max_entries: int = Field(100, description="Maximum cached results")

    @validator('max_entries')
    def validate_max_entries(cls, v):
        """Validate capacity is not negative."""
        if v < 0:
            raise ValueError("max_entries cannot be negative")
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    app_name: str = Field("Procmon Analytics", description="Application name")
    version: str = Field("1.0.0", description="Application version")
    debug: bool = Field(False, description="Debug mode")

    # Sub-configurations
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


DEFAULT_CONFIG_PATHS = (
    Path("config/config.yaml"),
    Path("config/config.yml"),
    Path("config/config.json"),
    Path("config.yaml"),
    Path("config.yml"),
    Path("config.json"),
)

_LOADERS = {
    '.yaml': yaml.safe_load,
    '.yml': yaml.safe_load,
    '.json': json.load,
}


def _deep_merge(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base`` with ``updates`` applied recursively to nested sections."""
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Loads, updates and persists the application configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: YAML or JSON file; the first existing default
                location is used when omitted
        """
        self.config_path = Path(config_path) if config_path else self._find_config_file()
        self._config = self._load()

    @staticmethod
    def _find_config_file() -> Path:
        return next((path for path in DEFAULT_CONFIG_PATHS if path.exists()), DEFAULT_CONFIG_PATHS[0])

    def _read(self) -> Dict[str, Any]:
        loader = _LOADERS.get(self.config_path.suffix.lower())
        if loader is None:
            raise ValueError(f"Unsupported config file format: {self.config_path.suffix}")
        with open(self.config_path, 'r', encoding='utf-8') as f:
            return loader(f) or {}

    def _load(self) -> AppConfig:
        """Build the configuration from file, falling back to defaults."""
        if not self.config_path.exists():
            logger.warning(f"Configuration file not found at {self.config_path}, using defaults")
            return AppConfig()

        logger.info(f"Loading configuration from {self.config_path}")
        try:
            config = AppConfig(**self._read())
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            # pydantic ValidationError and JSONDecodeError are ValueErrors
            logger.error(f"Error loading configuration: {e}")
            logger.info("Using default configuration")
            return AppConfig()

        logger.success("Configuration loaded successfully")
        return config

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def save_config(self) -> None:
        """Write the current configuration in the format implied by the file suffix."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        data = self._config.dict()

        with open(self.config_path, 'w', encoding='utf-8') as f:
            if self.config_path.suffix.lower() == '.json':
                json.dump(data, f, indent=2)
            else:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

        logger.success(f"Configuration saved to {self.config_path}")

    def update_config(self, updates: Dict[str, Any], persist: bool = False) -> None:
        """
        Apply a partial update to the configuration.

        Args:
            updates: Nested mapping of values to change; sections are merged
            persist: Also write the result back to ``config_path``

        Raises:
            ValidationError: If the updated configuration is invalid
        """
        self._config = AppConfig(**_deep_merge(self._config.dict(), updates))
        logger.debug(f"Configuration updated: {', '.join(updates)}")
        if persist:
            self.save_config()

    def is_debug_mode(self) -> bool:
        """Check if debug mode is enabled."""
        return self.config.debug
