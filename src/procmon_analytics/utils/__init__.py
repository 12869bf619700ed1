"""Utils package for procmon_analytics."""

from .config import AnalysisConfig, AppConfig, CacheConfig, ConfigManager, IngestionConfig, LoggingConfig
from .helpers import FileHelper, FormatHelper

__all__ = [
    "AnalysisConfig",
    "AppConfig",
    "CacheConfig",
    "ConfigManager",
    "IngestionConfig",
    "LoggingConfig",
    "FileHelper",
    "FormatHelper",
]
