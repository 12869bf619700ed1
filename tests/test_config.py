"""Tests for configuration management."""

import json

import pytest
from pydantic import ValidationError

from procmon_analytics.utils.config import AnalysisConfig, ConfigManager, IngestionConfig, RiskWeights


class TestConfigModels:
    """Test configuration model defaults and validation."""

    def test_defaults(self):
        """Test default values."""
        ingestion = IngestionConfig()
        analysis = AnalysisConfig()

        assert ingestion.batch_size == 50000
        assert ingestion.required_columns == [
            "Time of Day", "Process Name", "PID", "Operation", "Path", "Result", "Detail"
        ]
        assert analysis.z_score_threshold == 3.0
        assert analysis.critical_z_score == 4.0
        assert analysis.top_n == 10

    def test_invalid_batch_size(self):
        """Test batch size must be positive."""
        with pytest.raises(ValidationError):
            IngestionConfig(batch_size=0)

    def test_invalid_delimiter(self):
        """Test delimiter must be one character."""
        with pytest.raises(ValidationError):
            IngestionConfig(delimiter=";;")

    def test_weights_must_sum_to_one(self):
        """Test risk weights must sum to 1.0."""
        with pytest.raises(ValidationError):
            RiskWeights(error=0.5, frequency=0.5, impact=0.5, security=0.5)

    def test_critical_below_threshold(self):
        """Test critical z-score cannot be below the threshold."""
        with pytest.raises(ValidationError):
            AnalysisConfig(z_score_threshold=3.0, critical_z_score=2.0)

    def test_unordered_risk_thresholds(self):
        """Test risk breakpoints must be ordered."""
        with pytest.raises(ValidationError):
            AnalysisConfig(medium_risk_threshold=60.0)


class TestConfigManager:
    """Test ConfigManager functionality."""

    def test_missing_file_uses_defaults(self, tmp_path):
        """Test a missing file yields defaults without creating it."""
        manager = ConfigManager(str(tmp_path / "missing.yaml"))

        assert manager.config.app_name == "Procmon Analytics"
        assert not (tmp_path / "missing.yaml").exists()
        assert manager.is_debug_mode() is False

    def test_load_yaml(self, tmp_path):
        """Test loading a partial YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "debug: true\n"
            "ingestion:\n"
            "  batch_size: 1000\n"
            "analysis:\n"
            "  z_score_threshold: 2.5\n"
            "  risk_weights:\n"
            "    error: 0.25\n"
            "    frequency: 0.25\n"
            "    impact: 0.25\n"
            "    security: 0.25\n"
            "cache:\n"
            "  max_entries: 5\n"
        )

        manager = ConfigManager(str(config_file))

        assert manager.is_debug_mode() is True
        assert manager.config.ingestion.batch_size == 1000
        assert manager.config.analysis.z_score_threshold == 2.5
        assert manager.config.analysis.critical_z_score == 4.0
        assert manager.config.analysis.risk_weights.security == 0.25
        assert manager.config.cache.max_entries == 5

    def test_invalid_yaml_uses_defaults(self, tmp_path):
        """Test malformed YAML falls back to defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("ingestion: [unclosed\n")

        manager = ConfigManager(str(config_file))

        assert manager.config.ingestion.batch_size == 50000

    def test_invalid_weights_use_defaults(self, tmp_path):
        """Test invalid weights fall back to defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("analysis:\n  risk_weights:\n    error: 0.9\n")

        manager = ConfigManager(str(config_file))

        assert manager.config.analysis.risk_weights.error == 0.4

    def test_unsupported_format_uses_defaults(self, tmp_path):
        """Test an unknown suffix falls back to defaults."""
        config_file = tmp_path / "config.ini"
        config_file.write_text("[analysis]\n")

        manager = ConfigManager(str(config_file))

        assert manager.config.cache.enabled is True

    def test_update_is_deep(self, tmp_path):
        """Test updates merge into nested sections."""
        manager = ConfigManager(str(tmp_path / "config.yaml"))

        manager.update_config({'analysis': {'top_n': 5}, 'logging': {'level': 'debug'}})

        assert manager.config.analysis.top_n == 5
        assert manager.config.analysis.z_score_threshold == 3.0
        assert manager.config.logging.level == "DEBUG"
        assert not (tmp_path / "config.yaml").exists()

    def test_update_rejects_invalid_values(self, tmp_path):
        """Test invalid updates raise."""
        manager = ConfigManager(str(tmp_path / "config.yaml"))

        with pytest.raises(ValidationError):
            manager.update_config({'cache': {'max_entries': -1}})

    def test_persist_json(self, tmp_path):
        """Test persisted JSON reloads."""
        config_file = tmp_path / "config.json"
        manager = ConfigManager(str(config_file))

        manager.update_config({'ingestion': {'batch_size': 250}}, persist=True)

        assert json.loads(config_file.read_text())['ingestion']['batch_size'] == 250
        assert ConfigManager(str(config_file)).config.ingestion.batch_size == 250

    def test_save_yaml(self, tmp_path):
        """Test saved YAML reloads."""
        config_file = tmp_path / "nested" / "config.yaml"
        manager = ConfigManager(str(config_file))
        manager.update_config({'cache': {'enabled': False}})

        manager.save_config()

        assert ConfigManager(str(config_file)).config.cache.enabled is False
