"""Tests for the command-line interface."""

import csv

import pytest
from click.testing import CliRunner
from loguru import logger

from procmon_analytics.main import cli

HEADER = ["Time of Day", "Process Name", "PID", "Operation", "Path", "Result", "Detail"]


@pytest.fixture
def runner():
    yield CliRunner()
    # setup_logging attaches a sink to the runner's captured stderr
    logger.remove()


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "events.csv"
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL)
        writer.writerow(HEADER)
        writer.writerow(["2024-01-01T10:00:00", "explorer.exe", "1234", "ReadFile", "C:\\a", "SUCCESS", ""])
        writer.writerow(["2024-01-01T10:00:01", "svchost.exe", "880", "RegOpenKey", "HKLM", "ACCESS DENIED", ""])
        writer.writerow(["2024-01-01T10:00:02", "explorer.exe", "1234", "CreateFile", "C:\\b", "SUCCESS", ""])
    return path


class TestCli:
    """Test CLI commands."""

    def test_analyze(self, runner, log_file):
        """Test analyzing a single file."""
        result = runner.invoke(cli, ['analyze', str(log_file)])

        assert result.exit_code == 0
        assert "Total Events" in result.output
        assert "Recommendations" in result.output

    def test_analyze_options(self, runner, log_file):
        """Test batch size, cache and hash options."""
        result = runner.invoke(cli, ['analyze', str(log_file), '--batch-size', '1', '--no-cache', '--hash'])

        assert result.exit_code == 0
        assert "Top Processes" in result.output

    def test_analyze_partial_failure(self, runner, log_file, tmp_path):
        """Test a missing file is reported and skipped."""
        result = runner.invoke(cli, ['analyze', str(log_file), str(tmp_path / "missing.csv")])

        assert result.exit_code == 0
        assert "1 file(s) could not be processed" in result.output

    def test_analyze_all_files_fail(self, runner, tmp_path):
        """Test exit code when no file can be read."""
        result = runner.invoke(cli, ['analyze', str(tmp_path / "missing.csv")])

        assert result.exit_code == 1
        assert "No files could be processed" in result.output

    def test_invalid_batch_size(self, runner, log_file):
        """Test a non-positive batch size is a usage error."""
        result = runner.invoke(cli, ['analyze', str(log_file), '--batch-size', '0'])
        assert result.exit_code == 2

    def test_version(self, runner):
        """Test version command."""
        result = runner.invoke(cli, ['version'])

        assert result.exit_code == 0
        assert "Procmon Analytics" in result.output

    def test_config_show(self, runner):
        """Test config-show command."""
        result = runner.invoke(cli, ['config-show'])

        assert result.exit_code == 0
        assert "Current Configuration" in result.output
