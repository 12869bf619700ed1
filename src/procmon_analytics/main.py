"""
Main CLI interface for Procmon Analytics.

This module provides the command-line interface using Click and Rich for
the process activity log analyzer.
"""

import sys
import json
from pathlib import Path
from typing import List

import click
from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.panel import Panel

from .core.analyzer import AnalyticsEngine
from .core.ingestion import StreamingLogProcessor, merge_statistics
from .models.events import AggregateStatistics, ProgressEvent
from .models.results import AnalyticsResult
from .utils.config import CacheConfig, ConfigManager
from .utils.helpers import FileHelper, FormatHelper

# Initialize rich console
console = Console()

LEVEL_COLORS = {'Critical': 'red', 'High': 'orange3', 'Medium': 'yellow', 'Low': 'green'}


def setup_logging(config_manager: ConfigManager) -> None:
    """Setup logging configuration."""
    log_config = config_manager.config.logging

    # Remove default logger
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_config.level,
        format=log_config.format,
        colorize=True
    )

    if log_config.file_path:
        log_path = Path(log_config.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            level=log_config.level,
            format=log_config.format,
            rotation=log_config.rotation,
            retention=log_config.retention
        )

    if config_manager.is_debug_mode():
        logger.info("Debug mode enabled")


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def cli(ctx, config, debug, verbose):
    """
    Procmon Analytics - process activity log analyzer.

    Aggregates Process Monitor CSV exports and reports error rates,
    anomalous processes, risk and overall health.
    """
    ctx.ensure_object(dict)

    try:
        config_manager = ConfigManager(config)
        if debug:
            config_manager.update_config({'debug': True, 'logging': {'level': 'DEBUG'}})

        ctx.obj['config_manager'] = config_manager
        ctx.obj['verbose'] = verbose

        setup_logging(config_manager)

        if verbose:
            console.print(f"[green]✓[/green] Configuration loaded from {config_manager.config_path}")

    except Exception as e:
        console.print(f"[red]✗[/red] Error loading configuration: {e}")
        sys.exit(1)


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option('--batch-size', '-b', type=click.IntRange(min=1), help='Rows read per batch')
@click.option('--no-cache', is_flag=True, help='Disable result caching')
@click.option('--hash', 'use_hash', is_flag=True, help='Include file content hashes in the cache fingerprint')
@click.pass_context
def analyze(ctx, files, batch_size, no_cache, use_hash):
    """Analyze one or more Process Monitor CSV exports."""

    config_manager = ctx.obj['config_manager']
    config = config_manager.config

    ingestion_config = config.ingestion
    if batch_size:
        ingestion_config = ingestion_config.copy(update={'batch_size': batch_size})

    cache_config = CacheConfig(enabled=config.cache.enabled and not no_cache, max_entries=config.cache.max_entries)

    processor = StreamingLogProcessor(ingestion_config)
    engine = AnalyticsEngine(config.analysis, cache_config=cache_config)

    parts: List[AggregateStatistics] = []
    hashes: List[str] = []
    timestamps: List[str] = []
    failures = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console
    ) as progress:
        for file_path in files:
            name = Path(file_path).name
            task = progress.add_task(f"Reading {name}...", total=None)

            def on_progress(event: ProgressEvent, task=task, name=name):
                progress.update(
                    task,
                    description=f"Reading {name}... ({FormatHelper.format_number(event.records_processed)} records "
                                f"of {FormatHelper.format_bytes(event.file_size_bytes)})"
                )

            processor.add_listener(on_progress)
            result = processor.process_file(file_path)
            processor.remove_listener(on_progress)
            progress.remove_task(task)

            if not result.success:
                failures += 1
                console.print(f"[red]✗[/red] {file_path}: {result.error}")
                continue

            console.print(
                f"[green]✓[/green] {file_path}: {result.record_count:,} records"
                + (f", {result.skipped_rows:,} malformed rows skipped" if result.skipped_rows else "")
            )
            parts.append(result.statistics)
            if use_hash:
                hashes.append(FileHelper.compute_file_hash(file_path))
                timestamps.append(FileHelper.get_modified_time(file_path))

    if not parts:
        console.print("[red]✗[/red] No files could be processed")
        sys.exit(1)

    statistics = merge_statistics(parts)
    analytics = engine.analyze(
        statistics,
        source_hash='|'.join(hashes) or None,
        source_timestamp=max(timestamps) if timestamps else None,
    )

    _render_result(analytics)

    if failures:
        console.print(f"[yellow]⚠[/yellow] {failures} file(s) could not be processed")


def _render_result(result: AnalyticsResult) -> None:
    """Print an analytics result as tables and panels."""
    metrics = result.metrics
    risk = result.risk_assessment

    table = Table(title="Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Total Events", FormatHelper.format_number(metrics.total_events))
    table.add_row("Error Rate", FormatHelper.format_percentage(metrics.error_rate))
    table.add_row("Success Rate", FormatHelper.format_percentage(metrics.success_rate))
    table.add_row("Unique Processes", str(metrics.unique_processes))
    table.add_row("Unique Operations", str(metrics.unique_operations))
    table.add_row("Unique Errors", str(metrics.unique_errors))
    table.add_row("Events / Second", f"{metrics.events_per_second:,.2f}")
    table.add_row("Access Denied", FormatHelper.format_number(metrics.access_denied_count))
    console.print(table)

    if metrics.top_processes:
        top = Table(title="Top Processes")
        top.add_column("Process", style="cyan")
        top.add_column("Events", style="white")
        for item in metrics.top_processes:
            top.add_row(item.name, FormatHelper.format_number(item.count))
        console.print(top)

    if result.anomalies:
        anomalies = Table(title="Anomalous Processes")
        anomalies.add_column("Process", style="cyan")
        anomalies.add_column("Events", style="white")
        anomalies.add_column("Z-Score", style="magenta")
        anomalies.add_column("Severity", style="bold")
        for anomaly in result.anomalies:
            color = LEVEL_COLORS.get(anomaly.severity, 'white')
            anomalies.add_row(
                anomaly.key,
                f"{anomaly.value:,.0f}",
                f"{anomaly.z_score:.2f}",
                f"[{color}]{anomaly.severity}[/{color}]"
            )
        console.print(anomalies)

    color = LEVEL_COLORS.get(risk.level, 'white')
    console.print(Panel.fit(
        f"[bold blue]Risk Assessment[/bold blue]\n\n"
        f"Error Score: {risk.error_score:.2f}\n"
        f"Frequency Score: {risk.frequency_score:.2f}\n"
        f"Impact Score: {risk.impact_score:.2f}\n"
        f"Security Score: {risk.security_score:.2f}\n"
        f"Total: {risk.total:.2f} ([{color}]{risk.level}[/{color}])\n"
        f"Health Score: {result.health_score:.2f}"
    ))

    console.print(Panel.fit(
        "[bold blue]Insights[/bold blue]\n\n" + "\n".join(f"• {line}" for line in result.insights)
    ))
    console.print(Panel.fit(
        "[bold blue]Recommendations[/bold blue]\n\n" + "\n".join(f"• {line}" for line in result.recommendations)
    ))


@cli.command()
@click.pass_context
def config_show(ctx):
    """Show current configuration."""

    config_manager = ctx.obj['config_manager']

    config_json = json.dumps(config_manager.config.dict(), indent=2, default=str)

    console.print(Panel.fit(
        f"[bold blue]Current Configuration[/bold blue]\n\n"
        f"Config File: {config_manager.config_path}\n\n"
        f"[dim]{config_json}[/dim]"
    ))


@cli.command()
@click.pass_context
def version(ctx):
    """Show version information."""

    from . import __version__, __author__

    console.print(Panel.fit(
        f"[bold blue]Procmon Analytics[/bold blue]\n\n"
        f"Version: {__version__}\n"
        f"Author: {__author__}\n"
        f"Description: Streaming analytics for process activity logs"
    ))


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        console.print(f"[red]✗[/red] Unexpected error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
