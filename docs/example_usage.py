"""
Basic usage example for Procmon Analytics.

This script shows the main workflow: stream one or more Process Monitor
CSV exports into aggregate statistics, then analyze them.
"""

import sys
from pathlib import Path

# Add the src directory to the path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from procmon_analytics.core.analyzer import AnalyticsEngine
from procmon_analytics.core.ingestion import StreamingLogProcessor, merge_statistics
from procmon_analytics.utils.config import ConfigManager
from procmon_analytics.utils.helpers import FileHelper, FormatHelper


def main(paths):
    """Main function of the example."""

    print("🔍 Procmon Analytics - Usage Example")
    print("=" * 50)

    try:
        # 1. Load configuration
        print("\n1. Loading configuration...")
        config_manager = ConfigManager()
        config = config_manager.config
        print(f"✓ Configuration loaded from: {config_manager.config_path}")

        # 2. Stream the exports
        print("\n2. Reading logs...")
        processor = StreamingLogProcessor(
            config.ingestion,
            on_progress=lambda event: print(
                f"   {FormatHelper.format_number(event.records_processed)} records "
                f"({FormatHelper.format_bytes(event.file_size_bytes)} file)"
            ),
        )

        parts = []
        hashes = []
        for path in paths:
            outcome = processor.process_file(path)
            if not outcome.success:
                print(f"✗ {path}: {outcome.error}")
                continue
            print(f"✓ {path}: {outcome.record_count:,} records, {outcome.skipped_rows:,} skipped")
            parts.append(outcome.statistics)
            hashes.append(FileHelper.compute_file_hash(path))

        if not parts:
            print("✗ No logs could be read")
            return 1

        # 3. Analyze
        print("\n3. Analyzing...")
        engine = AnalyticsEngine(config.analysis, cache_config=config.cache)
        result = engine.analyze(merge_statistics(parts), source_hash='|'.join(hashes))

        metrics = result.metrics
        print(f"   Total events: {metrics.total_events:,}")
        print(f"   Error rate: {FormatHelper.format_percentage(metrics.error_rate)}")
        print(f"   Events/sec: {metrics.events_per_second:,.2f}")
        print(f"   Risk: {result.risk_assessment.total} ({result.risk_assessment.level})")
        print(f"   Health: {result.health_score}")

        # 4. Anomalies
        if result.anomalies:
            print("\n4. Anomalous processes:")
            for anomaly in result.anomalies:
                print(f"   {anomaly.key}: {anomaly.value:,.0f} events (z={anomaly.z_score:.2f}, {anomaly.severity})")

        print("\nInsights:")
        for insight in result.insights:
            print(f"   • {insight}")

        print("\nRecommendations:")
        for recommendation in result.recommendations:
            print(f"   • {recommendation}")

    except KeyboardInterrupt:
        print("\n\n⚠ Operation cancelled by user")
    except Exception as e:
        print(f"\n✗ Error during execution: {e}")
        return 1

    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python example_usage.py Logfile.CSV [more.CSV ...]")
        sys.exit(2)
    sys.exit(main(sys.argv[1:]))
