#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Event Log Pipeline

Cleans the configured event-log CSV (generating a messy sample first when
it does not exist) and prints the cleaning statistics and aggregations.
"""

import sys
from pathlib import Path

from eventlab.pipeline import EventPipeline, PipelineResult
from eventlab.utils import Config, DataGenerator, get_logger, setup_logging_from_config


def main() -> int:
    """Main execution function."""
    config = Config()

    setup_logging_from_config(config, log_file="pipeline.log")

    logger = get_logger(__name__)
    logger.info("=" * 60)
    logger.info("EVENT LOG PIPELINE - MAIN EXECUTION")
    logger.info("=" * 60)

    try:
        invalid_settings = [name for name, ok in config.validate_config().items() if not ok]
        if invalid_settings:
            logger.error(f"Invalid configuration values: {invalid_settings}")
            return 1

        input_file = config.DEFAULT_INPUT_FILE

        # Step 1: Make sure there is something to process
        if not Path(input_file).exists():
            logger.info(f"Step 1: {input_file} not found, generating sample data...")
            generator = DataGenerator(seed=config.SAMPLE_SEED)
            generation_stats = generator.generate_dataset(
                file_path=input_file,
                num_rows=config.SAMPLE_ROWS,
                num_users=config.SAMPLE_USERS
            )
            logger.info(f"Sample data generated: {generation_stats}")
        else:
            logger.info(f"Step 1: Using existing input file {input_file}")

        # Step 2: Run the pipeline
        logger.info("Step 2: Running event pipeline...")
        pipeline = EventPipeline(config=config)
        result = pipeline.run_file(input_file)

        # Step 3: Print summary
        _print_execution_summary(result, config.PREVIEW_ROWS)

        logger.info("Pipeline execution completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return 1


def _print_execution_summary(result: PipelineResult, preview_rows: int) -> None:
    """Print final execution summary."""
    log = result.cleaning_log

    print("\n" + "=" * 70)
    print("EVENT PIPELINE SUMMARY")
    print("=" * 70)

    print("🧹 Cleaning:")
    print(f"   • Rows read: {result.raw_rows:,}")
    print(f"   • Rows kept: {len(result.cleaned):,}")
    print(f"   • Duplicates removed: {log.duplicates_removed:,}")
    print(f"   • Casing normalized: {log.casing_fixed:,}")
    print(f"   • Nulls handled: {log.nulls_handled:,}")
    print(f"   • Invalid dropped: {log.invalid_dropped:,}")

    print("\n💰 Revenue by country:")
    for entry in result.aggregations.revenue_by_country:
        print(f"   • {entry.country:<10} {entry.total_revenue:>12,.2f}")
    print(f"\n👤 ARPU: {result.aggregations.arpu:,.2f}")

    print("\n📱 Device revenue mix:")
    for entry in result.device_revenue:
        print(f"   • {entry.device:<10} {entry.total_revenue:>12,.2f} ({entry.share:.1%})")

    print("\n📊 Event counts:")
    for entry in result.event_counts:
        print(f"   • {entry.event_type:<12} {entry.count:,}")

    print(f"\n🔎 First {preview_rows} cleaned rows:")
    for row in result.preview(preview_rows):
        print(f"   {row.user_id:<10} {row.event_type:<12} {row.revenue:>10.2f} {row.country}")

    print("=" * 70)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
