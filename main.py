#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the Product Listing Insights Pipeline

Runs the full sequence on the configured listing file: load, validate,
clean, run the insight queries and save the reports. A sample dataset is
generated first when the input file does not exist yet.
"""

import sys
import logging
from pathlib import Path

from src.listing_analysis import InsightPipeline
from src.utils import Config, setup_logging, DataGenerator


def main():
    """Main execution function."""
    config = Config()

    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file="pipeline.log",
        log_dir=config.LOG_DIR
    )

    logger = logging.getLogger(__name__)
    logger.info("="*60)
    logger.info("PRODUCT LISTING INSIGHTS PIPELINE - MAIN EXECUTION")
    logger.info("="*60)

    try:
        config.ensure_directories()

        invalid = [name for name, ok in config.validate_config().items() if not ok]
        if invalid:
            logger.error(f"Invalid configuration values: {', '.join(invalid)}")
            return 1

        input_file = config.DEFAULT_INPUT_FILE
        if not Path(input_file).exists():
            logger.info(f"Input file {input_file} not found, generating sample data...")
            generator = DataGenerator(seed=42)
            generation_stats = generator.generate_dataset(
                file_path=input_file,
                num_rows=config.DEFAULT_SAMPLE_ROWS
            )
            logger.info(f"Sample data generated: {generation_stats}")

        pipeline = InsightPipeline(
            input_file=input_file,
            output_dir=config.DEFAULT_OUTPUT_DIR,
            chunk_size=config.DEFAULT_CHUNK_SIZE,
            config=config
        )

        if not pipeline.validate_input():
            logger.error("Input validation failed. Exiting.")
            return 1

        results = pipeline.run()
        _print_execution_summary(results, config)

        logger.info("Pipeline execution completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return 1


def _print_execution_summary(results: dict, config: Config) -> None:
    """Print the headline numbers of a run."""
    currency = config.CURRENCY_SYMBOL
    quality = results['data_quality_report']
    cleaning = results['cleaning_stats']
    insights = results['insights']

    print("\n" + "="*70)
    print("PIPELINE EXECUTION SUMMARY")
    print("="*70)

    print("Data Quality:")
    print(f"   • Rows loaded: {quality['total_rows']:,}")
    print(f"   • Distinct categories: {quality['distinct_categories']}")
    print(f"   • Rows with a zero price: {quality['zero_price_rows']:,}")
    status = quality['stock_status']
    print(f"   • In stock: {status['in_stock']:,} ({status['in_stock_pct']}%)")

    print("\nCleaning:")
    print(f"   • Removed (zero MRP): {cleaning['records_dropped']:,}")
    print(f"   • Rows analysed: {cleaning['records_cleaned']:,}")

    print("\nTop categories by potential revenue:")
    for row in insights['category_revenue'][:5]:
        print(f"   • {row['category'] or '(uncategorised)'}: {currency}{row['potential_revenue']}")

    print("\nGenerated reports:")
    for report, file_path in results['saved_files'].items():
        print(f"   • {report.replace('_', ' ').title()}: {Path(file_path).name}")

    print("="*70)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
