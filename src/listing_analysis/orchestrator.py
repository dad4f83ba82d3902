# ========================
# src/listing_analysis/orchestrator.py
# ========================

"""
Pipeline Orchestrator Module

Runs the stages in order: load, validate, clean, aggregate, save.
"""

import logging
from pathlib import Path
from typing import Optional

from .ingestion import ProductLoader
from .validation import DataValidator
from .cleaning import DataCleaner
from .aggregation import InsightAggregator
from .storage import DataSaver
from ..utils.performance_monitor import monitor_performance
from ..utils.config import Config

logger = logging.getLogger(__name__)


class InsightPipeline:
    """
    Orchestrates the product listing analysis from CSV file to saved reports.
    """

    def __init__(self,
                 input_file: str,
                 output_dir: str,
                 chunk_size: int = 1000,
                 config: Optional[Config] = None):
        """
        Initialize the pipeline.

        Args:
            input_file (str): Path to the product listing CSV
            output_dir (str): Directory for report files
            chunk_size (int): Number of rows read per chunk
            config (Config): Configuration object
        """
        self.input_file = input_file
        self.output_dir = output_dir
        self.chunk_size = chunk_size
        self.config = config or Config()

        self.loader = ProductLoader(
            self.input_file,
            chunk_size=self.chunk_size,
            encoding=self.config.INPUT_ENCODING
        )
        self.validator = DataValidator()
        self.cleaner = DataCleaner(scale_factor=self.config.PRICE_SCALE_FACTOR)
        self.aggregator = InsightAggregator(
            top_discounts_limit=self.config.TOP_DISCOUNTS_LIMIT,
            high_value_oos_limit=self.config.HIGH_VALUE_OOS_LIMIT,
            category_discount_limit=self.config.CATEGORY_DISCOUNT_LIMIT,
            value_for_money_limit=self.config.VALUE_FOR_MONEY_LIMIT
        )
        self.saver = DataSaver(self.output_dir)

        logger.info("InsightPipeline initialized:")
        logger.info(f"  Input: {self.input_file}")
        logger.info(f"  Output: {self.output_dir}")
        logger.info(f"  Chunk size: {self.chunk_size}")

    def run(self) -> dict:
        """
        Execute the complete pipeline from start to finish.

        Any failure aborts the run; nothing after the failing stage executes.

        Returns:
            dict: Summary of processing results and saved files
        """
        logger.info(f"Starting insight pipeline for '{self.input_file}'...")

        with monitor_performance("Listing Insights") as monitor:
            logger.info("Stage 1: Loading product listings...")
            table = self.loader.load()
            monitor.update_progress(len(table))
            monitor.add_checkpoint('load', {'rows': len(table)})

            logger.info("Stage 2: Validating data quality...")
            validation_report = self.validator.profile(table)
            monitor.add_checkpoint('validate')

            logger.info("Stage 3: Cleaning...")
            cleaning_stats = self.cleaner.clean(table)
            monitor.add_checkpoint('clean', {'rows': len(table)})

            logger.info("Stage 4: Running insight queries...")
            insights = self.aggregator.run_all(table)
            monitor.add_checkpoint('aggregate', {'reports': len(insights)})

            logger.info("Stage 5: Saving reports...")
            saved_files = self.saver.save_all_data(validation_report, insights, cleaning_stats)
            monitor.add_checkpoint('save', {'files': len(saved_files)})

        results = {
            'pipeline_status': 'completed',
            'input_file': self.input_file,
            'output_directory': self.output_dir,
            'saved_files': saved_files,
            'data_quality_report': validation_report,
            'cleaning_stats': cleaning_stats,
            'insights': insights
        }

        logger.info("Pipeline finished successfully.")
        self._log_final_summary(results)

        return results

    def _log_final_summary(self, results: dict) -> None:
        """Log final pipeline summary."""
        logger.info("="*60)
        logger.info("PIPELINE EXECUTION SUMMARY")
        logger.info("="*60)

        quality = results['data_quality_report']
        cleaning = results['cleaning_stats']

        logger.info(f"Input file: {results['input_file']}")
        logger.info(f"Rows loaded: {quality['total_rows']:,}")
        logger.info(f"Rows removed (zero MRP): {cleaning['records_dropped']:,}")
        logger.info(f"Rows analysed: {cleaning['records_cleaned']:,}")
        logger.info(f"Output files generated: {len(results['saved_files'])}")
        logger.info(f"Output directory: {results['output_directory']}")

        logger.info("Generated reports:")
        for report, file_path in results['saved_files'].items():
            logger.info(f"  - {report}: {file_path}")

        logger.info("="*60)

    def validate_input(self) -> bool:
        """
        Validate input file exists and is readable.

        Returns:
            bool: True if input is valid
        """
        input_path = Path(self.input_file)
        if not input_path.exists():
            logger.error(f"Input file does not exist: {self.input_file}")
            return False

        if not input_path.is_file():
            logger.error(f"Input path is not a file: {self.input_file}")
            return False

        try:
            with open(self.input_file, 'r', encoding=self.config.INPUT_ENCODING) as f:
                f.readline()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read input file: {e}")
            return False

        logger.info(f"Input validation passed: {self.input_file}")
        return True
