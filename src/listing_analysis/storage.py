# ========================
# src/listing_analysis/storage.py
# ========================

"""
Data Storage Module

Writes the data-quality report and insight results as JSON documents.
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    """Serialise Decimal as a JSON number; anything else as its string form."""
    if isinstance(value, Decimal):
        return float(value)
    return str(value)


class DataSaver:
    """
    Saves pipeline reports to an output directory, one JSON file per report.
    """

    def __init__(self, output_dir: str = "data/processed"):
        """
        Initialize the data saver.

        Args:
            output_dir (str): Directory to save output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"DataSaver initialized with output directory: {self.output_dir}")

    def save_all_data(self,
                      validation_report: Dict[str, Any],
                      insights: Dict[str, List[Dict[str, Any]]],
                      cleaning_stats: Dict[str, Any]) -> Dict[str, str]:
        """
        Save every report produced by a pipeline run.

        Args:
            validation_report (dict): DataValidator.profile() output
            insights (dict): InsightAggregator.run_all() output
            cleaning_stats (dict): DataCleaner statistics

        Returns:
            dict: Mapping of report name to saved file path
        """
        saved_files = {}

        try:
            saved_files['data_quality_report'] = self._write_json(
                "data_quality_report.json", validation_report
            )

            for name, records in insights.items():
                saved_files[name] = self.save_insight(name, records)

            saved_files['summary'] = self._write_json("insights_summary.json", {
                'cleaning': cleaning_stats,
                'rows_after_cleaning': cleaning_stats.get('records_cleaned'),
                'insight_row_counts': {name: len(records) for name, records in insights.items()},
            })

            logger.info(f"All data saved successfully to {len(saved_files)} files")
            return saved_files

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving data: {e}")
            raise

    def save_insight(self, name: str, records: List[Dict[str, Any]]) -> str:
        """Save one insight query's records."""
        if not records:
            logger.warning(f"No rows for insight '{name}'")
        return self._write_json(f"{name}.json", records)

    def _write_json(self, file_name: str, data: Any) -> str:
        file_path = self.output_dir / file_name

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=_json_default)

        logger.info(f"Saved {file_path}")
        return str(file_path)
