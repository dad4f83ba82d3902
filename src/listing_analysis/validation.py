# ========================
# src/listing_analysis/validation.py
# ========================

"""
Data Validation Module

Read-only data-quality checks over the loaded product table. Findings are
reported, never acted on: the cleaner runs regardless of what is found here.
"""

import logging
from collections import Counter
from typing import Any, Dict, List

from .numeric import null_high, percentage
from .table import ProductTable

logger = logging.getLogger(__name__)


class DataValidator:
    """
    Profiles a ProductTable for missing values, zero prices and stock status.
    """

    NULL_CHECK_COLUMNS = ['name', 'category', 'mrp', 'discount_percent', 'available_quantity']

    def count_invalid(self, table: ProductTable) -> Dict[str, int]:
        """
        Count rows with a missing value in each checked column.

        Returns:
            dict: Column name -> number of null values
        """
        return {
            column: sum(1 for row in table if row[column] is None)
            for column in self.NULL_CHECK_COLUMNS
        }

    def category_counts(self, table: ProductTable) -> List[Dict[str, Any]]:
        """Row count per category, ordered by category name with nulls last."""
        counts = Counter(row['category'] for row in table)
        return [
            {'category': category, 'product_count': count}
            for category, count in sorted(counts.items(), key=lambda item: null_high(item[0]))
        ]

    def zero_price_count(self, table: ProductTable) -> int:
        """Rows where mrp = 0 or discounted_selling_price = 0."""
        return sum(
            1 for row in table
            if row['mrp'] == 0 or row['discounted_selling_price'] == 0
        )

    def stock_status(self, table: ProductTable) -> Dict[str, Any]:
        """In-stock vs out-of-stock counts and their share of all rows."""
        total = len(table)
        out_of_stock = sum(1 for row in table if row['out_of_stock'] is True)
        in_stock = sum(1 for row in table if row['out_of_stock'] is False)
        return {
            'in_stock': in_stock,
            'out_of_stock': out_of_stock,
            'in_stock_pct': percentage(in_stock, total),
            'out_of_stock_pct': percentage(out_of_stock, total),
        }

    def duplicate_names(self, table: ProductTable) -> List[Dict[str, Any]]:
        """Product names listed more than once, most repeated first."""
        counts = Counter(row['name'] for row in table)
        repeated = [(name, count) for name, count in counts.items() if count > 1]
        repeated.sort(key=lambda item: (-item[1], item[0]))
        return [{'name': name, 'sku_count': count} for name, count in repeated]

    def profile(self, table: ProductTable) -> Dict[str, Any]:
        """
        Run every check and return the combined data-quality report.

        Args:
            table (ProductTable): Loaded table; not modified

        Returns:
            dict: Data-quality report
        """
        logger.info(f"Profiling {len(table)} product listings...")

        category_counts = self.category_counts(table)
        report = {
            'total_rows': len(table),
            'null_counts': self.count_invalid(table),
            'distinct_categories': sum(1 for c in category_counts if c['category'] is not None),
            'category_counts': category_counts,
            'zero_price_rows': self.zero_price_count(table),
            'stock_status': self.stock_status(table),
            'duplicate_names': self.duplicate_names(table),
        }

        self._log_report(report)
        return report

    def _log_report(self, report: Dict[str, Any]) -> None:
        null_columns = {k: v for k, v in report['null_counts'].items() if v}
        if null_columns:
            logger.info(f"Null values found: {null_columns}")
        else:
            logger.info("No null values in checked columns")

        logger.info(f"Distinct categories: {report['distinct_categories']}")
        logger.info(f"Rows with zero price: {report['zero_price_rows']}")

        status = report['stock_status']
        logger.info(
            f"Stock status: {status['in_stock']} in stock ({status['in_stock_pct']}%), "
            f"{status['out_of_stock']} out of stock ({status['out_of_stock_pct']}%)"
        )
        logger.info(f"Names listed more than once: {len(report['duplicate_names'])}")
