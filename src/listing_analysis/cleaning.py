# ========================
# src/listing_analysis/cleaning.py
# ========================

"""
Data Cleaning Module

Removes unpriced listings and converts prices from paise to rupees.
"""

import logging
from decimal import Decimal
from typing import Any, Dict

from .numeric import round_half_up
from .table import PRICE_COLUMNS, ProductTable

logger = logging.getLogger(__name__)


class DataCleaner:
    """
    Applies the two cleaning transforms to a ProductTable, in place.

    The steps are independent statements: there is no rollback, so a failure
    after remove_zero_price leaves the table with rows removed but prices
    still in paise.
    """

    def __init__(self, scale_factor: int = 100):
        """
        Initialize the data cleaner.

        Args:
            scale_factor (int): Divisor taking prices from minor to major units
        """
        self.scale_factor = Decimal(scale_factor)
        self.records_processed = 0
        self.records_dropped = 0
        self.records_rescaled = 0
        logger.info(f"DataCleaner initialized with scale_factor={scale_factor}")

    def remove_zero_price(self, table: ProductTable) -> int:
        """
        Delete every row whose mrp is zero.

        Rows with a zero discounted_selling_price are kept; only mrp is checked.

        Returns:
            int: Number of rows deleted
        """
        self.records_processed += len(table)
        removed = table.delete_where(lambda row: row['mrp'] == 0)
        self.records_dropped += removed
        logger.info(f"Removed {removed} rows with zero MRP, {len(table)} rows remain")
        return removed

    def rescale_prices(self, table: ProductTable) -> int:
        """
        Divide mrp and discounted_selling_price of every row by the scale factor.

        Not idempotent: each call divides again. Results keep two decimal places.

        Returns:
            int: Number of rows rescaled
        """
        if table.rescale_count:
            logger.warning(
                f"Prices in this table were already rescaled {table.rescale_count} time(s); "
                f"dividing by {self.scale_factor} again"
            )

        for row in table:
            for column in PRICE_COLUMNS:
                if row[column] is not None:
                    row[column] = round_half_up(row[column] / self.scale_factor)

        table.rescale_count += 1
        self.records_rescaled += len(table)
        logger.info(f"Rescaled prices of {len(table)} rows by 1/{self.scale_factor}")
        return len(table)

    def clean(self, table: ProductTable) -> Dict[str, Any]:
        """Run zero-price removal, then rescaling. Returns cleaning statistics."""
        self.remove_zero_price(table)
        self.rescale_prices(table)
        return self.get_statistics()

    def get_statistics(self) -> Dict[str, Any]:
        """Get cleaning statistics."""
        return {
            'records_processed': self.records_processed,
            'records_dropped': self.records_dropped,
            'records_cleaned': self.records_processed - self.records_dropped,
            'records_rescaled': self.records_rescaled,
            'success_rate': (self.records_processed - self.records_dropped) / self.records_processed * 100 if self.records_processed > 0 else 0
        }
