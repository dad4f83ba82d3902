# ========================
# src/listing_analysis/table.py
# ========================

"""
Product Table Module

The single flat table of product listing rows shared by every pipeline stage.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List

logger = logging.getLogger(__name__)

# Column order of a product listing row
COLUMNS = [
    'sku_id',
    'category',
    'name',
    'mrp',
    'discount_percent',
    'available_quantity',
    'discounted_selling_price',
    'weight_in_gms',
    'out_of_stock',
    'quantity',
]

PRICE_COLUMNS = ['mrp', 'discounted_selling_price']


class ProductTable:
    """
    In-memory table of product listing rows.

    Rows are plain dictionaries keyed by COLUMNS. The table owns the
    sku_id counter: ids are assigned on insert in load order and are
    never handed out again, even after the row is deleted.
    """

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.rescale_count = 0
        self._next_sku_id = 1

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a copy of a record and assign it the next sku_id.

        Args:
            record (dict): Column values; any sku_id it carries is replaced.

        Returns:
            dict: The stored row.
        """
        row = {column: record.get(column) for column in COLUMNS}
        row['sku_id'] = self._next_sku_id
        self._next_sku_id += 1
        self.rows.append(row)
        return row

    def delete_where(self, predicate: Callable[[Dict[str, Any]], bool]) -> int:
        """Physically remove every row matching predicate. Returns the number removed."""
        kept = [row for row in self.rows if not predicate(row)]
        removed = len(self.rows) - len(kept)
        self.rows = kept
        logger.debug(f"Deleted {removed} rows, {len(kept)} remaining")
        return removed

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)
