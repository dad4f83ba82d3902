# ========================
# src/listing_analysis/aggregation.py
# ========================

"""
Data Aggregation Module

The battery of read-only insight queries run over the cleaned product table.
Every query takes the table and returns a list of records; none of them
modifies the table or depends on another query's output.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Any, Callable, Dict, Hashable, List, Tuple

from .bands import (
    PRICING_STRATEGY_BANDS,
    VALUE_CATEGORY_BANDS,
    WEIGHT_SEGMENT_BANDS,
    classify,
    segment_rank,
)
from .numeric import (
    avg_non_null,
    multiply,
    null_high,
    percentage,
    round_half_up,
    sum_non_null,
)
from .table import ProductTable

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def _gt(value, threshold) -> bool:
    return value is not None and value > threshold


def _lt(value, threshold) -> bool:
    return value is not None and value < threshold


def _distinct(records: List[Record]) -> List[Record]:
    """Drop records whose values repeat an earlier record, keeping the first."""
    seen = set()
    unique = []
    for record in records:
        key = tuple(record.values())
        if key not in seen:
            seen.add(key)
            unique.append(record)
    return unique


def _order(records: List[Record], *keys: Tuple[str, bool]) -> List[Record]:
    """
    Sort by (column, descending) keys, most significant first.
    Nulls sort as the highest value.
    """
    ordered = list(records)
    for column, descending in reversed(keys):
        ordered.sort(key=lambda r: null_high(r[column]), reverse=descending)
    return ordered


def _group(rows, key: Callable[[Record], Hashable]) -> Dict[Hashable, List[Record]]:
    groups = defaultdict(list)
    for row in rows:
        groups[key(row)].append(row)
    return groups


class InsightAggregator:
    """
    Runs the fixed set of insight queries over a cleaned ProductTable.

    Filter thresholds are part of each query's definition; only the
    result limits are configurable.
    """

    HIGH_VALUE_MRP = Decimal('300')
    PREMIUM_MRP = Decimal('500')
    LOW_DISCOUNT_PERCENT = Decimal('10')
    MIN_CATEGORY_PRODUCTS = 50
    MIN_VALUE_WEIGHT_GMS = 100

    def __init__(self,
                 top_discounts_limit: int = 10,
                 high_value_oos_limit: int = 15,
                 category_discount_limit: int = 5,
                 value_for_money_limit: int = 20):
        """
        Initialize the insight aggregator.

        Args:
            top_discounts_limit (int): Rows returned by top_discounts
            high_value_oos_limit (int): Rows returned by high_value_out_of_stock
            category_discount_limit (int): Categories returned by category_discount_performance
            value_for_money_limit (int): Rows returned by value_for_money
        """
        self.top_discounts_limit = top_discounts_limit
        self.high_value_oos_limit = high_value_oos_limit
        self.category_discount_limit = category_discount_limit
        self.value_for_money_limit = value_for_money_limit
        logger.info(
            f"InsightAggregator initialized with limits: top_discounts={top_discounts_limit}, "
            f"high_value_oos={high_value_oos_limit}, category_discount={category_discount_limit}, "
            f"value_for_money={value_for_money_limit}"
        )

    def top_discounts(self, table: ProductTable) -> List[Record]:
        """Listings with the deepest discounts and the rupee saving on each."""
        records = [
            {
                'name': row['name'],
                'mrp': row['mrp'],
                'discount_percent': row['discount_percent'],
                'discounted_selling_price': row['discounted_selling_price'],
                'savings': round_half_up(self._difference(row['mrp'], row['discounted_selling_price'])),
            }
            for row in table
        ]
        records = _order(_distinct(records), ('discount_percent', True))
        return records[:self.top_discounts_limit]

    def high_value_out_of_stock(self, table: ProductTable) -> List[Record]:
        """Out-of-stock listings above 300 MRP, ranked by the stock value they tie up."""
        records = [
            {
                'name': row['name'],
                'mrp': row['mrp'],
                'available_quantity': row['available_quantity'],
                'potential_loss': round_half_up(multiply(row['mrp'], row['available_quantity'])),
            }
            for row in table
            if row['out_of_stock'] is True and _gt(row['mrp'], self.HIGH_VALUE_MRP)
        ]
        records = _order(_distinct(records), ('potential_loss', True))
        return records[:self.high_value_oos_limit]

    def category_revenue(self, table: ProductTable) -> List[Record]:
        """Potential revenue of in-stock inventory per category."""
        in_stock = (row for row in table if row['out_of_stock'] is False)
        records = []
        for category, rows in _group(in_stock, lambda r: r['category']).items():
            records.append({
                'category': category,
                'total_products': len(rows),
                'total_stock': sum_non_null(r['available_quantity'] for r in rows),
                'potential_revenue': round_half_up(sum_non_null(
                    multiply(r['discounted_selling_price'], r['available_quantity']) for r in rows
                )),
                'avg_selling_price': round_half_up(avg_non_null(r['discounted_selling_price'] for r in rows)),
            })
        return _order(records, ('potential_revenue', True))

    def premium_low_discount(self, table: ProductTable) -> List[Record]:
        """Listings above 500 MRP discounted by less than 10%, labelled by pricing strategy."""
        records = [
            {
                'name': row['name'],
                'mrp': row['mrp'],
                'discount_percent': row['discount_percent'],
                'pricing_strategy': classify(row['discount_percent'], PRICING_STRATEGY_BANDS).value,
            }
            for row in table
            if _gt(row['mrp'], self.PREMIUM_MRP) and _lt(row['discount_percent'], self.LOW_DISCOUNT_PERCENT)
        ]
        return _order(_distinct(records), ('mrp', True), ('discount_percent', False))

    def category_discount_performance(self, table: ProductTable) -> List[Record]:
        """Categories with at least 50 listings, ranked by average discount."""
        records = []
        for category, rows in _group(table, lambda r: r['category']).items():
            if len(rows) < self.MIN_CATEGORY_PRODUCTS:
                continue
            records.append({
                'category': category,
                'total_products': len(rows),
                'avg_discount': round_half_up(avg_non_null(r['discount_percent'] for r in rows)),
                'avg_mrp': round_half_up(avg_non_null(r['mrp'] for r in rows)),
                'avg_selling_price': round_half_up(avg_non_null(r['discounted_selling_price'] for r in rows)),
            })
        records = _order(records, ('avg_discount', True))
        return records[:self.category_discount_limit]

    def value_for_money(self, table: ProductTable) -> List[Record]:
        """Cheapest listings per gram among items of 100 g or more."""
        records = []
        for row in table:
            weight = row['weight_in_gms']
            price = row['discounted_selling_price']
            # Weight floor is checked before dividing by it
            if weight is None or weight < self.MIN_VALUE_WEIGHT_GMS or not _gt(price, 0):
                continue
            price_per_gram = price / weight
            records.append({
                'name': row['name'],
                'weight_in_gms': weight,
                'discounted_selling_price': price,
                'price_per_gram': round_half_up(price_per_gram),
                'value_category': classify(price_per_gram, VALUE_CATEGORY_BANDS).value,
            })
        records = _order(_distinct(records), ('price_per_gram', False))
        return records[:self.value_for_money_limit]

    def weight_segmentation(self, table: ProductTable) -> List[Record]:
        """Listing count, average price and discount per weight segment, Mini to Bulk."""
        weighed = (row for row in table if row['weight_in_gms'] is not None)
        groups = _group(weighed, lambda r: classify(r['weight_in_gms'], WEIGHT_SEGMENT_BANDS))
        return [
            {
                'weight_category': segment.value,
                'product_count': len(groups[segment]),
                'avg_price': round_half_up(avg_non_null(r['discounted_selling_price'] for r in groups[segment])),
                'avg_discount': round_half_up(avg_non_null(r['discount_percent'] for r in groups[segment])),
            }
            for segment in sorted(groups, key=segment_rank)
        ]

    def inventory_weight(self, table: ProductTable) -> List[Record]:
        """Physical weight of stock on hand per category."""
        stocked = (
            row for row in table
            if row['weight_in_gms'] is not None and _gt(row['available_quantity'], 0)
        )
        records = []
        for category, rows in _group(stocked, lambda r: r['category']).items():
            total_grams = sum(r['weight_in_gms'] * r['available_quantity'] for r in rows)
            records.append({
                'category': category,
                'product_count': len({r['name'] for r in rows}),
                'total_stock': sum(r['available_quantity'] for r in rows),
                'total_weight_kg': round_half_up(Decimal(total_grams) / 1000),
                'avg_weight': round_half_up(avg_non_null(r['weight_in_gms'] for r in rows)),
            })
        return _order(records, ('total_weight_kg', True))

    def dashboard_summary(self, table: ProductTable) -> List[Record]:
        """
        One line per category: stock health, average discount, in-stock revenue
        and that revenue's share of the overall in-stock revenue.
        """
        records = []
        for category, rows in _group(table, lambda r: r['category']).items():
            in_stock = [r for r in rows if r['out_of_stock'] is False]
            revenue = sum_non_null(
                [multiply(r['discounted_selling_price'], r['available_quantity']) for r in in_stock] +
                [Decimal('0')] * (len(rows) - len(in_stock))
            )
            records.append({
                'category': category,
                'total_products': len(rows),
                'in_stock_pct': percentage(len(in_stock), len(rows)),
                'avg_discount': round_half_up(avg_non_null(r['discount_percent'] for r in rows)),
                'revenue': revenue,
            })

        total_revenue = sum_non_null(r['revenue'] for r in records)
        for record in records:
            record['revenue_share_pct'] = percentage(record['revenue'], total_revenue)
            record['revenue'] = round_half_up(record['revenue'])

        return _order(records, ('revenue', True))

    def run_all(self, table: ProductTable) -> Dict[str, List[Record]]:
        """
        Run every insight query against the table.

        Returns:
            dict: Query name -> list of result records
        """
        logger.info(f"Running insight queries over {len(table)} listings...")
        queries = [
            ('top_discounts', self.top_discounts),
            ('high_value_out_of_stock', self.high_value_out_of_stock),
            ('category_revenue', self.category_revenue),
            ('premium_low_discount', self.premium_low_discount),
            ('category_discount_performance', self.category_discount_performance),
            ('value_for_money', self.value_for_money),
            ('weight_segmentation', self.weight_segmentation),
            ('inventory_weight', self.inventory_weight),
            ('dashboard_summary', self.dashboard_summary),
        ]

        results = {}
        for name, query in queries:
            results[name] = query(table)
            logger.info(f"  {name}: {len(results[name])} rows")
        return results

    @staticmethod
    def _difference(minuend, subtrahend):
        if minuend is None or subtrahend is None:
            return None
        return minuend - subtrahend
