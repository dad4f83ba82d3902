# ========================
# src/listing_analysis/bands.py
# ========================

"""
Threshold Bands

Closed label sets used to bucket listings by discount, price per gram and weight.
Each band list is ordered; the first upper bound the value falls under wins and
the last label catches everything else.
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple, TypeVar

E = TypeVar('E', bound=Enum)


class PricingStrategy(str, Enum):
    PREMIUM_PRICING = "Premium Pricing"
    CONSERVATIVE_DISCOUNT = "Conservative Discount"
    STANDARD_DISCOUNT = "Standard Discount"


class ValueCategory(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    PREMIUM = "Premium"


class WeightSegment(str, Enum):
    MINI = "Mini"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    BULK = "Bulk"


# (exclusive upper bound, label) pairs; None marks the catch-all
PRICING_STRATEGY_BANDS: List[Tuple[Optional[Decimal], PricingStrategy]] = [
    (Decimal('5'), PricingStrategy.PREMIUM_PRICING),
    (Decimal('10'), PricingStrategy.CONSERVATIVE_DISCOUNT),
    (None, PricingStrategy.STANDARD_DISCOUNT),
]

VALUE_CATEGORY_BANDS: List[Tuple[Optional[Decimal], ValueCategory]] = [
    (Decimal('0.1'), ValueCategory.EXCELLENT),
    (Decimal('0.5'), ValueCategory.GOOD),
    (Decimal('1.0'), ValueCategory.AVERAGE),
    (None, ValueCategory.PREMIUM),
]

WEIGHT_SEGMENT_BANDS: List[Tuple[Optional[int], WeightSegment]] = [
    (100, WeightSegment.MINI),
    (500, WeightSegment.SMALL),
    (1000, WeightSegment.MEDIUM),
    (5000, WeightSegment.LARGE),
    (None, WeightSegment.BULK),
]


def classify(value, bands: List[Tuple[Optional[object], E]]) -> Optional[E]:
    """
    Return the label of the first band whose upper bound exceeds value.

    A null value gets no label.
    """
    if value is None:
        return None
    for upper_bound, label in bands:
        if upper_bound is None or value < upper_bound:
            return label
    raise ValueError("Band list has no catch-all entry")


def segment_rank(segment: WeightSegment) -> int:
    """Position of a weight segment in Mini..Bulk order."""
    return list(WeightSegment).index(segment)
