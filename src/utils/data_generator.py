# ========================
# src/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Generates a realistic product listing CSV (prices in paise) with injected dirt
for exercising the pipeline end to end.
"""

import csv
import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Header of the quick-commerce catalogue export
CSV_HEADER = [
    'Category', 'name', 'mrp', 'discountPercent', 'availableQuantity',
    'discountedSellingPrice', 'weightInGms', 'outOfStock', 'quantity'
]


class DataGenerator:
    """
    Generator for product listing test datasets.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.

        Args:
            seed (int): Random seed for reproducible data generation
        """
        self._random = random.Random(seed)
        self._initialize_catalog()
        logger.info(f"DataGenerator initialized with seed: {seed}")

    def _initialize_catalog(self) -> None:
        """Initialize the product catalogue. Base prices are rupees per pack size listed."""
        self.catalog = [
            {"category": "Fruits & Vegetables", "name": "Onion", "base_price": 40, "weights": [500, 1000, 2000]},
            {"category": "Fruits & Vegetables", "name": "Banana Robusta", "base_price": 60, "weights": [500, 1000]},
            {"category": "Fruits & Vegetables", "name": "Coriander Leaves", "base_price": 15, "weights": [50, 100]},
            {"category": "Cooking Essentials", "name": "Basmati Rice", "base_price": 180, "weights": [1000, 5000, 10000]},
            {"category": "Cooking Essentials", "name": "Sunflower Oil", "base_price": 210, "weights": [1000, 5000]},
            {"category": "Cooking Essentials", "name": "Turmeric Powder", "base_price": 45, "weights": [100, 200, 500]},
            {"category": "Munchies", "name": "Salted Potato Chips", "base_price": 20, "weights": [50, 90, 150]},
            {"category": "Munchies", "name": "Bhujia Sev", "base_price": 55, "weights": [200, 400, 1000]},
            {"category": "Beverages", "name": "Cold Coffee", "base_price": 45, "weights": [180, 250]},
            {"category": "Beverages", "name": "Green Tea Bags", "base_price": 160, "weights": [50, 100]},
            {"category": "Dairy, Bread & Batter", "name": "Toned Milk", "base_price": 28, "weights": [500, 1000]},
            {"category": "Dairy, Bread & Batter", "name": "Paneer", "base_price": 95, "weights": [200, 500]},
            {"category": "Chocolates & Candies", "name": "Dark Chocolate Bar", "base_price": 110, "weights": [40, 80, 150]},
            {"category": "Personal Care", "name": "Argan Oil Shampoo", "base_price": 650, "weights": [340, 650, 1000]},
            {"category": "Personal Care", "name": "Face Serum", "base_price": 799, "weights": [30]},
            {"category": "Home & Cleaning", "name": "Liquid Detergent", "base_price": 320, "weights": [1000, 2000, 5000]},
            {"category": "Health & Hygiene", "name": "Hand Sanitizer", "base_price": 99, "weights": [100, 500]},
            {"category": "Ice Cream & Desserts", "name": "Vanilla Tub", "base_price": 210, "weights": [700, 1000]},
        ]

        # Discount bands (max percent, weight of band)
        self.discount_profiles = [(0, 0.15), (10, 0.35), (25, 0.35), (51, 0.15)]

    def generate_dataset(self,
                         file_path: str,
                         num_rows: int,
                         error_rate: float = 0.1) -> Dict[str, Any]:
        """
        Generate a listing CSV with controlled dirt injection.

        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of rows to generate
            error_rate (float): Fraction of rows with injected dirt

        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} listings with {error_rate:.1%} dirt rate...")

        stats = {
            'total_rows': num_rows,
            'error_rate': error_rate,
            'records_with_errors': 0,
            'error_types': {}
        }

        Path(file_path).parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)

            for _ in range(num_rows):
                writer.writerow(self._generate_single_record(error_rate, stats))

        stats['error_rate_actual'] = stats['records_with_errors'] / num_rows if num_rows else 0.0

        logger.info(f"Dataset generated: {file_path}")
        logger.info(f"Dirt breakdown: {stats['error_types']}")
        return stats

    def _generate_single_record(self, error_rate: float, stats: Dict[str, Any]) -> List[Any]:
        """Generate a single listing row, prices in paise."""
        product = self._random.choice(self.catalog)
        weight = self._random.choice(product["weights"])

        scale = max(weight / product["weights"][0], 1)
        mrp_rupees = round(product["base_price"] * scale ** 0.9 * self._random.uniform(0.9, 1.1))
        mrp = mrp_rupees * 100

        upper, = self._random.choices(
            [band for band, _ in self.discount_profiles],
            weights=[w for _, w in self.discount_profiles]
        )
        discount = self._random.randint(0, upper)
        selling_price = round(mrp * (100 - discount) / 100)

        out_of_stock = self._random.random() < 0.12
        available = 0 if out_of_stock and self._random.random() < 0.5 else self._random.randint(0, 6)

        record = {
            'category': product["category"],
            'name': product["name"],
            'mrp': mrp,
            'discount': discount,
            'available': available,
            'selling_price': selling_price,
            'weight': weight,
            'out_of_stock': 'TRUE' if out_of_stock else 'FALSE',
            'quantity': self._random.choice([1, 1, 1, 2, 4]),
        }

        if self._random.random() < error_rate:
            stats['records_with_errors'] += 1
            self._inject_error(record, stats)

        return [
            record['category'], record['name'], record['mrp'], record['discount'],
            record['available'], record['selling_price'], record['weight'],
            record['out_of_stock'], record['quantity']
        ]

    def _inject_error(self, record: Dict[str, Any], stats: Dict[str, Any]) -> None:
        """Inject one kind of dirt into the record."""
        error_type = self._random.choice([
            'zero_price', 'zero_selling_price', 'missing_category', 'missing_weight'
        ])

        if error_type == 'zero_price':
            record['mrp'] = 0
            record['selling_price'] = 0
            record['discount'] = 0
        elif error_type == 'zero_selling_price':
            record['selling_price'] = 0
        elif error_type == 'missing_category':
            record['category'] = ''
        elif error_type == 'missing_weight':
            record['weight'] = ''

        stats['error_types'][error_type] = stats['error_types'].get(error_type, 0) + 1
