# ========================
# tests/test_ingestion.py
# ========================

import unittest
import tempfile
import os
import sys
import csv
from decimal import Decimal

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.listing_analysis.ingestion import CSVReader, LoadError, ProductLoader

HEADER = [
    'Category', 'name', 'mrp', 'discountPercent', 'availableQuantity',
    'discountedSellingPrice', 'weightInGms', 'outOfStock', 'quantity'
]


def write_csv(rows, encoding='utf-8'):
    with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False,
                                     newline='', encoding=encoding) as f:
        writer = csv.writer(f)
        writer.writerows(rows)
        return f.name


class TestCSVReader(unittest.TestCase):
    """Test chunked CSV reading."""

    def test_csv_reader_chunked_processing(self):
        """Test that CSVReader properly chunks data."""
        path = write_csv([
            HEADER,
            ['Munchies', 'Chips', '2000', '10', '3', '1800', '50', 'FALSE', '1'],
            ['Munchies', 'Sev', '5500', '5', '1', '5225', '200', 'FALSE', '1'],
            ['Beverages', 'Cola', '4000', '0', '0', '4000', '750', 'TRUE', '1'],
        ])

        try:
            reader = CSVReader(path)
            chunks = list(reader.read_in_chunks(chunk_size=2))

            self.assertEqual(len(chunks), 2)
            self.assertEqual(len(chunks[0]), 2)
            self.assertEqual(len(chunks[1]), 1)
            self.assertEqual(reader.header, HEADER)
            self.assertEqual(chunks[0][0]['name'], 'Chips')
        finally:
            os.unlink(path)

    def test_csv_reader_file_not_found(self):
        reader = CSVReader("non_existent_file.csv")

        with self.assertRaises(FileNotFoundError):
            list(reader.read_in_chunks(chunk_size=10))

    def test_csv_reader_strips_bom(self):
        """A BOM from a spreadsheet export must not leak into the first header."""
        path = write_csv([HEADER], encoding='utf-8-sig')

        try:
            reader = CSVReader(path)
            list(reader.read_in_chunks(chunk_size=10))
            self.assertEqual(reader.header[0], 'Category')
        finally:
            os.unlink(path)


class TestProductLoader(unittest.TestCase):
    """Test typed loading into a ProductTable."""

    def _load(self, rows, chunk_size=2):
        path = write_csv([HEADER] + rows)
        try:
            return ProductLoader(path, chunk_size=chunk_size).load()
        finally:
            os.unlink(path)

    def test_load_types_and_sku_ids(self):
        table = self._load([
            ['Munchies', 'Chips', '2000', '10', '3', '1800', '50', 'FALSE', '1'],
            ['Munchies', 'Chips', '3500.50', '12.5', '0', '3063', '90', 'true', '2'],
            ['Beverages', 'Cola', '4000', '0', '7', '4000', '', 'f', '1'],
        ])

        self.assertEqual(len(table), 3)
        self.assertEqual([row['sku_id'] for row in table], [1, 2, 3])

        first, second, third = table.rows
        self.assertEqual(first['category'], 'Munchies')
        self.assertEqual(first['mrp'], Decimal('2000'))
        self.assertIsInstance(first['mrp'], Decimal)
        self.assertEqual(first['available_quantity'], 3)
        self.assertEqual(first['weight_in_gms'], 50)
        self.assertIs(first['out_of_stock'], False)
        self.assertEqual(second['mrp'], Decimal('3500.50'))
        self.assertEqual(second['discount_percent'], Decimal('12.5'))
        self.assertIs(second['out_of_stock'], True)
        self.assertIsNone(third['weight_in_gms'])

    def test_snake_case_header_and_ignored_sku_id(self):
        path = write_csv([
            ['sku_id', 'category', 'name', 'mrp', 'discount_percent', 'available_quantity',
             'discounted_selling_price', 'weight_in_gms', 'out_of_stock', 'quantity'],
            ['900', 'Dairy', 'Milk', '2800', '0', '4', '2800', '500', 'FALSE', '1'],
        ])

        try:
            table = ProductLoader(path).load()
        finally:
            os.unlink(path)

        self.assertEqual(table.rows[0]['sku_id'], 1)
        self.assertEqual(table.rows[0]['name'], 'Milk')

    def test_empty_cells_load_as_null(self):
        table = self._load([
            ['', 'Loose Item', '', '', '', '', '', '', ''],
        ])
        row = table.rows[0]

        for column in ['category', 'mrp', 'discount_percent', 'available_quantity',
                       'discounted_selling_price', 'weight_in_gms', 'out_of_stock', 'quantity']:
            self.assertIsNone(row[column], column)

    def test_non_numeric_price_fails_whole_load(self):
        with self.assertRaises(LoadError) as ctx:
            self._load([
                ['Munchies', 'Chips', '2000', '10', '3', '1800', '50', 'FALSE', '1'],
                ['Munchies', 'Sev', 'Rs 55', '5', '1', '5225', '200', 'FALSE', '1'],
            ])

        self.assertEqual(ctx.exception.row_number, 2)

    def test_out_of_range_price_fails_whole_load(self):
        with self.assertRaises(LoadError) as ctx:
            self._load([
                ['Munchies', 'Chips', '0', '10', '3', '1800', '50', 'FALSE', '1'],
                ['Munchies', 'Sev', '1e40', '5', '1', '5225', '200', 'FALSE', '1'],
            ])

        self.assertEqual(ctx.exception.row_number, 2)
        self.assertIn('out of range', str(ctx.exception))

    def test_largest_accepted_price_loads(self):
        table = self._load([['Munchies', 'Chips', '999999999999.99', '10', '3', '1800', '50', 'FALSE', '1']])
        self.assertEqual(table.rows[0]['mrp'], Decimal('999999999999.99'))

    def test_negative_price_fails_whole_load(self):
        with self.assertRaises(LoadError) as ctx:
            self._load([['Munchies', 'Chips', '-500', '10', '3', '1800', '50', 'FALSE', '1']])
        self.assertIn('mrp must not be negative', str(ctx.exception))

        with self.assertRaises(LoadError):
            self._load([['Munchies', 'Chips', '2000', '10', '3', '-1800', '50', 'FALSE', '1']])

    def test_wrong_column_count_fails(self):
        with self.assertRaises(LoadError):
            self._load([['Munchies', 'Chips', '2000', '10']])

        with self.assertRaises(LoadError):
            self._load([['Munchies', 'Chips', '2000', '10', '3', '1800', '50', 'FALSE', '1', 'extra']])

    def test_missing_name_fails(self):
        with self.assertRaises(LoadError):
            self._load([['Munchies', '', '2000', '10', '3', '1800', '50', 'FALSE', '1']])

    def test_bad_boolean_fails(self):
        with self.assertRaises(LoadError):
            self._load([['Munchies', 'Chips', '2000', '10', '3', '1800', '50', 'maybe', '1']])

    def test_missing_header_column_fails(self):
        path = write_csv([HEADER[:-1], ['Munchies', 'Chips', '2000', '10', '3', '1800', '50', 'FALSE']])
        try:
            with self.assertRaises(LoadError):
                ProductLoader(path).load()
        finally:
            os.unlink(path)

    def test_header_only_file_loads_empty_table(self):
        table = self._load([])
        self.assertEqual(len(table), 0)

    def test_empty_file_fails(self):
        path = write_csv([])
        try:
            with self.assertRaises(LoadError):
                ProductLoader(path).load()
        finally:
            os.unlink(path)


if __name__ == '__main__':
    unittest.main()
