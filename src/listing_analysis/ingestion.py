# ========================
# src/listing_analysis/ingestion.py
# ========================

"""
Data Ingestion Module

Reads the product listing CSV in chunks and loads it into a ProductTable.
"""

import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from .table import COLUMNS, PRICE_COLUMNS, ProductTable

logger = logging.getLogger(__name__)


class LoadError(ValueError):
    """Raised when the input file cannot be loaded as product listings."""

    def __init__(self, message: str, row_number: Optional[int] = None):
        self.row_number = row_number
        if row_number is not None:
            message = f"row {row_number}: {message}"
        super().__init__(message)


class CSVReader:
    """
    A memory-efficient CSV reader that reads a file in chunks.
    """

    def __init__(self, file_path, encoding: str = 'utf-8-sig'):
        """
        Initialize the CSV reader.

        Args:
            file_path (str): Path to the CSV file to read
            encoding (str): File encoding; utf-8-sig also strips a leading BOM
        """
        self.file_path = file_path
        self.encoding = encoding
        self.header = []
        logger.info(f"Initialized CSVReader for file: {file_path}")

    def read_in_chunks(self, chunk_size):
        """
        A generator that yields a list of dictionaries for each chunk of data.

        Args:
            chunk_size (int): The number of rows to yield per chunk.

        Yields:
            list[dict]: A list of dictionaries representing a chunk of rows.
        """
        try:
            with open(self.file_path, 'r', newline='', encoding=self.encoding) as f:
                reader = csv.DictReader(f)
                self.header = reader.fieldnames or []
                logger.info(f"CSV header: {self.header}")

                chunk = []
                row_count = 0

                for row in reader:
                    chunk.append(row)
                    row_count += 1

                    if len(chunk) == chunk_size:
                        logger.debug(f"Yielding chunk with {len(chunk)} rows")
                        yield chunk
                        chunk = []

                if chunk:
                    logger.debug(f"Yielding final chunk with {len(chunk)} rows")
                    yield chunk

                logger.info(f"Total rows read: {row_count}")

        except FileNotFoundError:
            logger.error(f"File '{self.file_path}' was not found")
            raise
        except UnicodeDecodeError as e:
            logger.error(f"Encoding error reading '{self.file_path}' as {self.encoding}: {e}")
            raise


class ProductLoader:
    """
    Loads a product listing CSV into a ProductTable.

    The load is all-or-nothing: the first malformed row raises LoadError
    and no table is returned.
    """

    # Accepted header spellings, keyed by the lower-cased header text
    HEADER_ALIASES = {
        'sku_id': 'sku_id', 'skuid': 'sku_id',
        'category': 'category',
        'name': 'name',
        'mrp': 'mrp',
        'discount_percent': 'discount_percent', 'discountpercent': 'discount_percent',
        'available_quantity': 'available_quantity', 'availablequantity': 'available_quantity',
        'discounted_selling_price': 'discounted_selling_price',
        'discountedsellingprice': 'discounted_selling_price',
        'weight_in_gms': 'weight_in_gms', 'weightingms': 'weight_in_gms',
        'out_of_stock': 'out_of_stock', 'outofstock': 'out_of_stock',
        'quantity': 'quantity',
    }

    TRUE_VALUES = {'true', 't', 'yes', 'y', '1'}
    FALSE_VALUES = {'false', 'f', 'no', 'n', '0'}

    DECIMAL_COLUMNS = ['mrp', 'discount_percent', 'discounted_selling_price']
    INTEGER_COLUMNS = ['available_quantity', 'weight_in_gms', 'quantity']

    # Values of 10**12 or more do not fit a listing price column
    MAX_INTEGER_DIGITS = 12

    def __init__(self, file_path: str, chunk_size: int = 1000, encoding: str = 'utf-8-sig'):
        self.file_path = file_path
        self.chunk_size = chunk_size
        self.reader = CSVReader(file_path, encoding=encoding)
        self.column_map: Dict[str, str] = {}

    def load(self) -> ProductTable:
        """
        Read the whole file into a new table.

        Returns:
            ProductTable: Table with one row per data line, sku_id in file order.

        Raises:
            LoadError: On a bad header or any malformed row.
            FileNotFoundError: If the input file does not exist.
        """
        table = ProductTable()
        row_number = 0

        for chunk in self.reader.read_in_chunks(self.chunk_size):
            if not self.column_map:
                self.column_map = self._map_header(self.reader.header)

            for raw in chunk:
                row_number += 1
                table.insert(self.parse_row(raw, row_number))

            logger.debug(f"Loaded {row_number} rows so far")

        if not self.column_map:
            # Empty file or header-only file
            self.column_map = self._map_header(self.reader.header)

        logger.info(f"Loaded {len(table)} product listings from {self.file_path}")
        return table

    def _map_header(self, header: List[str]) -> Dict[str, str]:
        """Map raw header names to schema columns, failing on missing columns."""
        if not header:
            raise LoadError(f"'{self.file_path}' has no header row")

        column_map = {}
        for raw_name in header:
            column = self.HEADER_ALIASES.get(raw_name.strip().lower())
            if column is None:
                raise LoadError(f"Unknown column in header: '{raw_name}'")
            if column in column_map.values():
                raise LoadError(f"Duplicate column in header: '{raw_name}'")
            column_map[raw_name] = column

        missing = [c for c in COLUMNS if c != 'sku_id' and c not in column_map.values()]
        if missing:
            raise LoadError(f"Header is missing columns: {', '.join(missing)}")

        if 'sku_id' in column_map.values():
            logger.debug("Ignoring sku_id column in input; ids are assigned on load")

        return column_map

    def parse_row(self, raw: Dict[Any, Any], row_number: int) -> Dict[str, Any]:
        """
        Convert one raw CSV row into typed column values.

        Args:
            raw (dict): Row as produced by csv.DictReader
            row_number (int): 1-based data row number, for error messages

        Returns:
            dict: Typed record without sku_id
        """
        # DictReader files surplus fields under None and pads short rows with None
        if None in raw or any(value is None for value in raw.values()):
            raise LoadError(
                f"expected {len(self.column_map)} fields", row_number
            )

        values = {self.column_map[key]: value.strip() for key, value in raw.items()}
        record: Dict[str, Any] = {}

        try:
            record['category'] = values['category'] or None
            record['name'] = values['name']
            if not record['name']:
                raise ValueError("name is required")

            for column in self.DECIMAL_COLUMNS:
                record[column] = self._to_decimal(values[column])
            for column in PRICE_COLUMNS:
                if record[column] is not None and record[column] < 0:
                    raise ValueError(f"{column} must not be negative: '{values[column]}'")
            for column in self.INTEGER_COLUMNS:
                record[column] = self._to_int(values[column])
            record['out_of_stock'] = self._to_bool(values['out_of_stock'])
        except ValueError as e:
            raise LoadError(str(e), row_number) from e

        return record

    @staticmethod
    def _to_decimal(value: str) -> Optional[Decimal]:
        if value == '':
            return None
        try:
            number = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"not a number: '{value}'")
        if not number.is_finite():
            raise ValueError(f"not a finite number: '{value}'")
        if number.adjusted() >= ProductLoader.MAX_INTEGER_DIGITS:
            raise ValueError(f"number out of range: '{value}'")
        return number

    @staticmethod
    def _to_int(value: str) -> Optional[int]:
        if value == '':
            return None
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"not an integer: '{value}'")

    @classmethod
    def _to_bool(cls, value: str) -> Optional[bool]:
        if value == '':
            return None
        lowered = value.lower()
        if lowered in cls.TRUE_VALUES:
            return True
        if lowered in cls.FALSE_VALUES:
            return False
        raise ValueError(f"not a boolean: '{value}'")
