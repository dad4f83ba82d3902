# ========================
# src/listing_analysis/__init__.py
# ========================

"""
Listing Analysis Package

Core components of the product listing insights pipeline:
- table: The flat product listing table
- ingestion: Chunked CSV reading and typed loading
- validation: Read-only data-quality profiling
- cleaning: Zero-price removal and paise-to-rupee conversion
- aggregation: The insight query battery
- storage: JSON report output
- orchestrator: Pipeline coordination
"""

from .table import ProductTable
from .ingestion import CSVReader, LoadError, ProductLoader
from .validation import DataValidator
from .cleaning import DataCleaner
from .aggregation import InsightAggregator
from .storage import DataSaver
from .orchestrator import InsightPipeline

__all__ = [
    'ProductTable',
    'CSVReader',
    'LoadError',
    'ProductLoader',
    'DataValidator',
    'DataCleaner',
    'InsightAggregator',
    'DataSaver',
    'InsightPipeline'
]

__version__ = "1.0.0"
