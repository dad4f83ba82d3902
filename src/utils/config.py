# ========================
# src/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the listing insights pipeline with environment support.
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional


class Config:
    """
    Configuration class for the pipeline.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # Input Handling
        self.DEFAULT_CHUNK_SIZE = int(os.getenv('PIPELINE_CHUNK_SIZE', '1000'))
        self.INPUT_ENCODING = os.getenv('PIPELINE_INPUT_ENCODING', 'utf-8-sig')

        # File Paths
        self.DEFAULT_INPUT_FILE = os.getenv('PIPELINE_INPUT_FILE', 'data/raw/product_listings.csv')
        self.DEFAULT_OUTPUT_DIR = os.getenv('PIPELINE_OUTPUT_DIR', 'data/processed')

        # Data Generation Settings
        self.DEFAULT_SAMPLE_ROWS = int(os.getenv('SAMPLE_ROWS', '3000'))

        # Cleaning: prices arrive in paise
        self.PRICE_SCALE_FACTOR = int(os.getenv('PRICE_SCALE_FACTOR', '100'))

        # Insight Result Limits
        self.TOP_DISCOUNTS_LIMIT = int(os.getenv('TOP_DISCOUNTS_LIMIT', '10'))
        self.HIGH_VALUE_OOS_LIMIT = int(os.getenv('HIGH_VALUE_OOS_LIMIT', '15'))
        self.CATEGORY_DISCOUNT_LIMIT = int(os.getenv('CATEGORY_DISCOUNT_LIMIT', '5'))
        self.VALUE_FOR_MONEY_LIMIT = int(os.getenv('VALUE_FOR_MONEY_LIMIT', '20'))

        # Logging Configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
        self.LOG_DIR = os.getenv('LOG_DIR', 'logs')

        # Regional Settings
        self.CURRENCY_SYMBOL = os.getenv('CURRENCY_SYMBOL', '₹')

        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    def get_data_paths(self) -> Dict[str, Path]:
        """Get all configured data paths as Path objects."""
        return {
            'input_file': Path(self.DEFAULT_INPUT_FILE),
            'raw_data_dir': Path(self.DEFAULT_INPUT_FILE).parent,
            'output_dir': Path(self.DEFAULT_OUTPUT_DIR),
            'logs_dir': Path(self.LOG_DIR)
        }

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        for path_name, path in self.get_data_paths().items():
            if path_name.endswith('_dir'):
                path.mkdir(parents=True, exist_ok=True)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['chunk_size'] = self.DEFAULT_CHUNK_SIZE > 0
        validations['sample_rows'] = self.DEFAULT_SAMPLE_ROWS > 0
        validations['price_scale_factor'] = self.PRICE_SCALE_FACTOR > 0
        validations['top_discounts_limit'] = self.TOP_DISCOUNTS_LIMIT > 0
        validations['high_value_oos_limit'] = self.HIGH_VALUE_OOS_LIMIT > 0
        validations['category_discount_limit'] = self.CATEGORY_DISCOUNT_LIMIT > 0
        validations['value_for_money_limit'] = self.VALUE_FOR_MONEY_LIMIT > 0

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = self.LOG_LEVEL.upper() in valid_log_levels

        try:
            ''.encode(self.INPUT_ENCODING)
            validations['input_encoding'] = True
        except LookupError:
            validations['input_encoding'] = False

        return validations

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            attr: getattr(self, attr)
            for attr in dir(self)
            if not attr.startswith('_') and not callable(getattr(self, attr))
        }

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file."""
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, default=str, ensure_ascii=False)

    @classmethod
    def load_from_file(cls, file_path: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)
        return cls(config_dict)

    def __str__(self) -> str:
        lines = ["Configuration Settings:"]
        for key, value in sorted(self.to_dict().items()):
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)
