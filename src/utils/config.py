# ========================
# src/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the table wrangler with environment support.
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional


class Config:
    """
    Configuration class for the wrangling walkthrough.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # File Paths
        self.INPUT_FILE = os.getenv('WRANGLER_INPUT_FILE', 'data/raw/retail_sales.csv')
        self.REGIONS_FILE = os.getenv('WRANGLER_REGIONS_FILE', 'data/raw/region_managers.csv')
        self.OUTPUT_DIR = os.getenv('WRANGLER_OUTPUT_DIR', 'data/processed')

        # Sample Data Generation
        self.SAMPLE_ROWS = int(os.getenv('SAMPLE_ROWS', '1000'))
        self.MISSING_RATE = float(os.getenv('MISSING_RATE', '0.05'))
        self.DUPLICATE_RATE = float(os.getenv('DUPLICATE_RATE', '0.02'))

        # Walkthrough Thresholds
        self.HIGH_VALUE_THRESHOLD = float(os.getenv('HIGH_VALUE_THRESHOLD', '500'))
        self.TOP_ORDERS_LIMIT = int(os.getenv('TOP_ORDERS_LIMIT', '10'))
        self.LOW_DISCOUNT_MAX = float(os.getenv('LOW_DISCOUNT_MAX', '0.2'))
        self.MEDIUM_DISCOUNT_MAX = float(os.getenv('MEDIUM_DISCOUNT_MAX', '0.5'))
        self.UNCLASSIFIED_LABEL = os.getenv('UNCLASSIFIED_LABEL', 'Unclassified')

        # Logging Configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

        # Override with provided config
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
            'input_file': Path(self.INPUT_FILE),
            'regions_file': Path(self.REGIONS_FILE),
            'output_dir': Path(self.OUTPUT_DIR),
            'raw_data_dir': Path(self.INPUT_FILE).parent,
            'logs_dir': Path('logs')
        }

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        paths = self.get_data_paths()
        for path_name, path in paths.items():
            if path_name.endswith('_dir'):
                path.mkdir(parents=True, exist_ok=True)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['sample_rows'] = self.SAMPLE_ROWS > 0
        validations['missing_rate'] = 0.0 <= self.MISSING_RATE < 1.0
        validations['duplicate_rate'] = 0.0 <= self.DUPLICATE_RATE < 1.0
        validations['high_value_threshold'] = self.HIGH_VALUE_THRESHOLD >= 0
        validations['top_orders_limit'] = self.TOP_ORDERS_LIMIT > 0
        validations['discount_bands'] = 0.0 < self.LOW_DISCOUNT_MAX <= self.MEDIUM_DISCOUNT_MAX <= 1.0
        validations['unclassified_label'] = bool(self.UNCLASSIFIED_LABEL)

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = self.LOG_LEVEL.upper() in valid_log_levels

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
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_from_file(cls, file_path: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(file_path, 'r') as f:
            config_dict = json.load(f)
        return cls(config_dict)

    def __str__(self) -> str:
        """String representation of configuration."""
        lines = ["Configuration Settings:"]
        config_dict = self.to_dict()
        for key, value in sorted(config_dict.items()):
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)
