# ========================
# eventlab/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the event pipeline with environment support.
"""

import os
from typing import Dict, Any, Optional


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(value)


class Config:
    """
    Configuration class for the event pipeline.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # Input
        self.DEFAULT_INPUT_FILE = os.getenv('EVENTLAB_INPUT_FILE', 'data/raw/events.csv')
        self.MAX_UPLOAD_MB = int(os.getenv('MAX_UPLOAD_MB', '20'))

        # Sample data generation
        self.SAMPLE_ROWS = int(os.getenv('SAMPLE_ROWS', '500'))
        self.SAMPLE_USERS = int(os.getenv('SAMPLE_USERS', '50'))
        self.SAMPLE_SEED = _optional_int(os.getenv('SAMPLE_SEED'))

        # Display
        self.PREVIEW_ROWS = int(os.getenv('PREVIEW_ROWS', '10'))

        # API server
        self.API_HOST = os.getenv('API_HOST', '0.0.0.0')
        self.API_PORT = int(os.getenv('API_PORT', '8000'))

        # Logging
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
        self.LOG_DIR = os.getenv('LOG_DIR', 'logs')

        # Override with provided config
        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['sample_rows'] = self.SAMPLE_ROWS > 0
        validations['sample_users'] = self.SAMPLE_USERS > 0
        validations['preview_rows'] = self.PREVIEW_ROWS >= 0
        validations['max_upload'] = self.MAX_UPLOAD_MB > 0
        validations['api_port'] = 1000 <= self.API_PORT <= 65535

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = self.LOG_LEVEL.upper() in valid_log_levels

        return validations

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            attr: getattr(self, attr)
            for attr in dir(self)
            if attr.isupper() and not attr.startswith('_')
        }

    def __str__(self) -> str:
        """String representation of configuration."""
        lines = ["Configuration Settings:"]
        for key, value in sorted(self.to_dict().items()):
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)
