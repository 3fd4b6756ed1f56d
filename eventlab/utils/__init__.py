# ========================
# eventlab/utils/__init__.py
# ========================

"""
Utilities Package

Configuration, logging and sample-data helpers for the event pipeline.
"""

from .config import Config
from .logging_setup import setup_logging, setup_logging_from_config, get_logger
from .data_generator import DataGenerator

__all__ = [
    'Config',
    'setup_logging',
    'setup_logging_from_config',
    'get_logger',
    'DataGenerator'
]
