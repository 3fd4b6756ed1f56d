# ========================
# eventlab/utils/logging_setup.py
# ========================

"""
Logging Configuration

Shared logging for the event pipeline CLI and API server. Both entry points
configure the root logger from a Config so LOG_LEVEL and LOG_DIR behave the
same everywhere.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Upload parsing and per-request access lines drown out pipeline progress
QUIET_LOGGERS = ('multipart', 'python_multipart', 'uvicorn.access')


def resolve_level(log_level: str) -> int:
    """
    Map a level name such as "debug" to its logging constant.

    Unknown names resolve to INFO rather than failing startup on a bad
    LOG_LEVEL environment value.
    """
    level = logging.getLevelName(str(log_level).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: str = "INFO",
                  log_file: Optional[str] = None,
                  log_dir: str = "logs") -> Optional[Path]:
    """
    Set up root logging for a pipeline run or the API server.

    Args:
        log_level (str): Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file (str): Optional file name under log_dir; the file records DEBUG and up
        log_dir (str): Directory for log files, created only when log_file is set

    Returns:
        Path: The log file path, or None when logging to the console only
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    level = resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_path = None
    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_path = log_path / log_file
        file_handler = logging.FileHandler(file_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Root must pass DEBUG through when a file wants it
    root_logger.setLevel(logging.DEBUG if file_path else level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if level == logging.INFO and str(log_level).strip().upper() != 'INFO':
        logging.warning(f"Unknown log level '{log_level}', using INFO")
    logging.info(f"Logging initialized - Level: {logging.getLevelName(level)}"
                 + (f", file: {file_path}" if file_path else ""))
    return file_path


def setup_logging_from_config(config, log_file: Optional[str] = None) -> Optional[Path]:
    """Configure logging from a Config's LOG_LEVEL and LOG_DIR."""
    return setup_logging(log_level=config.LOG_LEVEL, log_file=log_file, log_dir=config.LOG_DIR)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
