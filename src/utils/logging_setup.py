# ========================
# src/utils/logging_setup.py
# ========================

"""
Logging Configuration

Centralized logging setup for the wrangler and its walkthrough script.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str = "INFO",
                  log_file: Optional[str] = None,
                  log_dir: str = "logs") -> Optional[Path]:
    """
    Set up logging configuration for the wrangler.

    Args:
        log_level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file (str): Optional log file name, created under log_dir
        log_dir (str): Directory for log files

    Returns:
        Path or None: The log file path when file logging is enabled
    """
    level = getattr(logging, log_level.upper())
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file else level)
    root_logger.handlers.clear()

    file_path = None
    for handler in _build_handlers(level, log_file, log_dir):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
        if isinstance(handler, logging.FileHandler):
            file_path = Path(handler.baseFilename)

    if file_path is not None:
        logging.info(f"Logging to file: {file_path}")
    logging.info(f"Logging initialized - Level: {log_level}")
    return file_path


def _build_handlers(level: int, log_file: Optional[str], log_dir: str) -> List[logging.Handler]:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    handlers: List[logging.Handler] = [console_handler]

    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path / log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # File gets all messages
        handlers.append(file_handler)

    return handlers
