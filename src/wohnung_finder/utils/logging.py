"""Logging configuration for the wohnung finder."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(log_level: Optional[str] = None, log_dir: str = "./logs") -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                   Defaults to LOG_LEVEL env var or INFO.
        log_dir: A daily log file is written here if the directory exists
    """
    level = log_level or os.getenv("LOG_LEVEL", "INFO")
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Calling twice (CLI + web app factory) must not duplicate output
    for handler in list(root_logger.handlers):
        if getattr(handler, "_wohnung_finder", False):
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler._wohnung_finder = True
    root_logger.addHandler(console_handler)

    if Path(log_dir).exists():
        log_file = Path(log_dir) / f"wohnung_finder_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler._wohnung_finder = True
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    for name in ("urllib3", "requests", "apscheduler", "werkzeug"):
        logging.getLogger(name).setLevel(logging.WARNING)
