"""Logging configuration for the calendar scraper."""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

# Libraries that are chatty at DEBUG and drown out crawl progress
NOISY_LOGGERS = ("urllib3", "sqlalchemy.engine", "sqlalchemy.pool")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    name: str = "calendar_scraper",
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """
    Configure logging for the scraper.

    Sequences run on worker threads, so the thread name is part of every
    record to keep interleaved course and program output readable.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to log file
        name: Logger name
        quiet: Third-party loggers capped at WARNING

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(threadName)-12s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(threadName)s | %(levelname)-8s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    for noisy in quiet:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


def get_logger(name: str = "calendar_scraper") -> logging.Logger:
    """Get an existing logger by name."""
    return logging.getLogger(name)
