"""Utility functions and configurations."""

from .logging_config import setup_logging
from .exceptions import (
    ScraperException,
    ScopeViolation,
    FetchError,
    LoadError,
    StoreConflictError,
    FatalInitError,
)

__all__ = [
    "setup_logging",
    "ScraperException",
    "ScopeViolation",
    "FetchError",
    "LoadError",
    "StoreConflictError",
    "FatalInitError",
]
