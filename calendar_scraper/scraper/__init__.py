"""Scraper module for course calendar harvesting."""

from .page_extractor import PageExtractor
from .page_fetcher import PageFetcher
from .pagination import PaginationDriver, SequenceResult, SequenceState
from .proxy_rotator import ProxyRotator
from .rate_limiter import RateLimiter

__all__ = [
    "PageExtractor",
    "PageFetcher",
    "PaginationDriver",
    "ProxyRotator",
    "RateLimiter",
    "SequenceResult",
    "SequenceState",
]
