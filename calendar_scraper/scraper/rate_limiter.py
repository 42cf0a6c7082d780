"""Shared request throttle for respectful calendar crawling."""

import random
import threading
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from ..config import RateLimitConfig
from ..utils.logging_config import get_logger

logger = get_logger()


class RateLimiter:
    """
    Throttles requests across every thread that shares this instance.

    Two guarantees hold regardless of how many sequences run at once:
    at most ``parallelism`` requests are in flight per domain, and
    consecutive requests are separated by the base delay plus a random
    jitter drawn uniformly from ``[0, jitter_seconds]``.
    """

    def __init__(self, config: Optional[RateLimitConfig] = None):
        """
        Initialize rate limiter.

        Args:
            config: Rate limit configuration
        """
        self.config = config or RateLimitConfig()
        self._last_request_time: float = 0
        self._request_count: int = 0
        self._lock = threading.Lock()
        self._domains_lock = threading.Lock()
        self._domain_slots: Dict[str, threading.BoundedSemaphore] = {}

    def next_delay(self) -> float:
        """Minimum gap before the next request, jitter included."""
        jitter = 0.0
        if self.config.jitter_seconds > 0:
            jitter = random.uniform(0, self.config.jitter_seconds)
        return self.config.delay_seconds + jitter

    def wait(self) -> None:
        """Block until the next request may be sent."""
        with self._lock:
            delay = self.next_delay()
            elapsed = time.time() - self._last_request_time

            if elapsed < delay:
                sleep_time = delay - elapsed
                logger.debug(f"Rate limiting: sleeping {sleep_time:.2f}s")
                time.sleep(sleep_time)

            self._last_request_time = time.time()
            self._request_count += 1

    def _slot_for(self, domain: str) -> threading.BoundedSemaphore:
        with self._domains_lock:
            slot = self._domain_slots.get(domain)
            if slot is None:
                slot = threading.BoundedSemaphore(max(1, self.config.parallelism))
                self._domain_slots[domain] = slot
            return slot

    @contextmanager
    def slot(self, domain: str) -> Iterator[None]:
        """
        Hold a request slot for ``domain`` for the duration of the block.

        The delay is applied after the slot is acquired, so the gap is
        measured between dispatches rather than between callers queueing.
        """
        semaphore = self._slot_for(domain)
        with semaphore:
            self.wait()
            yield

    def reset(self) -> None:
        """Reset rate limiter state."""
        with self._lock:
            self._last_request_time = 0
            self._request_count = 0

    @property
    def request_count(self) -> int:
        """Get total request count."""
        return self._request_count
