"""Rate-limited page fetcher scoped to the calendar domain."""

from typing import Optional
from urllib.parse import urlparse

import requests

from ..models.records import Page
from ..utils.logging_config import get_logger
from ..utils.exceptions import FetchError, ScopeViolation
from .proxy_rotator import ProxyRotator
from .rate_limiter import RateLimiter

logger = get_logger()


class PageFetcher:
    """Fetches calendar pages one GET at a time through the shared throttle."""

    def __init__(
        self,
        session: requests.Session,
        rate_limiter: RateLimiter,
        allowed_domain: str,
        proxy_rotator: Optional[ProxyRotator] = None,
        timeout: int = 30,
    ):
        """
        Initialize page fetcher.

        Args:
            session: requests session shared by all sequences
            rate_limiter: Process-wide rate limiter
            allowed_domain: The only host requests may target
            proxy_rotator: Optional proxy rotation; None for direct connections
            timeout: Request timeout in seconds
        """
        self.session = session
        self.rate_limiter = rate_limiter
        self.allowed_domain = allowed_domain.lower()
        self.proxy_rotator = proxy_rotator or ProxyRotator()
        self.timeout = timeout

    def check_scope(self, url: str) -> str:
        """
        Return the URL's host if it is the allowed domain.

        Raises:
            ScopeViolation: If the URL targets any other host
        """
        host = (urlparse(url).hostname or "").lower()
        if host != self.allowed_domain:
            raise ScopeViolation(f"{url} is outside {self.allowed_domain}")
        return host

    def is_allowed(self, url: str) -> bool:
        try:
            self.check_scope(url)
        except ScopeViolation:
            return False
        return True

    def fetch(self, url: str) -> Optional[Page]:
        """
        Fetch a single page.

        Args:
            url: Absolute page URL

        Returns:
            The fetched Page, or None if the URL, or the URL a redirect
            ended on, is out of scope

        Raises:
            FetchError: On network failure or an HTTP error status
        """
        try:
            domain = self.check_scope(url)
        except ScopeViolation as e:
            logger.debug(f"Skipping request: {e}")
            return None

        with self.rate_limiter.slot(domain):
            proxies = self.proxy_rotator.next_requests_proxies()
            logger.info(f"Visiting {url}")

            try:
                response = self.session.get(url, timeout=self.timeout, proxies=proxies)
                response.raise_for_status()
            except requests.RequestException as e:
                logger.error(f"Failed to fetch {url}: {e}")
                raise FetchError(f"Failed to fetch page: {e}", url=url) from e

        final_url = response.url or url
        try:
            self.check_scope(final_url)
        except ScopeViolation as e:
            logger.warning(f"Discarding {url}, redirected off-domain: {e}")
            return None

        return Page(
            url=final_url, content=response.text, status_code=response.status_code
        )

