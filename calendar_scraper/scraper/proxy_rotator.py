"""Round-robin rotation over upstream proxy endpoints."""

import threading
from typing import Dict, List, Optional, Sequence
from urllib.parse import urlparse

import requests

from ..utils.logging_config import get_logger
from ..utils.exceptions import FatalInitError

logger = get_logger()


class ProxyRotator:
    """Hands out proxies in order, wrapping around, shared by all fetchers."""

    SUPPORTED_SCHEMES = ("http", "https")

    def __init__(self, proxy_urls: Optional[Sequence[str]] = None):
        """
        Initialize proxy rotator.

        Args:
            proxy_urls: Ordered proxy endpoints (scheme://host:port).
                An empty sequence means direct connections.

        Raises:
            FatalInitError: If any endpoint is malformed
        """
        self._proxies: List[str] = [self.validate(url) for url in proxy_urls or []]
        self._index = 0
        self._lock = threading.Lock()

    @classmethod
    def validate(cls, proxy_url: str) -> str:
        """Check a proxy endpoint has a supported scheme, a host and a port."""
        parsed = urlparse(proxy_url.strip())
        try:
            port = parsed.port
        except ValueError:
            port = None

        if parsed.scheme not in cls.SUPPORTED_SCHEMES or not parsed.hostname or not port:
            raise FatalInitError(f"Invalid proxy endpoint: {proxy_url!r}")
        return proxy_url.strip()

    @property
    def enabled(self) -> bool:
        return bool(self._proxies)

    @property
    def proxies(self) -> List[str]:
        return list(self._proxies)

    def next_proxy(self) -> Optional[str]:
        """Return the next proxy in rotation, or None for a direct connection."""
        with self._lock:
            if not self._proxies:
                return None
            proxy = self._proxies[self._index % len(self._proxies)]
            self._index += 1
            return proxy

    def next_requests_proxies(self) -> Optional[Dict[str, str]]:
        """Next proxy as the mapping ``requests`` expects."""
        proxy = self.next_proxy()
        if proxy is None:
            return None
        return {"http": proxy, "https": proxy}

    def check_health(
        self,
        session: requests.Session,
        probe_url: str,
        timeout: int = 10,
    ) -> List[str]:
        """
        Probe every proxy once and keep only the ones that answer.

        Args:
            session: Session used for the probe requests
            probe_url: URL fetched through each proxy
            timeout: Per-probe timeout in seconds

        Returns:
            The proxies that passed

        Raises:
            FatalInitError: If proxies are configured but none is healthy
        """
        if not self._proxies:
            return []

        healthy = []
        for proxy in self._proxies:
            try:
                response = session.head(
                    probe_url,
                    proxies={"http": proxy, "https": proxy},
                    timeout=timeout,
                    allow_redirects=True,
                )
                response.raise_for_status()
                healthy.append(proxy)
            except requests.RequestException as e:
                logger.warning(f"Proxy {proxy} failed health check: {e}")

        if not healthy:
            raise FatalInitError("No working proxy among the configured endpoints")

        with self._lock:
            self._proxies = healthy
            self._index = 0

        logger.info(f"{len(healthy)} of the configured proxies are healthy")
        return list(healthy)
