"""Rate-limited HTTP GET for the external recording database.

Every outbound call to MusicBrainz or Cover Art Archive goes through
RateLimitedFetcher.fetch(). It waits on the shared RateLimiter, dispatches with
httpx, and turns ANY failure (network error, timeout, malformed URL, closed
client, non-2xx) into None.
Nothing is retried here - retrying is the caller's call.
"""

import logging
from typing import Any

import httpx

from sonora.infrastructure.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class RateLimitedFetcher:
    """Shared, rate-limited GET helper.

    Usage:
        async with RateLimitedFetcher(limiter, user_agent="Sonora/1.0 ( me )") as fetcher:
            response = await fetcher.fetch("https://musicbrainz.org/ws/2/recording", params=...)
            if response is not None:
                data = response.json()
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        limiter: RateLimiter,
        user_agent: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            limiter: The process-wide limiter for this external service
            user_agent: User-Agent header (MusicBrainz rejects requests without one)
            timeout: Request timeout in seconds
            client: Optional pre-built client (tests, shared pools)
        """
        self.limiter = limiter
        self.user_agent = user_agent
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._closed = False

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client (only if we created it). Later fetches return None."""
        self._closed = True
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response | None:
        """GET a URL once the limiter lets us through.

        Args:
            url: Absolute URL
            headers: Extra request headers
            params: Query parameters

        Returns:
            The 2xx response, or None on non-2xx status, network failure or after close()
        """
        if self._closed:
            logger.debug("Fetcher closed, dropping request to %s", url)
            return None
        client = await self._get_client()
        await self.limiter.acquire()

        try:
            response = await client.get(url, headers=headers, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Request to %s failed: %s", url, e)
            return None
        except RuntimeError as e:
            # httpx raises this for a client that was closed underneath us.
            logger.warning("Request to %s failed, client unusable: %s", url, e)
            return None

        if not response.is_success:
            logger.debug("Request to %s returned HTTP %d", url, response.status_code)
            return None

        return response

    async def __aenter__(self) -> "RateLimitedFetcher":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()


__all__ = ["RateLimitedFetcher"]
