import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from ghs_games.config.settings import settings
from ghs_games.models.raw_event import RawEvent


class ScraperError(Exception):
    """Custom exception for scraper-related errors."""

    pass


class TransportError(ScraperError):
    """The upstream request failed (network, timeout, non-2xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamTimeoutError(TransportError):
    """The upstream did not answer within the configured timeout."""

    pass


class AuthenticationError(TransportError):
    """Exception raised for authentication failures (401, 403)."""

    pass


class DecodeError(ScraperError):
    """The upstream answered, but the payload is not the shape we expect."""

    pass


class BaseScraper(ABC):
    """Abstract base class for calendar scrapers."""

    source: str = "unknown"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout_seconds),
            follow_redirects=True,
        )

    @abstractmethod
    async def fetch_current_week(self) -> List[RawEvent]:
        """Fetch the raw events for the current week.

        Returns:
            The decoded raw records, in upstream order.

        Raises:
            TransportError: the request itself failed.
            DecodeError: the response did not match the expected payload.
        """
        pass

    async def _make_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Makes a single HTTP request and maps failures onto TransportError.

        The whole request, body included, must finish within
        `settings.request_timeout_seconds`; httpx's own timeout only bounds
        each individual connect/read/write.
        """
        deadline = settings.request_timeout_seconds
        log_context = {
            "method": method,
            "url": url,
            "params": params,
            "has_data": data is not None,
        }
        logger.debug("Making request", **log_context)
        try:
            response = await asyncio.wait_for(
                self.client.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    data=data,
                    **kwargs,
                ),
                timeout=deadline,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Request to {self.source} at {url} exceeded {deadline}s")
            raise UpstreamTimeoutError(
                f"Timed out waiting for {self.source} after {deadline}s"
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Request to {self.source} at {url} timed out: {e!r}")
            raise UpstreamTimeoutError(
                f"Timed out waiting for {self.source} ({type(e).__name__})"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request error for {self.source} at {url}: {e!r}")
            raise TransportError(f"Request to {self.source} failed: {e}") from e

        if response.status_code in {401, 403}:
            logger.warning(
                f"Authentication error ({response.status_code}) for {self.source} at {url}. Check the session cookie."
            )
            raise AuthenticationError(
                f"Authentication failed ({response.status_code}) for {self.source}",
                status_code=response.status_code,
            )

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"HTTP error during request for {self.source}: {e.response.status_code} - {e}"
            )
            raise TransportError(
                f"HTTP error from {self.source}: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e

        logger.debug(f"Request successful: {response.status_code} for {url}")
        return response

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.debug(f"Closed HTTP client for {self.source}")
