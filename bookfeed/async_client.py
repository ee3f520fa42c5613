"""Async HTTP client for feed page fetches."""
import asyncio
import httpx
from typing import Optional, Dict, Any
import logging

from bookfeed.errors import NetworkError, ResponseError
from bookfeed.models import PageRequest

logger = logging.getLogger(__name__)

USER_AGENT = "book-feed/0.1 (+https://openlibrary.org/developers/api)"


class AsyncOpenLibraryClient:
    """Async client that fetches one page of catalog records per call."""

    def __init__(
        self,
        timeout: float = 10,
        max_concurrent: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize async client.

        Args:
            timeout: Request timeout in seconds
            max_concurrent: Maximum concurrent requests
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.semaphore = asyncio.Semaphore(max_concurrent)

        # Create async HTTP client
        self.client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            follow_redirects=True
        )

    async def fetch_page(self, request: PageRequest) -> Dict[str, Any]:
        """
        Fetch one page of records.

        Args:
            request: Resolved page request

        Returns:
            Decoded JSON object

        Raises:
            NetworkError: on timeout or connection failure
            ResponseError: on non-2xx status or a body that is not a JSON object
        """
        url = request.url

        # Use semaphore to limit concurrency
        async with self.semaphore:
            try:
                logger.info(f"Async request: {url}")
                response = await self.client.get(url)
            except httpx.TimeoutException as e:
                logger.warning(f"Timeout after {self.timeout}s: {url}")
                raise NetworkError(f"Request timed out: {url}") from e
            except httpx.TransportError as e:
                logger.warning(f"Connection error for {url}: {e}")
                raise NetworkError(f"Request failed: {e}") from e

        if not response.is_success:
            logger.warning(f"Status {response.status_code} for {url}")
            raise ResponseError(
                f"Catalog returned status {response.status_code}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseError(f"Malformed JSON from {url}", status_code=response.status_code) from e

        if not isinstance(data, dict):
            raise ResponseError(f"Expected a JSON object from {url}", status_code=response.status_code)

        return data

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
