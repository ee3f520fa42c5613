"""HTTP client for Open Library detail lookups with resilience patterns."""
import time
import random
import requests
from typing import Optional, Dict, Any
import logging

from bookfeed.async_client import USER_AGENT
from bookfeed.models import BookDetail
from bookfeed.parse import parse_detail

logger = logging.getLogger(__name__)


class OpenLibraryClient:
    """Best-effort detail client with timeouts, retries, and backoff."""

    def __init__(
        self,
        base_url: str = "https://openlibrary.org",
        timeout: float = 10,
        max_retries: int = 3,
        base_backoff: float = 1.0
    ):
        """
        Initialize Open Library client.

        Args:
            base_url: Catalog root, without trailing slash
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts
            base_backoff: Base delay for exponential backoff
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_backoff = base_backoff

        # Create session for connection pooling
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})

    def get_detail(self, detail_key: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the JSON document behind a record's detail key.

        Args:
            detail_key: Path such as "/works/OL45804W"

        Returns:
            API response JSON or None if the lookup failed
        """
        if not detail_key:
            return None

        if not detail_key.startswith("/"):
            detail_key = "/" + detail_key

        return self._make_request_with_retry(f"{self.base_url}{detail_key}.json")

    def get_book_detail(self, detail_key: str) -> Optional[BookDetail]:
        """Fetch and parse enrichment data; None when unavailable."""
        data = self.get_detail(detail_key)
        if data is None:
            return None
        return parse_detail(data, detail_key)

    def _make_request_with_retry(self, url: str) -> Optional[Dict[str, Any]]:
        """
        Make HTTP request with retry logic.

        Args:
            url: Request URL

        Returns:
            Response JSON or None if all retries exhausted
        """
        for attempt in range(self.max_retries):
            try:
                logger.info(f"Request attempt {attempt + 1}/{self.max_retries}: {url}")

                response = self.session.get(url, timeout=self.timeout)

                # Handle different status codes
                if response.status_code == 200:
                    logger.info(f"Success: {response.status_code}")
                    data = response.json()
                    if isinstance(data, dict):
                        return data
                    logger.error(f"Unexpected payload type from {url}: {type(data).__name__}")
                    return None

                elif response.status_code == 429:
                    # Rate limited - must retry with backoff
                    logger.warning(f"Rate limited (429) on attempt {attempt + 1}")
                    if attempt < self.max_retries - 1:
                        self._backoff(attempt)
                        continue

                elif response.status_code >= 500:
                    # Server error - retryable
                    logger.warning(f"Server error ({response.status_code}) on attempt {attempt + 1}")
                    if attempt < self.max_retries - 1:
                        self._backoff(attempt)
                        continue

                elif response.status_code >= 400:
                    # Client error - don't retry
                    logger.error(f"Client error ({response.status_code}) for {url}")
                    return None

            except requests.exceptions.Timeout:
                logger.warning(f"Timeout on attempt {attempt + 1}")
                if attempt < self.max_retries - 1:
                    self._backoff(attempt)
                    continue

            except requests.exceptions.ConnectionError as e:
                logger.warning(f"Connection error on attempt {attempt + 1}: {e}")
                if attempt < self.max_retries - 1:
                    self._backoff(attempt)
                    continue

            except ValueError as e:
                logger.error(f"Malformed JSON from {url}: {e}")
                return None

        logger.error(f"All {self.max_retries} attempts failed")
        return None

    def _backoff(self, attempt: int):
        # base * 2^attempt, plus up to the same again
        wait = self.base_backoff * 2 ** attempt
        wait += random.uniform(0, wait)
        logger.info(f"Retrying detail lookup in {wait:.2f}s (attempt {attempt + 1})")
        time.sleep(wait)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
