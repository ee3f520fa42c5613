"""Errors raised while fetching feed pages."""
from typing import Optional


class FeedError(Exception):
    """Base class for recoverable feed failures."""


class NetworkError(FeedError):
    """The catalog could not be reached or the request timed out."""


class ResponseError(FeedError):
    """The catalog answered with a non-success status or a malformed body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
