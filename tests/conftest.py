"""Shared fixtures: an in-memory catalog standing in for Open Library."""
import asyncio
from typing import Any, Dict, List

import pytest

from bookfeed.controller import FeedController
from bookfeed.models import FilterSignature, PageRequest
from bookfeed.query import resolve


def page_url(signature: FilterSignature, offset: int) -> str:
    return resolve(signature, offset).url


def make_payload(request: PageRequest, keys: List[str]) -> Dict[str, Any]:
    """Build a response body in the shape the endpoint really returns."""
    if request.records_field == "works":
        records = [
            {"key": key, "title": f"Work {key}", "authors": [{"name": "Author"}], "cover_id": 1}
            for key in keys
        ]
    else:
        records = [
            {"key": key, "title": f"Doc {key}", "author_name": ["Author"], "cover_i": 1}
            for key in keys
        ]
    return {request.records_field: records}


class FakeCatalog:
    """
    Page fetcher with scripted responses.

    By default every request returns a full page of distinct records whose
    keys encode the endpoint, term and position. ``queue`` and ``fail``
    script the next call for a URL; ``hold`` makes the next call for a URL
    wait until the returned event is set. Scripts are consumed when the
    call starts, so two calls for the same URL can get different outcomes.
    """

    def __init__(self):
        self.requests: List[PageRequest] = []
        self._queued: Dict[str, List[Any]] = {}
        self._gates: Dict[str, asyncio.Event] = {}

    def queue(self, url: str, response: Any):
        """Script a list of record keys, or a raw payload dict."""
        self._queued.setdefault(url, []).append(response)

    def fail(self, url: str, error: Exception):
        self._queued.setdefault(url, []).append(error)

    def hold(self, url: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[url] = gate
        return gate

    def default_keys(self, request: PageRequest) -> List[str]:
        tag = request.search_term or (request.category.value if request.category else "book")
        return [f"/works/{tag}-{request.offset + i}" for i in range(request.limit)]

    async def fetch_page(self, request: PageRequest) -> Dict[str, Any]:
        self.requests.append(request)
        queued = self._queued.get(request.url)
        outcome = queued.pop(0) if queued else self.default_keys(request)
        gate = self._gates.pop(request.url, None)

        if gate is not None:
            await gate.wait()

        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, dict):
            return outcome
        return make_payload(request, outcome)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def errors() -> list:
    return []


@pytest.fixture
def controller(catalog: FakeCatalog, errors: list) -> FeedController:
    return FeedController(catalog.fetch_page, on_error=errors.append)
