"""Tests for the async page client."""
import httpx
import pytest

from bookfeed.async_client import AsyncOpenLibraryClient
from bookfeed.errors import NetworkError, ResponseError
from bookfeed.models import FilterSignature
from bookfeed.query import resolve

REQUEST = resolve(FilterSignature(search_term="dune"), 40)


def client_for(handler) -> AsyncOpenLibraryClient:
    return AsyncOpenLibraryClient(timeout=1, transport=httpx.MockTransport(handler))


async def test_fetch_page_success():
    """A 200 JSON object is returned as-is."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"numFound": 1, "docs": [{"title": "Dune"}]})

    async with client_for(handler) as client:
        data = await client.fetch_page(REQUEST)

    assert data["docs"] == [{"title": "Dune"}]
    assert str(seen[0].url) == REQUEST.url
    assert seen[0].headers["Accept"] == "application/json"


async def test_fetch_page_server_error():
    """Non-2xx statuses raise ResponseError with the status code."""
    async with client_for(lambda request: httpx.Response(503)) as client:
        with pytest.raises(ResponseError) as exc_info:
            await client.fetch_page(REQUEST)

    assert exc_info.value.status_code == 503


async def test_fetch_page_malformed_json():
    """An undecodable body raises ResponseError."""
    async with client_for(lambda request: httpx.Response(200, content=b"<html>")) as client:
        with pytest.raises(ResponseError):
            await client.fetch_page(REQUEST)


async def test_fetch_page_non_object_json():
    """A JSON array is not a valid page body."""
    async with client_for(lambda request: httpx.Response(200, json=[1, 2])) as client:
        with pytest.raises(ResponseError):
            await client.fetch_page(REQUEST)


async def test_fetch_page_connection_error():
    """Connection failures raise NetworkError."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with client_for(handler) as client:
        with pytest.raises(NetworkError):
            await client.fetch_page(REQUEST)


async def test_fetch_page_timeout():
    """Timeouts raise NetworkError."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with client_for(handler) as client:
        with pytest.raises(NetworkError):
            await client.fetch_page(REQUEST)
