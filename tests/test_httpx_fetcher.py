from __future__ import annotations

import asyncio

import httpx
import pytest

from adapters.httpx_fetcher import HttpxFetcher
from adapters.levenshtein_detector import PhishingDetector
from core.config import RefreshConfig
from core.controller import ReputationController
from core.errors import TransportError
from core.models import ClassificationConfig


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/ok.json":
        return httpx.Response(200, content=b'{"blacklist": ["a.com"]}')
    if request.url.path == "/missing.json":
        return httpx.Response(404, content=b"not found")
    if request.url.path == "/moved.json":
        return httpx.Response(301, headers={"Location": "https://lists.example/ok.json"})
    raise httpx.ConnectError("connection refused", request=request)


def _fetch(url: str) -> bytes:
    async def run() -> bytes:
        client = httpx.AsyncClient(transport=httpx.MockTransport(_handler), follow_redirects=True)
        fetcher = HttpxFetcher(client=client)
        try:
            return await fetcher.fetch(url)
        finally:
            await client.aclose()

    return asyncio.run(run())


def test_fetch_returns_body() -> None:
    assert _fetch("https://lists.example/ok.json") == b'{"blacklist": ["a.com"]}'


def test_fetch_follows_redirects() -> None:
    assert _fetch("https://lists.example/moved.json") == b'{"blacklist": ["a.com"]}'


def test_non_2xx_is_transport_error() -> None:
    with pytest.raises(TransportError) as excinfo:
        _fetch("https://lists.example/missing.json")

    assert excinfo.value.url == "https://lists.example/missing.json"
    assert "HTTP 404" in str(excinfo.value)


def test_connection_failure_is_transport_error() -> None:
    with pytest.raises(TransportError) as excinfo:
        _fetch("https://lists.example/down.json")

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_injected_client_is_not_closed() -> None:
    async def run() -> bool:
        client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
        fetcher = HttpxFetcher(client=client)
        await fetcher.aclose()
        closed = client.is_closed
        await client.aclose()
        return closed

    assert asyncio.run(run()) is False


def test_invalid_url_is_transport_error() -> None:
    with pytest.raises(TransportError) as excinfo:
        _fetch("https://exa mple.com/\x00")

    assert isinstance(excinfo.value.__cause__, httpx.InvalidURL)


def test_invalid_source_url_does_not_abort_refresh() -> None:
    bad_url = "https://exa mple.com/\x00"
    good_url = "https://lists.example/ok.json"

    async def run() -> ClassificationConfig:
        client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
        controller = ReputationController(
            refresh_config=RefreshConfig(list_urls=(bad_url, good_url)),
            fetcher=HttpxFetcher(client=client),
            detector_factory=PhishingDetector,
        )
        try:
            return await controller.update_phishing_list()
        finally:
            await client.aclose()

    config = asyncio.run(run())

    assert config == ClassificationConfig.build(blacklist=["a.com"])
