"""
Test suite for ProviderFetcher against a local aiohttp server.

System role: Verification of outbound HTTP handling
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from linkdrop.core.metadata import FetchStatus, ProviderFetcher
from linkdrop.core.metadata.fetcher import is_public_host

HEADERS = {
    "User-Agent": "LinkdropTest/1.0",
    "Accept": "text/html",
    "Accept-Language": "en-US",
}


async def echo_user_agent(request: web.Request) -> web.Response:
    return web.Response(text=request.headers.get("User-Agent", ""))


async def server_error(request: web.Request) -> web.Response:
    return web.Response(status=500, text="boom")


async def binary_blob(request: web.Request) -> web.Response:
    return web.Response(body=b"\x00" * 4_000_000, content_type="application/octet-stream")


async def large_page(request: web.Request) -> web.Response:
    return web.Response(text="<html>" + "a" * 50_000, content_type="text/html")


async def slow(request: web.Request) -> web.Response:
    await asyncio.sleep(1)
    return web.Response(text="late")


@pytest.fixture
async def server():
    app = web.Application()
    app.router.add_get("/ok", echo_user_agent)
    app.router.add_get("/error", server_error)
    app.router.add_get("/slow", slow)
    app.router.add_get("/blob", binary_blob)
    app.router.add_get("/page", large_page)

    test_server = TestServer(app)
    await test_server.start_server()

    yield test_server

    await test_server.close()


@pytest.mark.asyncio
async def test_success_returns_body_and_sends_headers(server) -> None:
    fetcher = ProviderFetcher(HEADERS, timeout_seconds=5)

    result = await fetcher.fetch(str(server.make_url("/ok")))

    assert result.ok
    assert result.status == FetchStatus.SUCCESS
    assert result.body == "LinkdropTest/1.0"


@pytest.mark.asyncio
async def test_non_2xx_is_http_error(server) -> None:
    fetcher = ProviderFetcher(HEADERS, timeout_seconds=5)

    result = await fetcher.fetch(str(server.make_url("/error")))

    assert result.status == FetchStatus.HTTP_ERROR
    assert result.http_status == 500
    assert not result.ok


@pytest.mark.asyncio
async def test_timeout_is_reported_not_raised(server) -> None:
    fetcher = ProviderFetcher(HEADERS, timeout_seconds=0.2)

    result = await fetcher.fetch(str(server.make_url("/slow")))

    assert result.status == FetchStatus.TIMEOUT


@pytest.mark.asyncio
async def test_transport_error_is_reported_not_raised() -> None:
    fetcher = ProviderFetcher(HEADERS, timeout_seconds=2)

    result = await fetcher.fetch("http://127.0.0.1:1/unreachable")

    assert result.status == FetchStatus.FAILED
    assert result.error


@pytest.mark.asyncio
async def test_html_only_skips_binary_responses(server) -> None:
    fetcher = ProviderFetcher(HEADERS, timeout_seconds=5)

    result = await fetcher.fetch(str(server.make_url("/blob")), html_only=True)

    assert result.status == FetchStatus.SKIPPED
    assert result.body is None
    assert result.content_type.startswith("application/octet-stream")


@pytest.mark.asyncio
async def test_html_only_accepts_html(server) -> None:
    fetcher = ProviderFetcher(HEADERS, timeout_seconds=5)

    result = await fetcher.fetch(str(server.make_url("/page")), html_only=True)

    assert result.ok
    assert result.body.startswith("<html>")


@pytest.mark.asyncio
async def test_body_is_capped_at_max_content_length(server) -> None:
    fetcher = ProviderFetcher(HEADERS, timeout_seconds=5, max_content_length=1024)

    page = await fetcher.fetch(str(server.make_url("/page")))
    blob = await fetcher.fetch(str(server.make_url("/blob")))

    assert page.ok
    assert len(page.body) == 1024
    assert blob.ok
    assert len(blob.body) == 1024


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "url,expected",
    [
        ("http://8.8.8.8/", True),
        ("http://127.0.0.1/", False),
        ("http://192.168.1.10/", False),
        ("http://[fe80::1]/", False),
        ("http:///no-host", False),
    ],
)
async def test_is_public_host(url: str, expected: bool) -> None:
    assert await is_public_host(url) is expected
