"""
Outbound HTTP fetcher for metadata providers.

Issues a single GET with fixed client identification headers, a hard
total timeout and a cap on how much of the body is read. HTML-only
requests skip other content types without reading them. Transport
problems are reported through FetchResult rather than raised, so the
resolver can move on to the next provider.

Dependencies: aiohttp
System role: Network I/O for link metadata resolution
"""

import asyncio
import codecs
import ipaddress
import logging
import socket
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

import aiohttp

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class FetchStatus(str, Enum):
    """Outcome of a provider request."""

    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    TIMEOUT = "timeout"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class FetchResult:
    """Result of a fetch operation."""

    status: FetchStatus
    body: str | None = None
    http_status: int | None = None
    content_type: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == FetchStatus.SUCCESS


async def is_public_host(url: str) -> bool:
    """
    Check that every address url's host resolves to is publicly routable.

    Loopback, private, link-local, multicast, reserved and unspecified
    addresses are rejected, as are hosts that do not resolve.

    Args:
        url: Absolute http(s) URL

    Returns:
        bool: True if the host only resolves to global addresses
    """
    host = urlsplit(url).hostname
    if not host:
        return False

    try:
        infos = await asyncio.get_running_loop().getaddrinfo(host, None, type=socket.SOCK_STREAM)
    except (OSError, UnicodeError):
        return False

    addresses = {ipaddress.ip_address(info[4][0].split("%", 1)[0]) for info in infos}
    return bool(addresses) and all(address.is_global for address in addresses)


class ProviderFetcher:
    """Async GET client shared by all metadata providers."""

    def __init__(
        self,
        headers: dict[str, str],
        timeout_seconds: float = 15.0,
        max_content_length: int = 1_000_000,
    ) -> None:
        self.headers = dict(headers)
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.max_content_length = max_content_length

    async def fetch(self, url: str, html_only: bool = False) -> FetchResult:
        """
        Fetch url and return its body on any 2xx response.

        Args:
            url: Fully built provider request URL
            html_only: Skip responses that are not HTML

        Returns:
            FetchResult: SUCCESS with body (truncated to max_content_length
            bytes), or a failure status with error text
        """
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(
                    url, headers=self.headers, allow_redirects=True
                ) as response:
                    if not 200 <= response.status < 300:
                        return FetchResult(
                            status=FetchStatus.HTTP_ERROR,
                            http_status=response.status,
                            error=f"HTTP {response.status}",
                        )

                    content_type = response.headers.get("content-type", "")
                    if html_only and not content_type.lower().startswith(HTML_CONTENT_TYPES):
                        return FetchResult(
                            status=FetchStatus.SKIPPED,
                            http_status=response.status,
                            content_type=content_type,
                            error=f"Non-HTML content: {content_type}",
                        )

                    raw = await self._read_capped(response)
                    return FetchResult(
                        status=FetchStatus.SUCCESS,
                        body=raw.decode(self._charset(response), errors="replace"),
                        http_status=response.status,
                        content_type=content_type,
                    )

        except asyncio.TimeoutError:
            return FetchResult(status=FetchStatus.TIMEOUT, error="Request timed out")
        except aiohttp.ClientError as e:
            return FetchResult(status=FetchStatus.FAILED, error=str(e))
        except Exception as e:
            logger.warning("Unexpected fetch failure", extra={"url": url, "error": str(e)})
            return FetchResult(status=FetchStatus.FAILED, error=f"Unexpected: {e}")

    async def _read_capped(self, response: aiohttp.ClientResponse) -> bytes:
        chunks: list[bytes] = []
        remaining = self.max_content_length
        async for chunk in response.content.iter_chunked(64 * 1024):
            chunks.append(chunk[:remaining])
            remaining -= len(chunk)
            if remaining <= 0:
                break
        return b"".join(chunks)

    @staticmethod
    def _charset(response: aiohttp.ClientResponse) -> str:
        charset = response.charset or "utf-8"
        try:
            codecs.lookup(charset)
        except LookupError:
            return "utf-8"
        return charset
