"""
Test suite for MetadataResolver fallback behavior.

Uses a scripted fetcher keyed by request URL; no network access.

System role: Verification of multi-provider resolution
"""

import json

import pytest

from linkdrop.core.metadata import FetchResult, FetchStatus, Metadata, MetadataResolver, ProviderSpec
from linkdrop.core.metadata.parsers import PARSERS

TARGET = "https://example.com/post/1"


class ScriptedFetcher:
    """Returns canned FetchResults by provider endpoint prefix."""

    def __init__(self, responses: dict[str, FetchResult]) -> None:
        self.responses = responses
        self.requested: list[str] = []
        self.html_only: list[bool] = []

    async def fetch(self, url: str, html_only: bool = False) -> FetchResult:
        self.requested.append(url)
        self.html_only.append(html_only)
        for prefix, result in self.responses.items():
            if url.startswith(prefix):
                return result
        return FetchResult(status=FetchStatus.FAILED, error="unscripted")


def providers() -> list[ProviderSpec]:
    return [
        ProviderSpec("first", "https://one.test/?url=", PARSERS["envelope_json"]),
        ProviderSpec("second", "https://two.test/?url=", PARSERS["flat_json"]),
        ProviderSpec("third", "https://three.test/?url=", PARSERS["flat_json"]),
    ]


def ok(payload: dict) -> FetchResult:
    return FetchResult(status=FetchStatus.SUCCESS, body=json.dumps(payload), http_status=200)


@pytest.mark.asyncio
async def test_falls_through_transport_errors_to_third_provider() -> None:
    fetcher = ScriptedFetcher(
        {
            "https://one.test/": FetchResult(status=FetchStatus.FAILED, error="connection reset"),
            "https://two.test/": FetchResult(status=FetchStatus.TIMEOUT, error="Request timed out"),
            "https://three.test/": ok({"title": "Third", "description": "From third"}),
        }
    )
    resolver = MetadataResolver(providers(), fetcher)

    metadata = await resolver.resolve(TARGET)

    assert metadata == Metadata(title="Third", description="From third")
    assert len(fetcher.requested) == 3


@pytest.mark.asyncio
async def test_stops_at_first_provider_with_data() -> None:
    fetcher = ScriptedFetcher(
        {
            "https://one.test/": ok({"data": {"title": "First"}}),
            "https://two.test/": ok({"title": "Second"}),
        }
    )
    resolver = MetadataResolver(providers(), fetcher)

    metadata = await resolver.resolve(TARGET)

    assert metadata.title == "First"
    assert fetcher.requested == ["https://one.test/?url=https%3A%2F%2Fexample.com%2Fpost%2F1"]


@pytest.mark.asyncio
async def test_all_providers_returning_500_yield_empty_metadata() -> None:
    error = FetchResult(status=FetchStatus.HTTP_ERROR, http_status=500, error="HTTP 500")
    fetcher = ScriptedFetcher(
        {"https://one.test/": error, "https://two.test/": error, "https://three.test/": error}
    )
    resolver = MetadataResolver(providers(), fetcher)

    metadata = await resolver.resolve(TARGET)

    assert metadata == Metadata()
    assert metadata.title is None
    assert metadata.description is None
    assert metadata.thumbnail is None


@pytest.mark.asyncio
async def test_empty_and_unparseable_responses_are_skipped() -> None:
    fetcher = ScriptedFetcher(
        {
            "https://one.test/": ok({"data": {}}),
            "https://two.test/": FetchResult(status=FetchStatus.SUCCESS, body="<html>", http_status=200),
            "https://three.test/": ok({"image": "https://example.com/a.png"}),
        }
    )
    resolver = MetadataResolver(providers(), fetcher)

    metadata = await resolver.resolve(TARGET)

    assert metadata == Metadata(thumbnail="https://example.com/a.png")


@pytest.mark.asyncio
async def test_no_providers_yields_empty_metadata() -> None:
    resolver = MetadataResolver([], ScriptedFetcher({}))

    assert (await resolver.resolve(TARGET)).is_empty


def direct_html_provider() -> ProviderSpec:
    return ProviderSpec("html", "", PARSERS["html"], encode_target=False, html_only=True)


def html_page(title: str) -> FetchResult:
    body = f"<html><head><title>{title}</title></head></html>"
    return FetchResult(status=FetchStatus.SUCCESS, body=body, http_status=200)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "target",
    [
        "http://127.0.0.1/admin",
        "http://10.0.0.5/",
        "http://169.254.169.254/latest/meta-data/",
        "http://[::1]:8080/",
    ],
)
async def test_direct_fetch_refuses_non_public_hosts(target: str) -> None:
    fetcher = ScriptedFetcher({target: html_page("internal")})
    resolver = MetadataResolver([direct_html_provider()], fetcher)

    metadata = await resolver.resolve(target)

    assert metadata.is_empty
    assert fetcher.requested == []


@pytest.mark.asyncio
async def test_private_targets_can_be_allowed() -> None:
    target = "http://127.0.0.1/intranet"
    fetcher = ScriptedFetcher({target: html_page("Intranet")})
    resolver = MetadataResolver([direct_html_provider()], fetcher, allow_private_targets=True)

    metadata = await resolver.resolve(target)

    assert metadata.title == "Intranet"
    assert fetcher.html_only == [True]


@pytest.mark.asyncio
async def test_third_party_providers_are_not_address_checked() -> None:
    fetcher = ScriptedFetcher({"https://one.test/": ok({"data": {"title": "Via provider"}})})
    resolver = MetadataResolver(providers()[:1], fetcher)

    metadata = await resolver.resolve("http://10.0.0.5/")

    assert metadata.title == "Via provider"
    assert fetcher.html_only == [False]
