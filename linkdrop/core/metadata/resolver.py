"""
Metadata resolver with multi-provider fallback.

Walks the configured providers in order and returns the first parsed
result carrying at least one field. Provider failures are logged and
skipped; exhausting every provider yields an empty Metadata.

Dependencies: linkdrop.core.metadata
System role: Best-effort page metadata lookup for links
"""

import logging

from linkdrop.core.metadata.fetcher import ProviderFetcher, is_public_host
from linkdrop.core.metadata.parsers import Metadata
from linkdrop.core.metadata.providers import ProviderSpec

logger = logging.getLogger(__name__)


class MetadataResolver:
    """Resolve page metadata through an ordered provider chain."""

    def __init__(
        self,
        providers: list[ProviderSpec],
        fetcher: ProviderFetcher,
        allow_private_targets: bool = False,
    ) -> None:
        """
        Initialize resolver.

        Args:
            providers: Providers in priority order
            fetcher: HTTP fetcher used for every provider request
            allow_private_targets: Let direct providers fetch hosts on
                loopback, private or reserved addresses
        """
        self.providers = list(providers)
        self.fetcher = fetcher
        self.allow_private_targets = allow_private_targets

    async def resolve(self, url: str) -> Metadata:
        """
        Resolve metadata for url. Never raises.

        Args:
            url: Link target

        Returns:
            Metadata: First non-empty provider result, or an empty Metadata
        """
        public_target: bool | None = None

        for provider in self.providers:
            if provider.direct and not self.allow_private_targets:
                if public_target is None:
                    public_target = await is_public_host(url)
                if not public_target:
                    logger.warning(
                        "Direct metadata fetch refused for non-public host",
                        extra={"provider": provider.name, "url": url},
                    )
                    continue

            result = await self.fetcher.fetch(
                provider.request_url(url), html_only=provider.html_only
            )
            if not result.ok:
                logger.warning(
                    "Metadata provider request failed",
                    extra={
                        "provider": provider.name,
                        "url": url,
                        "fetch_status": result.status.value,
                        "error": result.error,
                    },
                )
                continue

            try:
                metadata = provider.parser(result.body or "", url)
            except Exception as e:
                logger.warning(
                    "Metadata provider returned an unparseable response",
                    extra={"provider": provider.name, "url": url, "error": str(e)},
                )
                continue

            if metadata.is_empty:
                logger.info(
                    "Metadata provider returned no fields",
                    extra={"provider": provider.name, "url": url},
                )
                continue

            logger.info(
                "Metadata resolved",
                extra={
                    "provider": provider.name,
                    "url": url,
                    "has_title": bool(metadata.title),
                    "has_thumbnail": bool(metadata.thumbnail),
                },
            )
            return metadata

        logger.info("No metadata provider yielded data", extra={"url": url})
        return Metadata()
