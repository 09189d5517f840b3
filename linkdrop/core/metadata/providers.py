"""
Metadata provider registry.

A provider couples a URL prefix with the parser for its response shape.
The ordered provider list is built once from settings: the optional
operator-configured provider first, then the built-in fallbacks.

Dependencies: linkdrop.configs, linkdrop.core.metadata.parsers
System role: Provider configuration for link metadata resolution
"""

from dataclasses import dataclass
from urllib.parse import quote

from linkdrop.configs import MetadataSettings
from linkdrop.core.metadata.parsers import PARSERS, Parser


@dataclass(frozen=True)
class ProviderSpec:
    """
    One metadata provider.

    Attributes:
        name: Identifier used in logs
        endpoint: URL prefix the target is appended to
        parser: Response parser for this provider's shape
        encode_target: Percent-encode the target before appending
        html_only: Only accept HTML responses
    """

    name: str
    endpoint: str
    parser: Parser
    encode_target: bool = True
    html_only: bool = False

    @property
    def direct(self) -> bool:
        """True when the request goes to the target page itself."""
        return not self.endpoint

    def request_url(self, target_url: str) -> str:
        if self.encode_target:
            return self.endpoint + quote(target_url, safe="")
        return self.endpoint + target_url


BUILTIN_PROVIDERS: tuple[ProviderSpec, ...] = (
    ProviderSpec("microlink", "https://api.microlink.io/?url=", PARSERS["envelope_json"]),
    ProviderSpec("jsonlink", "https://jsonlink.io/api/extract?url=", PARSERS["flat_json"]),
    # Empty endpoint: fetch the target page itself
    ProviderSpec("html", "", PARSERS["html"], encode_target=False, html_only=True),
)


def build_providers(settings: MetadataSettings) -> list[ProviderSpec]:
    """
    Build the ordered provider list.

    Args:
        settings: Metadata settings carrying the optional custom provider

    Returns:
        list[ProviderSpec]: Custom provider (if configured) followed by built-ins

    Raises:
        ValueError: If the custom provider format has no registered parser
    """
    providers: list[ProviderSpec] = []

    if settings.provider_url:
        parser = PARSERS.get(settings.provider_format)
        if parser is None:
            raise ValueError(
                f"Unknown metadata provider format '{settings.provider_format}'. "
                f"Expected one of: {', '.join(sorted(PARSERS))}"
            )
        providers.append(
            ProviderSpec(
                "custom",
                settings.provider_url,
                parser,
                html_only=settings.provider_format == "html",
            )
        )

    providers.extend(BUILTIN_PROVIDERS)
    return providers
