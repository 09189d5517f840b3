"""
Link metadata resolution.

Exports:
  - MetadataResolver: Ordered multi-provider lookup
  - ProviderFetcher, FetchResult, FetchStatus: Outbound HTTP
  - Metadata, PARSERS: Canonical triple and shape parsers
  - ProviderSpec, BUILTIN_PROVIDERS, build_providers(): Provider configuration
"""

from linkdrop.core.metadata.fetcher import FetchResult, FetchStatus, ProviderFetcher
from linkdrop.core.metadata.parsers import PARSERS, Metadata
from linkdrop.core.metadata.providers import BUILTIN_PROVIDERS, ProviderSpec, build_providers
from linkdrop.core.metadata.resolver import MetadataResolver

__all__ = [
    "BUILTIN_PROVIDERS",
    "FetchResult",
    "FetchStatus",
    "Metadata",
    "MetadataResolver",
    "PARSERS",
    "ProviderFetcher",
    "ProviderSpec",
    "build_providers",
]
