"""Provider selection from configuration."""

from __future__ import annotations

from aurumtrack.core.config import AnchorConfig, ProviderConfig
from aurumtrack.core.http import HttpClient, HttpConfig
from aurumtrack.core.models import ProviderKind
from aurumtrack.core.patterns import FallbackChain, RelayEndpoint

from .base import QuoteProvider
from .chart import ChartQuoteProvider
from .scanner import ScannerQuoteProvider


def create_http_client(config: ProviderConfig) -> HttpClient:
    return HttpClient(HttpConfig(timeout=config.timeout, user_agent=config.user_agent))


def create_provider(
    config: ProviderConfig,
    anchor_config: AnchorConfig | None = None,
    client: HttpClient | None = None,
) -> QuoteProvider:
    """Instantiate the configured provider variant."""

    kind = ProviderKind(config.kind)
    relays = [RelayEndpoint.from_dict(relay) for relay in config.relays]
    http_client = client or create_http_client(config)

    if kind is ProviderKind.SCANNER:
        chain = FallbackChain(http_client, relays, provider_name=ScannerQuoteProvider.name)
        return ScannerQuoteProvider(chain, config.scanner_url)

    chain = FallbackChain(http_client, relays, provider_name=ChartQuoteProvider.name)
    return ChartQuoteProvider(chain, config.chart_url, anchor_config)


__all__ = ["create_http_client", "create_provider"]
