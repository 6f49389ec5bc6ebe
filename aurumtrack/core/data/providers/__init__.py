"""Quote provider implementations."""

from .base import QuoteProvider, coerce_price, first_price
from .chart import ChartQuoteProvider
from .factory import create_http_client, create_provider
from .scanner import ScannerQuoteProvider

__all__ = [
    "ChartQuoteProvider",
    "QuoteProvider",
    "ScannerQuoteProvider",
    "coerce_price",
    "create_http_client",
    "create_provider",
    "first_price",
]
