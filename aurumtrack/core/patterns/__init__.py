"""Resilience patterns."""

from .fallback import DIRECT_ROUTE, FallbackChain, FallbackState, RelayEndpoint

__all__ = ["DIRECT_ROUTE", "FallbackChain", "FallbackState", "RelayEndpoint"]
