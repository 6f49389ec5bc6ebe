"""
Async HTTP client shared by the quote providers.

Thin wrapper around ``httpx.AsyncClient`` with lazy initialisation and
async context management. Resilience (direct request, then relays) lives
in :mod:`aurumtrack.core.patterns.fallback`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from aurumtrack.core.logging import logger


@dataclass
class HttpConfig:
    """Configuration for HTTP client behavior."""

    timeout: float = 10.0
    max_redirects: int = 5
    verify_ssl: bool = True
    user_agent: str = "Mozilla/5.0 (compatible; aurumtrack/0.1)"
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate HTTP configuration."""
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")


class HttpClient:
    """Lazily created ``httpx.AsyncClient`` with a fixed configuration."""

    def __init__(self, http_config: HttpConfig | None = None):
        self.http_config = http_config or HttpConfig()
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {
                "User-Agent": self.http_config.user_agent,
                "Accept": "application/json",
                **self.http_config.headers,
            }
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.http_config.timeout),
                follow_redirects=True,
                max_redirects=self.http_config.max_redirects,
                verify=self.http_config.verify_ssl,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        client = self._ensure_client()
        logger.debug("HTTP request", method=method, url=url)
        return await client.request(method, url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)


__all__ = ["HttpClient", "HttpConfig"]
