"""Direct-then-relay fallback chain for provider requests."""

import json
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

import httpx

from aurumtrack.core.exceptions import AllRelaysFailedError, NetworkError, PayloadError, ProviderError
from aurumtrack.core.http import HttpClient
from aurumtrack.core.logging import logger

DIRECT_ROUTE = "direct"

Validator = Callable[[Any], Any]


class FallbackState(Enum):
    """Outcome of the most recent chain execution."""

    READY = "ready"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class RelayEndpoint:
    """URL-forwarding relay.

    ``wraps`` relays return ``{"contents": "<json text>"}`` which needs a
    second parse. Relays without ``supports_post`` are skipped for POST.
    """

    name: str
    url: str
    wraps: bool = False
    supports_post: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RelayEndpoint":
        return cls(
            name=str(data.get("name") or data["url"]),
            url=str(data["url"]),
            wraps=bool(data.get("wraps", False)),
            supports_post=bool(data.get("supports_post", True)),
        )

    def route(self, target_url: str) -> str:
        return self.url + quote(target_url, safe="")

    def unwrap(self, payload: Any) -> Any:
        if not self.wraps:
            return payload
        contents = payload.get("contents") if isinstance(payload, dict) else None
        if not isinstance(contents, str):
            raise PayloadError("relay envelope has no contents", self.name)
        try:
            return json.loads(contents)
        except ValueError as exc:
            raise PayloadError(f"relay contents are not JSON: {exc}", self.name) from exc


class FallbackChain:
    """Try the target URL directly, then each relay in order.

    Any non-success status, transport error, malformed JSON or validator
    rejection moves on to the next route. When every route fails an
    :class:`AllRelaysFailedError` is raised.
    """

    def __init__(self, client: HttpClient, relays: Iterable[RelayEndpoint] = (), provider_name: str = "http"):
        self.client = client
        self.relays: Sequence[RelayEndpoint] = tuple(relays)
        self.provider_name = provider_name
        self.state = FallbackState.READY
        self.executions = 0
        self.failures = 0
        self.route_successes: Counter[str] = Counter()
        self.last_error: str | None = None

    def routes_for(self, method: str) -> list[RelayEndpoint | None]:
        """Ordered routes for ``method``; ``None`` stands for the direct request."""

        routes: list[RelayEndpoint | None] = [None]
        for relay in self.relays:
            if method.upper() == "POST" and not relay.supports_post:
                continue
            routes.append(relay)
        return routes

    async def fetch_json(
        self,
        method: str,
        url: str,
        *,
        json_body: Any = None,
        validate: Validator | None = None,
    ) -> Any:
        """Return the first payload that parses and passes ``validate``.

        Args:
            method: HTTP method
            url: target URL, wrapped for each relay
            json_body: optional JSON request body
            validate: maps the decoded payload to the result, raising
                :class:`PayloadError` to reject it
        """
        self.executions += 1
        failed_routes: list[dict[str, Any]] = []

        for relay in self.routes_for(method):
            route_name = relay.name if relay else DIRECT_ROUTE
            request_url = relay.route(url) if relay else url
            try:
                payload = await self._attempt(method, request_url, json_body, relay)
                result = validate(payload) if validate else payload
            except (httpx.HTTPError, ProviderError) as exc:
                failed_routes.append({"route": route_name, "error": str(exc)})
                self.last_error = str(exc)
                logger.debug(
                    "Route failed, trying next",
                    provider=self.provider_name,
                    route=route_name,
                    url=url,
                    error=str(exc),
                )
                continue

            self.route_successes[route_name] += 1
            self.state = FallbackState.COMPLETED
            return result

        self.failures += 1
        self.state = FallbackState.FAILED
        raise AllRelaysFailedError(
            f"all routes failed for {url}",
            self.provider_name,
            failed_routes=failed_routes,
            details={"url": url},
        )

    async def _attempt(self, method: str, url: str, json_body: Any, relay: RelayEndpoint | None) -> Any:
        kwargs: dict[str, Any] = {}
        if json_body is not None:
            kwargs["json"] = json_body
        response = await self.client.request(method, url, **kwargs)
        if not response.is_success:
            raise NetworkError(
                f"HTTP {response.status_code}",
                self.provider_name,
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise PayloadError(f"response is not JSON: {exc}", self.provider_name) from exc
        if relay is not None:
            payload = relay.unwrap(payload)
        return payload

    def get_stats(self) -> dict[str, Any]:
        return {
            "executions": self.executions,
            "failures": self.failures,
            "route_successes": dict(self.route_successes),
            "state": self.state.value,
            "last_error": self.last_error,
        }


__all__ = ["DIRECT_ROUTE", "FallbackChain", "FallbackState", "RelayEndpoint"]
