from __future__ import annotations

import json
from urllib.parse import quote

import httpx
import pytest

from aurumtrack.core.exceptions import AllRelaysFailedError, PayloadError
from aurumtrack.core.http import HttpClient
from aurumtrack.core.patterns import FallbackChain, FallbackState, RelayEndpoint

TARGET = "https://query1.finance.yahoo.com/v8/finance/chart/GC=F?interval=5m&range=5d"
ALLORIGINS = RelayEndpoint(name="allorigins", url="https://api.allorigins.win/get?url=", wraps=True, supports_post=False)
CORSPROXY = RelayEndpoint(name="corsproxy", url="https://corsproxy.io/?", wraps=False, supports_post=True)


def requested_urls(client: HttpClient) -> list[str]:
    return [call.args[1] for call in client.request.await_args_list]  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_direct_success_skips_relays(http_client, make_response) -> None:
    http_client.request.return_value = make_response({"ok": True})
    chain = FallbackChain(http_client, [ALLORIGINS, CORSPROXY], provider_name="chart")

    payload = await chain.fetch_json("GET", TARGET)

    assert payload == {"ok": True}
    http_client.request.assert_awaited_once_with("GET", TARGET)
    assert chain.state is FallbackState.COMPLETED
    assert chain.get_stats()["route_successes"] == {"direct": 1}


@pytest.mark.asyncio
async def test_wrapping_relay_envelope_is_unwrapped(http_client, make_response) -> None:
    http_client.request.side_effect = [
        make_response({"error": "blocked"}, status_code=403),
        make_response({"contents": json.dumps({"chart": {"result": []}})}),
    ]
    chain = FallbackChain(http_client, [ALLORIGINS, CORSPROXY], provider_name="chart")

    payload = await chain.fetch_json("GET", TARGET)

    assert payload == {"chart": {"result": []}}
    assert requested_urls(http_client) == [TARGET, ALLORIGINS.url + quote(TARGET, safe="")]
    assert chain.get_stats()["route_successes"] == {"allorigins": 1}


@pytest.mark.asyncio
async def test_transport_error_and_bad_envelope_move_to_next_relay(http_client, make_response) -> None:
    http_client.request.side_effect = [
        httpx.ConnectError("connection refused"),
        make_response({"contents": "<html>not json</html>"}),
        make_response({"price": 1}),
    ]
    chain = FallbackChain(http_client, [ALLORIGINS, CORSPROXY], provider_name="chart")

    payload = await chain.fetch_json("GET", TARGET)

    assert payload == {"price": 1}
    assert requested_urls(http_client)[-1] == CORSPROXY.url + quote(TARGET, safe="")


@pytest.mark.asyncio
async def test_malformed_json_body_is_a_route_failure(http_client, make_response) -> None:
    http_client.request.side_effect = [make_response(text="<html>"), make_response({"price": 2})]
    chain = FallbackChain(http_client, [CORSPROXY], provider_name="chart")

    assert await chain.fetch_json("GET", TARGET) == {"price": 2}


@pytest.mark.asyncio
async def test_validator_rejection_tries_next_route(http_client, make_response) -> None:
    http_client.request.side_effect = [make_response({"data": None}), make_response({"data": [1]})]
    chain = FallbackChain(http_client, [CORSPROXY], provider_name="scanner")

    def validate(payload):
        if not payload.get("data"):
            raise PayloadError("empty data", "scanner")
        return payload["data"]

    assert await chain.fetch_json("GET", TARGET, validate=validate) == [1]


@pytest.mark.asyncio
async def test_all_routes_failing_raises(http_client, make_response) -> None:
    http_client.request.side_effect = [
        make_response({}, status_code=500),
        make_response({}, status_code=502),
        httpx.ReadTimeout("timed out"),
    ]
    chain = FallbackChain(http_client, [ALLORIGINS, CORSPROXY], provider_name="chart")

    with pytest.raises(AllRelaysFailedError) as exc_info:
        await chain.fetch_json("GET", TARGET)

    error = exc_info.value
    assert error.error_code == "ALL_RELAYS_FAILED"
    assert error.provider_name == "chart"
    assert [route["route"] for route in error.failed_routes] == ["direct", "allorigins", "corsproxy"]
    stats = chain.get_stats()
    assert stats["failures"] == 1
    assert stats["state"] == "failed"


@pytest.mark.asyncio
async def test_post_skips_relays_without_post_support(http_client, make_response) -> None:
    http_client.request.side_effect = [make_response({}, status_code=429), make_response({"data": []})]
    chain = FallbackChain(http_client, [ALLORIGINS, CORSPROXY], provider_name="scanner")
    body = {"symbols": {"tickers": ["NSE:GOLDBEES"]}}

    payload = await chain.fetch_json("POST", "https://scanner.tradingview.com/india/scan", json_body=body)

    assert payload == {"data": []}
    assert [route.name if route else "direct" for route in chain.routes_for("POST")] == ["direct", "corsproxy"]
    assert http_client.request.await_count == 2
    assert http_client.request.await_args_list[1].kwargs == {"json": body}
    assert requested_urls(http_client)[1].startswith(CORSPROXY.url)


def test_relay_from_dict_defaults() -> None:
    relay = RelayEndpoint.from_dict({"url": "https://relay.test/?u="})

    assert relay.name == "https://relay.test/?u="
    assert not relay.wraps
    assert relay.supports_post
    assert relay.route("https://a.test/x?y=1") == "https://relay.test/?u=https%3A%2F%2Fa.test%2Fx%3Fy%3D1"


def test_unwrap_rejects_envelope_without_contents() -> None:
    with pytest.raises(PayloadError):
        ALLORIGINS.unwrap({"status": {"http_code": 200}})
