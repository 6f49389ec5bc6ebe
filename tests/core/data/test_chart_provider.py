from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest

from aurumtrack.core.config import AnchorConfig
from aurumtrack.core.data.providers import ChartQuoteProvider
from aurumtrack.core.data.providers.chart import extract_chart_result, parse_chart_result, resolve_previous_close
from aurumtrack.core.exceptions import PayloadError
from aurumtrack.core.models import AnchorQuality, Instrument
from aurumtrack.core.patterns import FallbackChain

BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart/"

GOLD = Instrument(key="xau", label="Gold", symbol="GC=F", interval="5m", lookback="5d", track_anchor=True, currency="USD")
GOLDBEES = Instrument(key="goldbees", label="Gold BeES", symbol="GOLDBEES.NS")
MCX = Instrument(key="mcx_goldm", label="MCX Gold Mini", scanner_symbol="MCX:GOLDM1!")


def epoch(hour: int, minute: int, day: int = 8) -> int:
    return int(datetime(2025, 1, day, hour, minute, tzinfo=timezone.utc).timestamp())


@pytest.fixture
def provider(http_client) -> ChartQuoteProvider:
    return ChartQuoteProvider(FallbackChain(http_client, provider_name="chart"), BASE_URL, AnchorConfig())


def test_previous_close_precedence() -> None:
    assert resolve_previous_close({"previousClose": 105.2, "chartPreviousClose": 104.0}) == 105.2
    assert (
        resolve_previous_close(
            {"regularMarketPreviousClose": None, "previousClose": 105.2, "chartPreviousClose": 104.0}
        )
        == 105.2
    )
    assert resolve_previous_close({"regularMarketPreviousClose": 106.0, "previousClose": 105.2}) == 106.0
    assert resolve_previous_close({"chartPreviousClose": 104.0}) == 104.0
    assert resolve_previous_close({}) is None


def test_extract_chart_result_rejects_error_payload() -> None:
    with pytest.raises(PayloadError):
        extract_chart_result({"chart": {"result": None, "error": {"code": "Not Found"}}})
    with pytest.raises(PayloadError):
        extract_chart_result({"chart": {"result": [{"timestamp": []}]}})


def test_parse_chart_result_detects_anchor(chart_payload) -> None:
    payload = chart_payload(
        2650.0,
        meta={"previousClose": 2620.0},
        timestamps=[epoch(9, 30), epoch(10, 0), epoch(12, 0)],
        closes=[2630.0, 2640.0, 2648.0],
    )
    result = extract_chart_result(payload)

    quote = parse_chart_result(GOLD, result, AnchorConfig())

    assert quote.current_price == 2650.0
    assert quote.previous_close == 2620.0
    assert quote.anchor_price == 2640.0
    assert quote.anchor_quality is AnchorQuality.INTRADAY
    assert quote.provider == "chart"


def test_parse_chart_result_anchor_falls_back_to_previous_close(chart_payload) -> None:
    payload = chart_payload(2650.0, meta={"chartPreviousClose": 2620.0}, timestamps=[epoch(14, 0)], closes=[2648.0])

    quote = parse_chart_result(GOLD, extract_chart_result(payload), AnchorConfig())

    assert quote.anchor_price == 2620.0
    assert quote.anchor_quality is AnchorQuality.PREVIOUS_CLOSE


def test_parse_chart_result_without_anchor_tracking(chart_payload) -> None:
    payload = chart_payload(101.5, meta={"previousClose": 100.0}, timestamps=[epoch(10, 0)], closes=[101.0])

    quote = parse_chart_result(GOLDBEES, extract_chart_result(payload), AnchorConfig())

    assert quote.anchor_price is None
    assert quote.anchor_quality is AnchorQuality.MISSING


def test_current_price_falls_back_to_last_valid_close(chart_payload) -> None:
    payload = chart_payload(None, timestamps=[epoch(10, 0), epoch(10, 5)], closes=[101.0, None])

    quote = parse_chart_result(GOLDBEES, extract_chart_result(payload), AnchorConfig())

    assert quote.current_price == 101.0


def test_build_url(provider: ChartQuoteProvider) -> None:
    assert provider.build_url(GOLD) == f"{BASE_URL}GC=F?interval=5m&range=5d"
    assert provider.build_url(GOLDBEES) == f"{BASE_URL}GOLDBEES.NS?interval=1d&range=5d"


@pytest.mark.asyncio
async def test_failed_instrument_does_not_block_others(provider, http_client, make_response, chart_payload) -> None:
    def route(method: str, url: str, **kwargs):
        if "GC%3DF" in url or "GC=F" in url:
            raise httpx.ConnectError("unreachable")
        return make_response(chart_payload(101.5, meta={"previousClose": 100.0}))

    http_client.request.side_effect = route

    quotes = await provider.fetch_quotes([GOLD, GOLDBEES])

    assert quotes[0] is None
    assert quotes[1] is not None
    assert quotes[1].current_price == 101.5
    assert quotes[1].previous_close == 100.0


@pytest.mark.asyncio
async def test_iter_quotes_yields_unsupported_instruments_as_missing(
    provider, http_client, make_response, chart_payload
) -> None:
    http_client.request.return_value = make_response(chart_payload(101.5, meta={"previousClose": 100.0}))

    results = {instrument.key: quote async for instrument, quote in provider.iter_quotes([MCX, GOLDBEES])}

    assert results["mcx_goldm"] is None
    assert results["goldbees"] is not None
    http_client.request.assert_awaited_once()


@pytest.mark.asyncio
async def test_error_payload_counts_as_failure(provider, http_client, make_response) -> None:
    http_client.request.return_value = make_response({"chart": {"result": None, "error": {"code": "Not Found"}}})

    assert await provider.fetch_quotes([GOLDBEES]) == [None]
