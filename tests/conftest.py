"""Pytest configuration for the aurumtrack test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from aurumtrack.core.http import HttpClient
from aurumtrack.core.services.calendars import TradingCalendar

# Friday 2025-01-03 is followed by a Monday holiday.
TEST_HOLIDAYS = frozenset({date(2025, 1, 6), date(2025, 1, 10)})


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--aurumtrack-run-integration",
        action="store_true",
        default=False,
        help="Run aurumtrack integration tests that hit live quote endpoints.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: marks aurumtrack tests requiring network access",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--aurumtrack-run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="integration tests require --aurumtrack-run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def calendar() -> TradingCalendar:
    return TradingCalendar(holidays=TEST_HOLIDAYS)


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    def _make(payload: Any = None, status_code: int = 200, text: str | None = None) -> httpx.Response:
        request = httpx.Request("GET", "https://quotes.test/")
        if text is not None:
            return httpx.Response(status_code, text=text, request=request)
        return httpx.Response(status_code, json=payload, request=request)

    return _make


@pytest.fixture
def http_client() -> HttpClient:
    """HTTP client whose ``request`` is an ``AsyncMock``; set ``side_effect`` per test."""

    client = HttpClient()
    client.request = AsyncMock()  # type: ignore[method-assign]
    return client


@pytest.fixture
def chart_payload() -> Callable[..., dict[str, Any]]:
    def _build(
        price: float | None,
        meta: dict[str, Any] | None = None,
        timestamps: Sequence[int] = (),
        closes: Sequence[float | None] = (),
    ) -> dict[str, Any]:
        result_meta: dict[str, Any] = {"regularMarketPrice": price}
        result_meta.update(meta or {})
        return {
            "chart": {
                "result": [
                    {
                        "meta": result_meta,
                        "timestamp": list(timestamps),
                        "indicators": {"quote": [{"close": list(closes)}]},
                    }
                ],
                "error": None,
            }
        }

    return _build
