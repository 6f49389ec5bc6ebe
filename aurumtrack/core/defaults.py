"""Bundled instrument set, prediction pairs and NSE holiday table."""

from datetime import date

from aurumtrack.core.models import Instrument, PredictionModel

CHART_API_URL = "https://query1.finance.yahoo.com/v8/finance/chart/"
SCANNER_API_URL = "https://scanner.tradingview.com/"

DEFAULT_RELAYS: list[dict[str, object]] = [
    {"name": "allorigins", "url": "https://api.allorigins.win/get?url=", "wraps": True, "supports_post": False},
    {"name": "corsproxy", "url": "https://corsproxy.io/?", "wraps": False, "supports_post": True},
]

# 15:30 IST is 10:00 UTC
DEFAULT_CUTOFF_MINUTE_UTC = 10 * 60

# Not the troy ounce (31.1035 g). Kept on purpose as a product decision.
GRAMS_PER_OUNCE = 28.3

USDINR_KEY = "usdinr"

DEFAULT_INSTRUMENTS: tuple[Instrument, ...] = (
    Instrument(
        key="xau",
        label="Gold (USD/oz)",
        symbol="GC=F",
        scanner_symbol="COMEX:GC1!",
        scanner_market="futures",
        interval="5m",
        lookback="5d",
        track_anchor=True,
        currency="USD",
    ),
    Instrument(
        key="xag",
        label="Silver (USD/oz)",
        symbol="SI=F",
        scanner_symbol="COMEX:SI1!",
        scanner_market="futures",
        interval="5m",
        lookback="5d",
        track_anchor=True,
        currency="USD",
    ),
    Instrument(
        key=USDINR_KEY,
        label="USD/INR",
        symbol="USDINR=X",
        scanner_symbol="FX_IDC:USDINR",
        scanner_market="forex",
        decimals=4,
    ),
    Instrument(key="goldbees", label="Gold BeES", symbol="GOLDBEES.NS", scanner_symbol="NSE:GOLDBEES", scanner_market="india"),
    Instrument(
        key="silverbees",
        label="Silver BeES",
        symbol="SILVERBEES.NS",
        scanner_symbol="NSE:SILVERBEES",
        scanner_market="india",
    ),
    Instrument(
        key="ingold",
        label="India Gold (INR/g)",
        symbol="IVZINGOLD.NS",
        scanner_symbol="NSE:IVZINGOLD",
        scanner_market="india",
        decimals=0,
    ),
    Instrument(
        key="insilver",
        label="India Silver (INR/g)",
        symbol="SILVERIETF.NS",
        scanner_symbol="NSE:SILVERIETF",
        scanner_market="india",
        decimals=0,
    ),
    Instrument(key="mcx_goldm", label="MCX Gold Mini", scanner_symbol="MCX:GOLDM1!", scanner_market="india", decimals=0),
    Instrument(key="mcx_silverm", label="MCX Silver Mini", scanner_symbol="MCX:SILVERM1!", scanner_market="india", decimals=0),
)

DEFAULT_PREDICTION_MODELS: tuple[PredictionModel, ...] = (
    PredictionModel(international_key="xau", local_key="goldbees", coefficient=0.88, confidence=0.9),
    PredictionModel(international_key="xag", local_key="silverbees", coefficient=0.85, confidence=0.8),
)

# Spot-vs-local premium is shown for these (local_key, international_key) pairs.
PREMIUM_PAIRS: dict[str, str] = {"ingold": "xau", "insilver": "xag"}

NSE_HOLIDAYS: frozenset[date] = frozenset(
    {
        # 2025
        date(2025, 2, 26),
        date(2025, 3, 14),
        date(2025, 3, 31),
        date(2025, 4, 10),
        date(2025, 4, 14),
        date(2025, 4, 18),
        date(2025, 5, 1),
        date(2025, 8, 15),
        date(2025, 8, 27),
        date(2025, 10, 2),
        date(2025, 10, 21),
        date(2025, 10, 22),
        date(2025, 11, 5),
        date(2025, 12, 25),
        # 2026
        date(2026, 1, 26),
        date(2026, 3, 3),
        date(2026, 3, 26),
        date(2026, 3, 31),
        date(2026, 4, 3),
        date(2026, 4, 14),
        date(2026, 5, 1),
        date(2026, 5, 28),
        date(2026, 6, 26),
        date(2026, 9, 14),
        date(2026, 10, 2),
        date(2026, 10, 20),
        date(2026, 11, 10),
        date(2026, 11, 24),
        date(2026, 12, 25),
    }
)
