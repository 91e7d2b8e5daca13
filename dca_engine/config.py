"""Static configuration for the default portfolio, market data and live refresh."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import Asset, Category, CurrencyPairConfig
from .sanitize import sanitize_number

DEFAULT_ASSETS = (
    Asset("BTC", "BTC", Category.CRYPTO, current_value=178, target_pct=11.5),
    Asset("ETH", "ETH", Category.CRYPTO, current_value=87, target_pct=6.0),
    Asset("NVDA", "NVIDIA", Category.TECH, current_value=163, target_pct=6.67),
    Asset("AAPL", "Apple", Category.TECH, current_value=148, target_pct=6.67),
    Asset("MSFT", "Microsoft", Category.TECH, current_value=118, target_pct=6.67),
    Asset("KO", "Coca-Cola", Category.DIVIDEND, current_value=239, target_pct=8.75),
    Asset("JNJ", "J&J", Category.DIVIDEND, current_value=252, target_pct=8.75),
    Asset("SPY", "S&P 500 ETF", Category.ETF, current_value=434, target_pct=18.0),
    Asset("VWCE", "FTSE All World", Category.ETF, current_value=367, target_pct=15.0),
    Asset("VHYL", "Hi Div ETF", Category.ETF, current_value=249, target_pct=12.0),
)

DEFAULT_MONTHLY_BUDGET = 130
TARGET_SUM_TOLERANCE = 0.05
ALIGNED_DRIFT = 1.0
SNAPSHOT_LIMIT = 300

QUOTE_CACHE_TTL_SECONDS = 60
FX_CACHE_TTL_SECONDS = 90
QUOTE_SOURCE = "yahoo"

# Yahoo Finance symbols for tickers whose listing differs from the ticker.
DEFAULT_SYMBOL_MAP = {
    "BTC": "BTC-USD",
    "ETH": "ETH-USD",
    "VWCE": "VWCE.DE",
    "VHYL": "VHYL.L",
}

FX_SYMBOLS = ("USD", "EUR", "GBP", "CHF")

CURRENCY_SYMBOLS = {
    "€": "EUR",
    "$": "USD",
    "£": "GBP",
    "CHF": "CHF",
}


CURRENCY_TO_PAIR = {
    "USD": CurrencyPairConfig(currency="USD", symbol=None),
    "EUR": CurrencyPairConfig(currency="EUR", symbol="EURUSD=X", invert=True),
    "GBP": CurrencyPairConfig(currency="GBP", symbol="GBPUSD=X", invert=True),
    "CHF": CurrencyPairConfig(currency="CHF", symbol="USDCHF=X", invert=False),
}

REFRESH_SECONDS_MIN = 15
REFRESH_SECONDS_MAX = 300
DRIFT_THRESHOLD_MIN = 0.5
DRIFT_THRESHOLD_MAX = 10.0
DEFAULT_DRIFT_THRESHOLD = 2.0


@dataclass(frozen=True)
class LiveSettings:
    """Caller-side settings for periodic live valuation refreshes."""

    enabled: bool = False
    refresh_seconds: int = 60
    baseline_total: Optional[float] = None
    drift_threshold: float = DEFAULT_DRIFT_THRESHOLD

    @classmethod
    def from_raw(
        cls,
        *,
        enabled: object = False,
        refresh_seconds: object = None,
        baseline_total: object = None,
        drift_threshold: object = None,
    ) -> "LiveSettings":
        baseline = (
            None
            if baseline_total is None
            else sanitize_number(baseline_total, 0, 100_000_000, 0.0)
        )
        return cls(
            enabled=bool(enabled),
            refresh_seconds=int(
                sanitize_number(refresh_seconds, REFRESH_SECONDS_MIN, REFRESH_SECONDS_MAX, 60)
            ),
            baseline_total=baseline,
            drift_threshold=sanitize_number(
                drift_threshold, DRIFT_THRESHOLD_MIN, DRIFT_THRESHOLD_MAX, DEFAULT_DRIFT_THRESHOLD
            ),
        )


def resolve_currency(code_or_symbol: str) -> str:
    """Maps a display symbol such as ``€`` to its ISO code; ISO codes pass through."""
    text = str(code_or_symbol or "").strip()
    return CURRENCY_SYMBOLS.get(text, text.upper()[:3] or "USD")
