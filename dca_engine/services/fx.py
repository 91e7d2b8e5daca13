"""Currency rate retrieval services."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import yfinance as yf

from ..config import CURRENCY_TO_PAIR, FX_CACHE_TTL_SECONDS, FX_SYMBOLS
from ..messages import MessageLevel, ServiceMessage
from ..models import CurrencyPairConfig

LOGGER = logging.getLogger(__name__)


def _sanitize_code(raw: object) -> str:
    code = "".join(ch for ch in str(raw or "").upper() if "A" <= ch <= "Z")[:3]
    return code or "USD"


@dataclass(frozen=True)
class CurrencyRatesResult:
    """Rates from ``base`` to each requested currency; ``None`` when unavailable."""

    base: str
    rates: Dict[str, Optional[float]]
    messages: List[ServiceMessage] = field(default_factory=list)


class CurrencyRatesService:
    """Fetches the latest USD-relative rates and converts them to the requested base."""

    def __init__(
        self,
        pair_config: Mapping[str, CurrencyPairConfig] | None = None,
        ttl_seconds: float = FX_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._pair_config = dict(pair_config or CURRENCY_TO_PAIR)
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: Dict[Tuple[str, Tuple[str, ...]], Tuple[float, CurrencyRatesResult]] = {}

    def load_rates(self, base: str = "USD", symbols: Iterable[str] = FX_SYMBOLS) -> CurrencyRatesResult:
        base = _sanitize_code(base)
        codes = tuple(dict.fromkeys(_sanitize_code(symbol) for symbol in symbols))[:10]

        now = self._clock()
        cache_key = (base, codes)
        cached = self._cache.get(cache_key)
        if cached and cached[0] > now:
            return cached[1]

        messages: List[ServiceMessage] = []
        usd_rates: Dict[str, Optional[float]] = {}
        for currency in dict.fromkeys((base, *codes)):
            usd_rates[currency] = self._usd_rate(currency, messages)

        base_rate = usd_rates.get(base)
        rates: Dict[str, Optional[float]] = {base: 1.0}
        for currency in codes:
            if currency == base:
                continue
            target_rate = usd_rates.get(currency)
            if base_rate and target_rate:
                rates[currency] = target_rate / base_rate
            else:
                rates[currency] = None

        result = CurrencyRatesResult(base=base, rates=rates, messages=messages)
        self._cache = {key: entry for key, entry in self._cache.items() if entry[0] > now}
        self._cache[cache_key] = (now + self._ttl_seconds, result)
        return result

    def _usd_rate(self, currency: str, messages: List[ServiceMessage]) -> Optional[float]:
        """Units of ``currency`` per 1 USD."""
        if currency == "USD":
            return 1.0

        config = self._pair_config.get(currency)
        if not config or not config.symbol:
            messages.append(
                ServiceMessage(
                    MessageLevel.WARNING,
                    f"No currency pair configured for {currency}; converting at 1.0.",
                    code="fx_unavailable",
                )
            )
            return None

        try:
            hist = yf.Ticker(config.symbol).history(period="5d")
            if hist.empty or "Close" not in hist:
                raise ValueError("empty series")
            closes = hist["Close"].dropna().astype(float)
            closes = closes[closes > 0]
            if closes.empty:
                raise ValueError("series without usable data")
            rate = float(closes.iloc[-1])
        except Exception as exc:  # noqa: BLE001 - reported as a message
            LOGGER.warning("fx rate unavailable: currency=%s symbol=%s error=%s", currency, config.symbol, exc)
            messages.append(
                ServiceMessage(
                    MessageLevel.WARNING,
                    f"Failed to load {currency}/USD ({config.symbol}): {exc}. Converting at 1.0.",
                    code="fx_unavailable",
                )
            )
            return None
        return 1 / rate if config.invert else rate
