"""Live quote retrieval from Yahoo Finance."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

import pandas as pd
import yfinance as yf

from ..config import DEFAULT_SYMBOL_MAP, QUOTE_CACHE_TTL_SECONDS, QUOTE_SOURCE
from ..models import Asset, Category, Quote, QuoteBatch
from ..sanitize import sanitize_ticker

LOGGER = logging.getLogger(__name__)


def yahoo_symbol(asset: Asset, symbol_map: Mapping[str, str] = DEFAULT_SYMBOL_MAP) -> str:
    ticker = sanitize_ticker(asset.ticker)
    if ticker in symbol_map:
        return symbol_map[ticker]
    if asset.category is Category.CRYPTO:
        return f"{ticker}-USD"
    return ticker


def day_change_from_closes(closes: pd.Series) -> Optional[Tuple[float, float]]:
    """Last close and its percentage change from the previous close."""
    closes = closes.dropna().astype(float)
    if closes.empty:
        return None
    price = float(closes.iloc[-1])
    if len(closes) < 2:
        return price, 0.0
    previous = float(closes.iloc[-2])
    change = (price - previous) / previous * 100 if previous > 0 else 0.0
    return price, change


class QuoteService:
    """Resolves the day change of each holding; unresolved tickers are reported, not raised."""

    def __init__(
        self,
        symbol_map: Optional[Mapping[str, str]] = None,
        ttl_seconds: float = QUOTE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._symbol_map = dict(symbol_map or DEFAULT_SYMBOL_MAP)
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: Dict[Tuple[str, ...], Tuple[float, QuoteBatch]] = {}

    def fetch(self, assets: Iterable[Asset]) -> QuoteBatch:
        requested = [asset for asset in assets if sanitize_ticker(asset.ticker)]
        cache_key = tuple(sorted(sanitize_ticker(asset.ticker) for asset in requested))

        now = self._clock()
        cached = self._cache.get(cache_key)
        if cached and cached[0] > now:
            payload = cached[1]
            return QuoteBatch(
                quotes=dict(payload.quotes),
                unresolved=list(payload.unresolved),
                provider_health=dict(payload.provider_health),
                fetched_at=payload.fetched_at,
                cached=True,
            )

        quotes: Dict[str, Quote] = {}
        unresolved = []
        failures = 0
        for asset in requested:
            quote = self._fetch_single(asset)
            if quote is None:
                failures += 1
                unresolved.append(asset.ticker)
            else:
                quotes[asset.ticker] = quote

        if not requested:
            health = "not-used"
        elif quotes:
            health = "ok"
        else:
            health = "error"

        batch = QuoteBatch(
            quotes=quotes,
            unresolved=unresolved,
            provider_health={QUOTE_SOURCE: health},
            fetched_at=datetime.now(timezone.utc).isoformat(),
        )
        LOGGER.info(
            "quotes refreshed: requested=%s resolved=%s unresolved=%s",
            len(requested),
            len(quotes),
            failures,
        )
        self._cache = {key: entry for key, entry in self._cache.items() if entry[0] > now}
        self._cache[cache_key] = (now + self._ttl_seconds, batch)
        return batch

    def _fetch_single(self, asset: Asset) -> Optional[Quote]:
        symbol = yahoo_symbol(asset, self._symbol_map)
        try:
            hist = yf.Ticker(symbol).history(period="5d")
            if hist.empty or "Close" not in hist:
                raise ValueError("no closing prices")
            resolved = day_change_from_closes(hist["Close"])
            if resolved is None:
                raise ValueError("no usable closing prices")
        except Exception as exc:  # noqa: BLE001 - ticker reported as unresolved
            LOGGER.warning("quote unavailable: ticker=%s symbol=%s error=%s", asset.ticker, symbol, exc)
            return None
        price, change = resolved
        return Quote(price_usd=price, day_change_pct=change, source=QUOTE_SOURCE)
