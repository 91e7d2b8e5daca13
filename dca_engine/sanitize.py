"""Input clamping applied before data reaches the engine."""
from __future__ import annotations

import math
import re
from typing import Iterable, List, Optional

from .models import Asset, Category

TICKER_MAX_LENGTH = 10
NAME_MAX_LENGTH = 40
MAX_ASSET_VALUE = 10_000_000
MAX_BUDGET = 1_000_000
DEFAULT_PROJECTION_MONTHS = 3
MAX_PROJECTION_MONTHS = 12

_TICKER_STRIP = re.compile(r"[^A-Z0-9.&]")
_NAME_STRIP = re.compile(r"[<>\"'`]")


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def sanitize_number(raw: object, low: float, high: float, fallback: float) -> float:
    """Parses ``raw`` as a float clamped to ``[low, high]``; ``fallback`` if unusable."""
    try:
        number = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return clamp(number, low, high)


def sanitize_ticker(raw: object, max_length: int = TICKER_MAX_LENGTH) -> str:
    return _TICKER_STRIP.sub("", str(raw or "").upper())[:max_length]


def sanitize_name(raw: object, max_length: int = NAME_MAX_LENGTH) -> str:
    if not isinstance(raw, str):
        return ""
    return _NAME_STRIP.sub("", raw).strip()[:max_length]


def clamp_months(raw: object, default: int = DEFAULT_PROJECTION_MONTHS) -> int:
    return int(sanitize_number(raw, 1, MAX_PROJECTION_MONTHS, default))


def clamp_budget(raw: object, default: float) -> float:
    return sanitize_number(raw, 1, MAX_BUDGET, default)


def sanitize_asset(
    *,
    ticker: object,
    name: object = None,
    category: object = None,
    current_value: object = 0,
    target_pct: object = 0,
) -> Optional[Asset]:
    """Builds an ``Asset`` from loosely typed fields, or ``None`` without a usable ticker."""
    clean_ticker = sanitize_ticker(ticker)
    if not clean_ticker:
        return None
    return Asset(
        ticker=clean_ticker,
        name=sanitize_name(name) or clean_ticker,
        category=category if isinstance(category, Category) else Category.parse(category),
        current_value=sanitize_number(current_value, 0, MAX_ASSET_VALUE, 0.0),
        target_pct=sanitize_number(target_pct, 0, 100, 0.0),
    )


def dedupe_assets(assets: Iterable[Asset]) -> List[Asset]:
    """Drops assets whose ticker was already seen; the first occurrence wins."""
    seen: set[str] = set()
    unique: List[Asset] = []
    for asset in assets:
        key = asset.ticker.upper()
        if key in seen:
            continue
        seen.add(key)
        unique.append(asset)
    return unique
