"""Domain models for the DCA allocation engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Category(str, Enum):
    CRYPTO = "Crypto"
    TECH = "Tech"
    DIVIDEND = "Dividend"
    ETF = "ETF"
    BOND = "Bond"
    COMMODITY = "Commodity"
    OTHER = "Other"

    @classmethod
    def parse(cls, raw: object) -> "Category":
        """Returns the matching category, or ``OTHER`` for anything unknown."""
        text = str(raw or "").strip().lower()
        for category in cls:
            if category.value.lower() == text:
                return category
        return cls.OTHER


@dataclass(frozen=True)
class Asset:
    """A single portfolio holding."""

    ticker: str
    name: str
    category: Category
    current_value: float
    target_pct: float


@dataclass(frozen=True)
class EnrichedAsset(Asset):
    """An asset with allocation figures derived from the portfolio total."""

    actual_pct: float = 0.0
    drift: float = 0.0
    gap: float = 0.0

    def as_asset(self) -> Asset:
        return Asset(
            ticker=self.ticker,
            name=self.name,
            category=self.category,
            current_value=self.current_value,
            target_pct=self.target_pct,
        )


@dataclass(frozen=True)
class Buy(EnrichedAsset):
    """Amount of one month's budget assigned to an under-weight asset."""

    buy_amount: float = 0.0


@dataclass(frozen=True)
class ProjectionStep:
    """One simulated month, holdings captured before the month's buys."""

    month_index: int
    buys: Tuple[Buy, ...]
    total: float
    holdings: Tuple[Asset, ...]

    @property
    def month(self) -> int:
        return self.month_index + 1

    @property
    def spent(self) -> float:
        return sum(buy.buy_amount for buy in self.buys)

    def buy_for(self, ticker: str) -> float:
        for buy in self.buys:
            if buy.ticker == ticker:
                return buy.buy_amount
        return 0.0


@dataclass(frozen=True)
class DriftAlert:
    asset: EnrichedAsset
    suggested_buy: float


@dataclass(frozen=True)
class CategorySummary:
    category: Category
    tickers: Tuple[str, ...]
    target_total: float
    current_total: float


@dataclass(frozen=True)
class MonthRecord:
    """History entry written when a projected month is applied to the holdings."""

    label: str
    holdings: Tuple[Asset, ...]
    total: float
    buys: Tuple[Buy, ...]
    completed_at: str
    note: str = ""


@dataclass(frozen=True)
class CurrencyPairConfig:
    """Yahoo FX pair quoting a currency against USD."""

    currency: str
    symbol: Optional[str]
    invert: bool = False


@dataclass(frozen=True)
class Quote:
    price_usd: float
    day_change_pct: float
    source: str


@dataclass
class QuoteBatch:
    """Quotes resolved by a quote source for one refresh."""

    quotes: Dict[str, Quote] = field(default_factory=dict)
    unresolved: List[str] = field(default_factory=list)
    provider_health: Dict[str, str] = field(default_factory=dict)
    fetched_at: Optional[str] = None
    cached: bool = False


@dataclass(frozen=True)
class LiveValuationRow:
    ticker: str
    name: str
    category: Category
    source: str
    day_change_pct: float
    base_value: float
    live_value: float
    daily_pnl: float
    quote_price: Optional[float] = None


@dataclass(frozen=True)
class Contribution:
    ticker: str
    name: str
    daily_pnl: float
    contribution_pct: float


@dataclass
class LiveModel:
    """Live totals and per-asset movement for the current holdings."""

    rows: List[LiveValuationRow]
    total_base: float
    total_live: float
    daily_pnl: float
    daily_pnl_pct: float
    total_return: float
    total_return_pct: float
    contributions: List[Contribution]
    fetched_at: Optional[str] = None
    unresolved: List[str] = field(default_factory=list)
    provider_health: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PriceSnapshot:
    captured_at: str
    currency: str
    total_value: float
    daily_pnl: float
    daily_pnl_pct: float
