"""Service layer for allocation, projection and live valuation."""
from .allocation import BuyOnlyAllocator
from .fx import CurrencyRatesResult, CurrencyRatesService
from .live import LiveValuationModelBuilder, capture_snapshot
from .projection import MonthlyProjector, ProjectionResult, apply_buys, lock_month
from .quotes import QuoteService
from .targets import TargetNormalizer, set_category_target
from .valuation import (
    category_summary,
    check_target_sum,
    drift_alerts,
    enrich,
    portfolio_total,
    target_sum,
)

__all__ = [
    "BuyOnlyAllocator",
    "CurrencyRatesResult",
    "CurrencyRatesService",
    "LiveValuationModelBuilder",
    "MonthlyProjector",
    "ProjectionResult",
    "QuoteService",
    "TargetNormalizer",
    "apply_buys",
    "capture_snapshot",
    "category_summary",
    "check_target_sum",
    "drift_alerts",
    "enrich",
    "lock_month",
    "portfolio_total",
    "set_category_target",
    "target_sum",
]
