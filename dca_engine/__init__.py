"""Buy-only DCA allocation and projection engine."""

from .config import DEFAULT_ASSETS, DEFAULT_MONTHLY_BUDGET, CURRENCY_TO_PAIR, LiveSettings
from .messages import MessageLevel, ServiceMessage
from .models import (
    Asset,
    Buy,
    Category,
    Contribution,
    DriftAlert,
    EnrichedAsset,
    LiveModel,
    LiveValuationRow,
    MonthRecord,
    PriceSnapshot,
    ProjectionStep,
    Quote,
    QuoteBatch,
)
from .repositories import PortfolioRepository
from .services import (
    BuyOnlyAllocator,
    CurrencyRatesResult,
    CurrencyRatesService,
    LiveValuationModelBuilder,
    MonthlyProjector,
    ProjectionResult,
    QuoteService,
    TargetNormalizer,
    enrich,
)

__all__ = [
    "Asset",
    "Buy",
    "BuyOnlyAllocator",
    "CURRENCY_TO_PAIR",
    "Category",
    "Contribution",
    "CurrencyRatesResult",
    "CurrencyRatesService",
    "DEFAULT_ASSETS",
    "DEFAULT_MONTHLY_BUDGET",
    "DriftAlert",
    "EnrichedAsset",
    "LiveModel",
    "LiveSettings",
    "LiveValuationModelBuilder",
    "LiveValuationRow",
    "MessageLevel",
    "MonthRecord",
    "MonthlyProjector",
    "PortfolioRepository",
    "PriceSnapshot",
    "ProjectionResult",
    "ProjectionStep",
    "Quote",
    "QuoteBatch",
    "QuoteService",
    "ServiceMessage",
    "TargetNormalizer",
    "enrich",
]
