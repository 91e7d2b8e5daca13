"""Valuation of holdings against their target allocation."""
from __future__ import annotations

from typing import Iterable, List, Sequence

from ..config import DEFAULT_DRIFT_THRESHOLD, TARGET_SUM_TOLERANCE
from ..messages import MessageLevel, ServiceMessage
from ..models import Asset, Buy, Category, CategorySummary, DriftAlert, EnrichedAsset


def portfolio_total(assets: Iterable[Asset]) -> float:
    return sum(asset.current_value for asset in assets)


def target_sum(assets: Iterable[Asset]) -> float:
    return sum(asset.target_pct for asset in assets)


def enrich(assets: Iterable[Asset], total: float) -> List[EnrichedAsset]:
    """Derives actual percentage, drift and monetary gap for each asset.

    Input order is preserved and the assets are not modified. With a
    non-positive ``total`` every actual percentage is 0 while drift and gap
    are still computed from the target and current value.
    """
    enriched: List[EnrichedAsset] = []
    for asset in assets:
        actual_pct = asset.current_value / total * 100 if total > 0 else 0.0
        enriched.append(
            EnrichedAsset(
                ticker=asset.ticker,
                name=asset.name,
                category=asset.category,
                current_value=asset.current_value,
                target_pct=asset.target_pct,
                actual_pct=actual_pct,
                drift=actual_pct - asset.target_pct,
                gap=asset.target_pct / 100 * total - asset.current_value,
            )
        )
    return enriched


def check_target_sum(
    assets: Sequence[Asset], tolerance: float = TARGET_SUM_TOLERANCE
) -> List[ServiceMessage]:
    """Warns when the targets do not add up to 100; computation is never blocked."""
    total_target = target_sum(assets)
    if abs(total_target - 100) <= tolerance:
        return []
    return [
        ServiceMessage(
            MessageLevel.WARNING,
            f"Target allocations sum to {total_target:.2f}%; they should equal 100%.",
            code="target_sum",
        )
    ]


def drift_alerts(
    enriched: Iterable[EnrichedAsset],
    first_month_buys: Iterable[Buy],
    threshold: float = DEFAULT_DRIFT_THRESHOLD,
) -> List[DriftAlert]:
    """Assets drifting at least ``threshold`` points, largest drift first."""
    suggested = {buy.ticker: buy.buy_amount for buy in first_month_buys}
    drifting = [asset for asset in enriched if abs(asset.drift) >= threshold]
    drifting.sort(key=lambda asset: abs(asset.drift), reverse=True)
    return [
        DriftAlert(asset=asset, suggested_buy=suggested.get(asset.ticker, 0.0))
        for asset in drifting
    ]


def category_summary(assets: Sequence[Asset]) -> List[CategorySummary]:
    summaries: List[CategorySummary] = []
    for category in Category:
        members = [asset for asset in assets if asset.category is category]
        if not members:
            continue
        summaries.append(
            CategorySummary(
                category=category,
                tickers=tuple(asset.ticker for asset in members),
                target_total=target_sum(members),
                current_total=portfolio_total(members),
            )
        )
    return summaries
