"""Live valuation of the current holdings from day-change quotes."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Mapping, Optional, Sequence, Tuple

from ..config import SNAPSHOT_LIMIT
from ..models import (
    Asset,
    Contribution,
    LiveModel,
    LiveValuationRow,
    PriceSnapshot,
    Quote,
    QuoteBatch,
)
from ..money import is_positive_number, round_money

NO_SOURCE = "none"


class LiveValuationModelBuilder:
    """Overlays quotes and FX rates onto the static holdings.

    The build never fails on partial data: a ticker without a quote moves 0%,
    a missing FX rate converts at 1.0 and an empty portfolio yields zero
    totals. Callers refresh periodically and may pass stale or partial quotes.
    """

    def build(
        self,
        assets: Sequence[Asset],
        quotes: Mapping[str, Quote],
        fx_rates: Mapping[str, Optional[float]],
        display_currency: str,
        baseline_total: Optional[float] = None,
        *,
        batch: Optional[QuoteBatch] = None,
    ) -> LiveModel:
        rate = fx_rates.get(display_currency)
        usd_to_currency = float(rate) if is_positive_number(rate) else 1.0

        rows: List[LiveValuationRow] = []
        for asset in assets:
            quote = quotes.get(asset.ticker)
            day_change_pct = quote.day_change_pct if quote else 0.0
            live_value = asset.current_value * (1 + day_change_pct / 100)
            quote_price = (
                quote.price_usd * usd_to_currency if quote and quote.price_usd else None
            )
            rows.append(
                LiveValuationRow(
                    ticker=asset.ticker,
                    name=asset.name,
                    category=asset.category,
                    source=quote.source if quote else NO_SOURCE,
                    day_change_pct=day_change_pct,
                    base_value=asset.current_value,
                    live_value=live_value,
                    daily_pnl=live_value - asset.current_value,
                    quote_price=quote_price,
                )
            )

        total_base = sum(asset.current_value for asset in assets)
        total_live = sum(row.live_value for row in rows)
        daily_pnl = total_live - total_base
        daily_pnl_pct = daily_pnl / total_base * 100 if total_base > 0 else 0.0

        baseline = float(baseline_total) if is_positive_number(baseline_total) else total_base
        total_return = total_live - baseline
        total_return_pct = total_return / baseline * 100 if baseline > 0 else 0.0

        contributions = [
            Contribution(
                ticker=row.ticker,
                name=row.name,
                daily_pnl=row.daily_pnl,
                contribution_pct=row.daily_pnl / daily_pnl * 100 if daily_pnl != 0 else 0.0,
            )
            for row in rows
        ]
        contributions.sort(key=lambda item: abs(item.daily_pnl), reverse=True)

        return LiveModel(
            rows=rows,
            total_base=total_base,
            total_live=total_live,
            daily_pnl=daily_pnl,
            daily_pnl_pct=daily_pnl_pct,
            total_return=total_return,
            total_return_pct=total_return_pct,
            contributions=contributions,
            fetched_at=batch.fetched_at if batch else None,
            unresolved=list(batch.unresolved) if batch else [],
            provider_health=dict(batch.provider_health) if batch else {},
        )

    def build_from_batch(
        self,
        assets: Sequence[Asset],
        batch: QuoteBatch,
        fx_rates: Mapping[str, Optional[float]],
        display_currency: str,
        baseline_total: Optional[float] = None,
    ) -> LiveModel:
        return self.build(
            assets,
            batch.quotes,
            fx_rates,
            display_currency,
            baseline_total,
            batch=batch,
        )


def capture_snapshot(
    snapshots: Sequence[PriceSnapshot],
    model: LiveModel,
    currency: str,
    captured_at: Optional[datetime] = None,
    limit: int = SNAPSHOT_LIMIT,
) -> Tuple[PriceSnapshot, List[PriceSnapshot]]:
    """Records the model's totals and returns it with the list trimmed to ``limit``."""
    stamp = captured_at or datetime.now(timezone.utc)
    snapshot = PriceSnapshot(
        captured_at=stamp.isoformat(),
        currency=currency,
        total_value=round_money(model.total_live),
        daily_pnl=round_money(model.daily_pnl),
        daily_pnl_pct=round_money(model.daily_pnl_pct),
    )
    return snapshot, [*snapshots, snapshot][-limit:]
