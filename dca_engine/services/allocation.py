"""Buy-only allocation of a monthly contribution."""
from __future__ import annotations

import math
from dataclasses import replace
from typing import List, Sequence

from ..models import Asset, Buy, EnrichedAsset
from ..money import round_half_up
from .valuation import enrich


def _as_buy(asset: EnrichedAsset, amount: float) -> Buy:
    return Buy(
        ticker=asset.ticker,
        name=asset.name,
        category=asset.category,
        current_value=asset.current_value,
        target_pct=asset.target_pct,
        actual_pct=asset.actual_pct,
        drift=asset.drift,
        gap=asset.gap,
        buy_amount=amount,
    )


class BuyOnlyAllocator:
    """Splits a budget across under-weight assets in proportion to their gaps.

    Nothing is ever sold. Each under-weight asset, largest monetary gap
    first, receives its rounded share of the budget; whatever rounding leaves
    over goes to the first recipient so the buys always add up to the budget.
    When no asset is under target the budget is split evenly across all
    assets instead.
    """

    def allocate(self, assets: Sequence[Asset], total: float, budget: float) -> List[Buy]:
        if budget <= 0:
            return []

        items = enrich(assets, total)
        # sorted() is stable, so equal gaps keep portfolio order
        under = sorted((item for item in items if item.gap > 0), key=lambda item: item.gap, reverse=True)
        total_gap = sum(item.gap for item in under)

        if not under or total_gap <= 0:
            return self._equal_split(items, budget)

        remaining = budget
        buys: List[Buy] = []
        for item in under:
            amount = min(round_half_up(item.gap / total_gap * budget), remaining)
            if amount > 0:
                buys.append(_as_buy(item, amount))
                remaining -= amount

        if remaining > 0 and buys:
            buys[0] = replace(buys[0], buy_amount=buys[0].buy_amount + remaining)
        return buys

    def _equal_split(self, items: List[EnrichedAsset], budget: float) -> List[Buy]:
        if not items:
            return []
        each = math.floor(budget / len(items))
        remainder = budget - each * len(items)
        buys = [
            _as_buy(item, each + (remainder if index == 0 else 0))
            for index, item in enumerate(items)
        ]
        return [buy for buy in buys if buy.buy_amount > 0]
