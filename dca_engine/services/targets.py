"""Target percentage maintenance."""
from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

from ..models import Asset, Category
from ..money import round_money
from ..sanitize import clamp


class TargetNormalizer:
    """Rescales targets so they add up to exactly 100.

    Every target but the last is scaled and rounded to 2 decimals; the last
    asset takes ``100`` minus the others, so it absorbs the rounding residue.
    """

    def normalize(self, assets: Sequence[Asset]) -> List[Asset]:
        current_sum = sum(asset.target_pct for asset in assets)
        if current_sum == 0:
            return list(assets)

        factor = 100 / current_sum
        running_sum = 0.0
        normalized: List[Asset] = []
        last_index = len(assets) - 1
        for index, asset in enumerate(assets):
            if index == last_index:
                target = round_money(100 - running_sum)
            else:
                target = round_money(asset.target_pct * factor)
                running_sum += target
            normalized.append(replace(asset, target_pct=target))
        return normalized


def set_category_target(
    assets: Sequence[Asset], category: Category, new_total: float
) -> List[Asset]:
    """Spreads ``new_total`` over the category's assets, keeping their relative weights.

    Assets whose targets are all 0 share the total evenly.
    """
    members = [asset for asset in assets if asset.category is category]
    if not members:
        return list(assets)

    category_total = sum(asset.target_pct for asset in members)
    updated: List[Asset] = []
    for asset in assets:
        if asset.category is not category:
            updated.append(asset)
            continue
        share = asset.target_pct / category_total if category_total > 0 else 1 / len(members)
        updated.append(replace(asset, target_pct=clamp(round_money(share * new_total), 0, 100)))
    return updated
