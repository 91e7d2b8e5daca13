"""Multi-month projection of recurring buy-only contributions."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from ..config import ALIGNED_DRIFT
from ..models import Asset, Buy, EnrichedAsset, MonthRecord, ProjectionStep
from ..money import round_money
from ..sanitize import sanitize_name
from .allocation import BuyOnlyAllocator
from .valuation import enrich

LOGGER = logging.getLogger(__name__)

STEP_COLUMNS = [
    "Month",
    "Ticker",
    "Name",
    "Category",
    "Current",
    "Target %",
    "Actual %",
    "Gap",
    "Buy",
    "Month Total",
]


@dataclass(frozen=True)
class ProjectionResult:
    steps: Tuple[ProjectionStep, ...]
    final_portfolio: Tuple[EnrichedAsset, ...]
    final_total: float

    @property
    def average_abs_drift(self) -> float:
        if not self.final_portfolio:
            return 0.0
        return sum(abs(asset.drift) for asset in self.final_portfolio) / len(self.final_portfolio)

    @property
    def max_abs_drift(self) -> float:
        return max([0.0, *(abs(asset.drift) for asset in self.final_portfolio)])

    @property
    def aligned_count(self) -> int:
        return sum(1 for asset in self.final_portfolio if abs(asset.drift) < ALIGNED_DRIFT)

    def steps_frame(self) -> pd.DataFrame:
        """One row per projected buy, in month then allocation order."""
        rows = [
            {
                "Month": step.month,
                "Ticker": buy.ticker,
                "Name": buy.name,
                "Category": buy.category.value,
                "Current": buy.current_value,
                "Target %": buy.target_pct,
                "Actual %": round(buy.actual_pct, 2),
                "Gap": round(buy.gap, 2),
                "Buy": buy.buy_amount,
                "Month Total": step.total,
            }
            for step in self.steps
            for buy in step.buys
        ]
        return pd.DataFrame(rows, columns=STEP_COLUMNS)


def apply_buys(assets: Sequence[Asset], buys: Sequence[Buy]) -> List[Asset]:
    """Returns new holdings with each buy added to its asset's current value."""
    amounts = {buy.ticker: buy.buy_amount for buy in buys}
    updated: List[Asset] = []
    for asset in assets:
        amount = amounts.get(asset.ticker)
        if amount is None:
            updated.append(asset)
        else:
            updated.append(replace(asset, current_value=round_money(asset.current_value + amount)))
    return updated


class MonthlyProjector:
    """Runs the allocator month after month, feeding each month's holdings into the next."""

    def __init__(self, allocator: Optional[BuyOnlyAllocator] = None) -> None:
        self._allocator = allocator or BuyOnlyAllocator()

    def project(
        self,
        assets: Sequence[Asset],
        total: float,
        monthly_budget: float,
        months: int,
    ) -> ProjectionResult:
        holdings: List[Asset] = list(assets)
        working_total = total
        steps: List[ProjectionStep] = []

        for month_index in range(months):
            buys = self._allocator.allocate(holdings, working_total, monthly_budget)
            steps.append(
                ProjectionStep(
                    month_index=month_index,
                    buys=tuple(buys),
                    total=working_total,
                    holdings=tuple(holdings),
                )
            )
            holdings = apply_buys(holdings, buys)
            working_total = round_money(working_total + monthly_budget)
            LOGGER.debug(
                "projected month: month=%s buys=%s total=%s",
                month_index + 1,
                len(buys),
                working_total,
            )

        return ProjectionResult(
            steps=tuple(steps),
            final_portfolio=tuple(enrich(holdings, working_total)),
            final_total=working_total,
        )


def lock_month(
    assets: Sequence[Asset],
    result: ProjectionResult,
    history_length: int,
    note: str = "",
    completed_at: Optional[datetime] = None,
) -> Tuple[List[Asset], Optional[MonthRecord]]:
    """Applies the first projected month's buys to the real holdings.

    Returns the updated holdings and the history record, or the holdings
    unchanged and ``None`` when the projection has no steps.
    """
    if not result.steps:
        return list(assets), None

    step = result.steps[0]
    stamp = completed_at or datetime.now(timezone.utc)
    record = MonthRecord(
        label=f"Month {history_length + 1}",
        holdings=tuple(assets),
        total=step.total,
        buys=step.buys,
        completed_at=stamp.isoformat(),
        note=sanitize_name(note, max_length=500),
    )
    LOGGER.info("month locked: label=%s spent=%s", record.label, step.spent)
    return apply_buys(assets, step.buys), record
