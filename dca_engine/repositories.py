"""Repositories responsible for loading and saving portfolio holdings."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence

import pandas as pd

from .messages import MessageLevel, ServiceMessage
from .models import Asset
from .sanitize import dedupe_assets, sanitize_asset
from .services.valuation import enrich, portfolio_total

LOGGER = logging.getLogger(__name__)

ASSET_COLUMNS = ["Ticker", "Name", "Category", "Current", "Target"]
REPORT_COLUMNS = ["Ticker", "Name", "Category", "Current", "Target %", "Actual %", "Drift %"]


class PortfolioRepository:
    """Stores holdings as CSV with exactly ticker, name, category, current value and target."""

    def __init__(self, base_path: Path | None = None) -> None:
        self._base_path = base_path or Path.cwd()

    def load_assets(self, filename: str) -> tuple[List[Asset], List[ServiceMessage]]:
        csv_path = self._base_path / filename
        messages: List[ServiceMessage] = []

        if not csv_path.exists():
            messages.append(
                ServiceMessage(MessageLevel.ERROR, f"File not found: {filename}", code="missing_file")
            )
            return [], messages

        df = pd.read_csv(csv_path, dtype={"Ticker": str, "Name": str, "Category": str})
        missing = [column for column in ("Ticker", "Current", "Target") if column not in df.columns]
        if missing:
            messages.append(
                ServiceMessage(
                    MessageLevel.ERROR,
                    f"Columns missing from {filename}: {', '.join(missing)}",
                    code="missing_columns",
                )
            )
            return [], messages

        assets: List[Asset] = []
        for position, row in enumerate(df.to_dict(orient="records"), start=1):
            asset = sanitize_asset(
                ticker=_cell(row.get("Ticker")),
                name=_cell(row.get("Name")),
                category=_cell(row.get("Category")),
                current_value=row.get("Current"),
                target_pct=row.get("Target"),
            )
            if asset is None:
                messages.append(
                    ServiceMessage(
                        MessageLevel.WARNING,
                        f"Row {position} in {filename} has no valid ticker; skipping.",
                        code="invalid_row",
                    )
                )
                continue
            assets.append(asset)

        unique = dedupe_assets(assets)
        if len(unique) < len(assets):
            messages.append(
                ServiceMessage(
                    MessageLevel.WARNING,
                    f"{len(assets) - len(unique)} duplicate ticker(s) in {filename}; keeping the first.",
                    code="duplicate_ticker",
                )
            )
        LOGGER.info("portfolio loaded: file=%s rows=%s assets=%s", filename, len(df), len(unique))
        return unique, messages

    def save_assets(self, assets: Iterable[Asset], filename: str) -> Path:
        rows = [
            {
                "Ticker": asset.ticker,
                "Name": asset.name,
                "Category": asset.category.value,
                "Current": asset.current_value,
                "Target": asset.target_pct,
            }
            for asset in assets
        ]
        csv_path = self._base_path / filename
        pd.DataFrame(rows, columns=ASSET_COLUMNS).to_csv(csv_path, index=False)
        LOGGER.info("portfolio saved: file=%s assets=%s", filename, len(rows))
        return csv_path

    def export_report(self, assets: Sequence[Asset], filename: str) -> Path:
        """Writes holdings with their actual percentage and drift, 2 decimals."""
        rows = [
            {
                "Ticker": asset.ticker,
                "Name": asset.name,
                "Category": asset.category.value,
                "Current": round(asset.current_value, 2),
                "Target %": round(asset.target_pct, 2),
                "Actual %": round(asset.actual_pct, 2),
                "Drift %": round(asset.drift, 2),
            }
            for asset in enrich(assets, portfolio_total(assets))
        ]
        csv_path = self._base_path / filename
        pd.DataFrame(rows, columns=REPORT_COLUMNS).to_csv(csv_path, index=False)
        return csv_path


def _cell(value: object) -> object:
    return None if pd.isna(value) else value
