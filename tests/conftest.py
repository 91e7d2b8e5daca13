import pytest

from dca_engine.config import DEFAULT_ASSETS
from dca_engine.models import Asset, Category


@pytest.fixture
def default_assets() -> list[Asset]:
    return list(DEFAULT_ASSETS)


def make_asset(ticker: str, current: float, target: float, category: Category = Category.ETF) -> Asset:
    return Asset(ticker=ticker, name=ticker, category=category, current_value=current, target_pct=target)
