from dataclasses import asdict

import pytest

from dca_engine.config import LiveSettings
from dca_engine.messages import MessageLevel
from dca_engine.models import Buy, Category
from dca_engine.services.valuation import (
    category_summary,
    check_target_sum,
    drift_alerts,
    enrich,
    portfolio_total,
)
from tests.conftest import make_asset


def test_enrich_derives_actual_drift_and_gap() -> None:
    assets = [make_asset("AAA", 25.0, 50.0), make_asset("BBB", 75.0, 50.0)]
    enriched = enrich(assets, 100.0)

    assert [item.ticker for item in enriched] == ["AAA", "BBB"]
    assert enriched[0].actual_pct == pytest.approx(25.0)
    assert enriched[0].drift == pytest.approx(-25.0)
    assert enriched[0].gap == pytest.approx(25.0)
    assert enriched[1].drift == pytest.approx(25.0)
    assert enriched[1].gap == pytest.approx(-25.0)
    assert enriched[0].as_asset() == assets[0]


def test_enrich_zero_total_keeps_gap_defined() -> None:
    enriched = enrich([make_asset("AAA", 10.0, 40.0)], 0.0)
    assert enriched[0].actual_pct == 0.0
    assert enriched[0].drift == pytest.approx(-40.0)
    assert enriched[0].gap == pytest.approx(-10.0)


def test_enrich_actual_percentages_sum_to_100(default_assets) -> None:
    enriched = enrich(default_assets, portfolio_total(default_assets))
    assert sum(item.actual_pct for item in enriched) == pytest.approx(100.0)


def test_check_target_sum_warns_outside_tolerance(default_assets) -> None:
    assert check_target_sum(default_assets) == []

    messages = check_target_sum([make_asset("AAA", 10.0, 60.0), make_asset("BBB", 10.0, 30.0)])
    assert len(messages) == 1
    assert messages[0].level is MessageLevel.WARNING
    assert "90.00%" in messages[0].text


def test_drift_alerts_sorted_with_suggested_buy() -> None:
    assets = [make_asset("AAA", 10.0, 30.0), make_asset("BBB", 60.0, 50.0), make_asset("CCC", 30.0, 20.0)]
    enriched = enrich(assets, 100.0)
    buy = Buy(**asdict(enriched[0]), buy_amount=12.0)

    alerts = drift_alerts(enriched, [buy], threshold=5.0)

    assert [alert.asset.ticker for alert in alerts] == ["AAA", "BBB", "CCC"]
    assert alerts[0].suggested_buy == 12.0
    assert alerts[1].suggested_buy == 0.0
    assert drift_alerts(enriched, [], threshold=15.0)[0].asset.ticker == "AAA"


def test_drift_alerts_default_threshold_matches_live_settings() -> None:
    assets = [make_asset("AAA", 49.0, 50.0), make_asset("BBB", 51.0, 50.0), make_asset("CCC", 0.0, 0.0)]
    enriched = enrich(assets, 100.0)

    assert drift_alerts(enriched, []) == []

    threshold = LiveSettings().drift_threshold
    shifted = enrich([make_asset("AAA", 47.0, 50.0), make_asset("BBB", 53.0, 50.0)], 100.0)
    assert [alert.asset.ticker for alert in drift_alerts(shifted, [])] == [
        alert.asset.ticker for alert in drift_alerts(shifted, [], threshold=threshold)
    ] == ["AAA", "BBB"]


def test_category_summary_follows_category_order(default_assets) -> None:
    summary = category_summary(default_assets)
    assert [item.category for item in summary] == [Category.CRYPTO, Category.TECH, Category.DIVIDEND, Category.ETF]
    crypto = summary[0]
    assert crypto.tickers == ("BTC", "ETH")
    assert crypto.target_total == pytest.approx(17.5)
    assert crypto.current_total == pytest.approx(265.0)
