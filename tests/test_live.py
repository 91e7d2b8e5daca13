import math
from datetime import datetime, timezone

import pytest

from dca_engine.models import Quote, QuoteBatch
from dca_engine.services.live import LiveValuationModelBuilder, capture_snapshot
from tests.conftest import make_asset


def _assets():
    return [make_asset("AAA", 100.0, 50.0), make_asset("BBB", 200.0, 50.0)]


def test_live_model_is_total_on_empty_inputs() -> None:
    model = LiveValuationModelBuilder().build([], {}, {}, "EUR", None)

    assert model.rows == []
    assert model.contributions == []
    assert model.total_base == 0
    assert model.total_live == 0
    assert model.daily_pnl == 0
    assert model.daily_pnl_pct == 0
    assert model.total_return == 0
    assert model.total_return_pct == 0


def test_missing_quotes_degrade_to_flat_rows() -> None:
    model = LiveValuationModelBuilder().build(_assets(), {}, {}, "USD", None)

    assert [row.source for row in model.rows] == ["none", "none"]
    assert [row.live_value for row in model.rows] == [100.0, 200.0]
    assert model.daily_pnl == 0
    assert all(item.contribution_pct == 0 for item in model.contributions)


def test_live_model_overlays_day_change_and_baseline() -> None:
    quotes = {"AAA": Quote(price_usd=50.0, day_change_pct=10.0, source="yahoo")}
    model = LiveValuationModelBuilder().build(_assets(), quotes, {"EUR": 0.9}, "EUR", 250.0)

    aaa, bbb = model.rows
    assert aaa.live_value == pytest.approx(110.0)
    assert aaa.daily_pnl == pytest.approx(10.0)
    assert aaa.quote_price == pytest.approx(45.0)
    assert bbb.source == "none"
    assert bbb.quote_price is None

    assert model.total_base == 300.0
    assert model.total_live == pytest.approx(310.0)
    assert model.daily_pnl_pct == pytest.approx(10 / 3)
    assert model.total_return == pytest.approx(60.0)
    assert model.total_return_pct == pytest.approx(24.0)
    assert model.contributions[0].ticker == "AAA"
    assert model.contributions[0].contribution_pct == pytest.approx(100.0)


def test_missing_fx_rate_converts_at_identity() -> None:
    quotes = {"AAA": Quote(price_usd=50.0, day_change_pct=0.0, source="yahoo")}
    model = LiveValuationModelBuilder().build(_assets(), quotes, {"EUR": None}, "EUR", None)

    assert model.rows[0].quote_price == 50.0


@pytest.mark.parametrize("baseline", [None, 0, -10, math.inf, math.nan])
def test_unusable_baseline_falls_back_to_base_total(baseline) -> None:
    quotes = {"BBB": Quote(price_usd=1.0, day_change_pct=-5.0, source="yahoo")}
    model = LiveValuationModelBuilder().build(_assets(), quotes, {}, "USD", baseline)

    assert model.total_return == pytest.approx(model.daily_pnl)
    assert model.total_return_pct == pytest.approx(model.daily_pnl_pct)


def test_contributions_rank_by_absolute_move() -> None:
    assets = _assets() + [make_asset("CCC", 1000.0, 0.0)]
    quotes = {
        "AAA": Quote(price_usd=1.0, day_change_pct=4.0, source="yahoo"),
        "BBB": Quote(price_usd=1.0, day_change_pct=1.0, source="yahoo"),
        "CCC": Quote(price_usd=1.0, day_change_pct=-1.0, source="yahoo"),
    }
    model = LiveValuationModelBuilder().build(assets, quotes, {}, "USD", None)

    assert [item.ticker for item in model.contributions] == ["CCC", "AAA", "BBB"]
    assert model.daily_pnl == pytest.approx(-4.0)
    assert model.contributions[0].contribution_pct == pytest.approx(250.0)


def test_build_from_batch_carries_provider_metadata() -> None:
    batch = QuoteBatch(
        quotes={"AAA": Quote(price_usd=1.0, day_change_pct=1.0, source="yahoo")},
        unresolved=["BBB"],
        provider_health={"yahoo": "ok"},
        fetched_at="2026-01-01T00:00:00+00:00",
    )
    model = LiveValuationModelBuilder().build_from_batch(_assets(), batch, {}, "USD")

    assert model.unresolved == ["BBB"]
    assert model.provider_health == {"yahoo": "ok"}
    assert model.fetched_at == "2026-01-01T00:00:00+00:00"


def test_capture_snapshot_rounds_and_bounds_history() -> None:
    quotes = {"AAA": Quote(price_usd=1.0, day_change_pct=3.333, source="yahoo")}
    model = LiveValuationModelBuilder().build(_assets(), quotes, {}, "EUR", None)
    stamp = datetime(2026, 3, 1, 12, tzinfo=timezone.utc)

    snapshot, history = capture_snapshot([], model, "EUR", captured_at=stamp)
    assert snapshot.total_value == 303.33
    assert snapshot.daily_pnl == 3.33
    assert snapshot.captured_at == stamp.isoformat()
    assert history == [snapshot]

    for _ in range(5):
        _, history = capture_snapshot(history, model, "EUR", limit=3)
    assert len(history) == 3
