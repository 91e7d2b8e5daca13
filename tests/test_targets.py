import pytest

from dca_engine.models import Category
from dca_engine.services.targets import TargetNormalizer, set_category_target
from tests.conftest import make_asset


def _targets(assets):
    return [asset.target_pct for asset in assets]


def test_normalize_already_summing_to_100_is_stable() -> None:
    assets = [make_asset("AAA", 1, 11.5), make_asset("BBB", 2, 6.0), make_asset("CCC", 3, 82.5)]
    normalized = TargetNormalizer().normalize(assets)

    assert _targets(normalized) == [11.5, 6.0, 82.5]
    assert [asset.current_value for asset in normalized] == [1, 2, 3]


def test_normalize_last_asset_absorbs_residue() -> None:
    assets = [make_asset("AAA", 0, 50), make_asset("BBB", 0, 50), make_asset("CCC", 0, 50)]
    normalized = TargetNormalizer().normalize(assets)

    assert _targets(normalized) == [33.33, 33.33, 33.34]
    assert round(sum(_targets(normalized)), 2) == 100.0


def test_normalize_rounds_scaled_cents_half_up() -> None:
    assets = [make_asset("AAA", 0, 0.015), make_asset("BBB", 0, 99.985)]
    normalized = TargetNormalizer().normalize(assets)

    assert _targets(normalized) == [0.02, 99.98]


@pytest.mark.parametrize(
    "targets",
    [[1, 1, 1, 1, 1, 1, 1], [6.67, 6.67, 6.67, 80.0], [0.01, 99.0], [10, 0, 7.5]],
)
def test_normalize_sums_to_exactly_100(targets) -> None:
    assets = [make_asset(f"T{index}", 0, target) for index, target in enumerate(targets)]
    normalized = TargetNormalizer().normalize(assets)

    assert round(sum(_targets(normalized)), 2) == 100.0
    assert all(round(target, 2) == target for target in _targets(normalized))


def test_normalize_all_zero_is_noop() -> None:
    assets = [make_asset("AAA", 5, 0), make_asset("BBB", 5, 0)]
    assert TargetNormalizer().normalize(assets) == assets


def test_set_category_target_keeps_relative_weights(default_assets) -> None:
    updated = set_category_target(default_assets, Category.CRYPTO, 35.0)

    by_ticker = {asset.ticker: asset.target_pct for asset in updated}
    assert by_ticker["BTC"] == 23.0
    assert by_ticker["ETH"] == 12.0
    assert by_ticker["SPY"] == 18.0


def test_set_category_target_splits_evenly_from_zero() -> None:
    assets = [make_asset("AAA", 0, 0, Category.BOND), make_asset("BBB", 0, 0, Category.BOND)]
    updated = set_category_target(assets, Category.BOND, 15.0)

    assert _targets(updated) == [7.5, 7.5]
    assert set_category_target(assets, Category.CRYPTO, 10.0) == assets
