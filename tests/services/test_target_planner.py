import pytest

from app.services.position_sizing import PositionSizeInputs, size_position
from app.services.target_planner import (
    MAX_TARGETS,
    TargetListError,
    TargetNotFoundError,
    TradeTarget,
    add_target,
    default_targets,
    plan_targets,
    remove_target,
    seed_target_prices,
    target_r_multiple,
    update_target,
)


# -------------------------------------------------
# plan_targets
# -------------------------------------------------
def test_single_target_contribution(long_inputs, long_result):
    targets = [TradeTarget(id="1", price=160.0, percentage_exit=50.0)]

    metrics = plan_targets(targets, long_inputs, long_result)

    fill = metrics.fills[0]
    assert fill.shares_to_sell == 10
    assert fill.profit_per_share == pytest.approx(10.0)
    assert fill.profit == pytest.approx(100.0)
    assert fill.r_multiple == pytest.approx(2.0)
    assert metrics.total_profit == pytest.approx(100.0)
    assert metrics.r_multiple == pytest.approx(1.0)
    assert metrics.risk_reward == metrics.r_multiple
    assert metrics.shares_allocated == 10
    assert metrics.shares_unallocated == 10


def test_two_default_targets_at_2r_and_3r(long_inputs, long_result):
    targets = seed_target_prices(default_targets(), long_inputs, long_result)

    metrics = plan_targets(targets, long_inputs, long_result)

    # 10 shares * 10 + 10 shares * 15
    assert metrics.total_profit == pytest.approx(250.0)
    assert metrics.r_multiple == pytest.approx(2.5)
    assert metrics.total_exit_percentage == pytest.approx(100.0)


def test_target_below_entry_is_a_loss(long_inputs, long_result):
    targets = [TradeTarget(id="1", price=148.0, percentage_exit=100.0)]

    metrics = plan_targets(targets, long_inputs, long_result)

    assert metrics.total_profit == pytest.approx(-40.0)
    assert metrics.r_multiple == pytest.approx(-0.4)


def test_exit_shares_are_floored_per_target():
    inputs = PositionSizeInputs(
        account_size=10000.0,
        risk_percentage=1.0,
        entry_price=50.0,
        stop_loss_price=40.0,
    )
    result = size_position(inputs)  # 10 shares
    targets = [
        TradeTarget(id="1", price=60.0, percentage_exit=33.0),
        TradeTarget(id="2", price=70.0, percentage_exit=33.0),
        TradeTarget(id="3", price=80.0, percentage_exit=34.0),
    ]

    metrics = plan_targets(targets, inputs, result)

    assert [f.shares_to_sell for f in metrics.fills] == [3, 3, 3]
    assert metrics.shares_allocated == 9
    assert metrics.shares_unallocated == 1


@pytest.mark.parametrize(
    "percentages",
    [
        [50, 50],
        [80, 80],
        [100, 100, 100, 100],
        [33.3, 33.3, 33.4],
        [0, 0],
        [-20, 70],
    ],
)
def test_sold_shares_never_exceed_position(long_inputs, long_result, percentages):
    targets = [
        TradeTarget(id=str(i), price=160.0, percentage_exit=p)
        for i, p in enumerate(percentages)
    ]

    metrics = plan_targets(targets, long_inputs, long_result)

    for fill in metrics.fills:
        assert 0 <= fill.shares_to_sell <= long_result.shares


def test_sold_shares_within_position_when_pcts_sum_to_100(long_inputs, long_result):
    targets = [
        TradeTarget(id="1", price=160.0, percentage_exit=33.3),
        TradeTarget(id="2", price=165.0, percentage_exit=33.3),
        TradeTarget(id="3", price=170.0, percentage_exit=33.4),
    ]

    metrics = plan_targets(targets, long_inputs, long_result)

    assert metrics.shares_allocated <= long_result.shares


def test_invalid_position_gives_zeroed_metrics():
    inputs = PositionSizeInputs(entry_price=150.0, stop_loss_price=150.0)
    targets = [TradeTarget(id="1", price=160.0, percentage_exit=50.0)]

    metrics = plan_targets(targets, inputs, size_position(inputs))

    assert metrics.total_profit == 0
    assert metrics.r_multiple == 0
    assert metrics.fills == ()


def test_zero_risk_amount_gives_zero_r():
    inputs = PositionSizeInputs(
        account_size=10000.0,
        risk_percentage=0.0,
        entry_price=100.0,
        stop_loss_price=95.0,
    )
    result = size_position(inputs)
    targets = [TradeTarget(id="1", price=110.0, percentage_exit=100.0)]

    metrics = plan_targets(targets, inputs, result)

    assert metrics.r_multiple == 0


# -------------------------------------------------
# target_r_multiple
# -------------------------------------------------
def test_target_r_multiple(long_inputs, long_result):
    assert target_r_multiple(160.0, long_inputs, long_result) == pytest.approx(2.0)
    assert target_r_multiple(145.0, long_inputs, long_result) == pytest.approx(-1.0)


def test_target_r_multiple_guards_zero_risk():
    inputs = PositionSizeInputs(entry_price=100.0, stop_loss_price=100.0)

    assert target_r_multiple(120.0, inputs, size_position(inputs)) == 0


# -------------------------------------------------
# seeding
# -------------------------------------------------
def test_seed_fills_only_unset_prices(long_inputs, long_result):
    targets = [
        TradeTarget(id="1", price=0.0, percentage_exit=50.0),
        TradeTarget(id="2", price=158.0, percentage_exit=50.0),
    ]

    seeded = seed_target_prices(targets, long_inputs, long_result)

    assert seeded[0].price == pytest.approx(160.0)
    assert seeded[1].price == 158.0


def test_seed_is_noop_without_valid_position():
    inputs = PositionSizeInputs()
    targets = default_targets()

    seeded = seed_target_prices(targets, inputs, size_position(inputs))

    assert [t.price for t in seeded] == [0.0, 0.0]


def test_seed_twice_keeps_first_prices(long_inputs, long_result):
    seeded = seed_target_prices(default_targets(), long_inputs, long_result)
    moved = PositionSizeInputs(
        account_size=10000.0,
        risk_percentage=1.0,
        entry_price=200.0,
        stop_loss_price=190.0,
    )

    reseeded = seed_target_prices(seeded, moved, size_position(moved))

    assert [t.price for t in reseeded] == [t.price for t in seeded]


# -------------------------------------------------
# list mutations
# -------------------------------------------------
def test_add_target_steps_one_risk_distance(long_inputs, long_result):
    targets = seed_target_prices(default_targets(), long_inputs, long_result)

    added = add_target(targets, long_inputs, target_id="3")

    assert len(added) == 3
    assert added[-1].id == "3"
    assert added[-1].price == pytest.approx(170.0)
    assert added[-1].percentage_exit == 0
    assert len(targets) == 2  # input list untouched


def test_add_target_from_unset_price_uses_entry(long_inputs):
    added = add_target([TradeTarget(id="1")], long_inputs)

    assert added[-1].price == pytest.approx(155.0)
    assert added[-1].id


def test_add_target_rejected_at_max(long_inputs):
    targets = [TradeTarget(id=str(i), price=160.0) for i in range(MAX_TARGETS)]

    with pytest.raises(TargetListError):
        add_target(targets, long_inputs)


def test_remove_target():
    targets = default_targets()

    remaining = remove_target(targets, "1")

    assert [t.id for t in remaining] == ["2"]


def test_remove_last_target_rejected():
    with pytest.raises(TargetListError):
        remove_target([TradeTarget(id="1")], "1")


def test_remove_unknown_target():
    with pytest.raises(TargetNotFoundError):
        remove_target(default_targets(), "nope")


def test_update_target_price_and_percentage():
    updated = update_target(default_targets(), "2", price="171.5", percentage_exit=25)

    assert updated[1].price == pytest.approx(171.5)
    assert updated[1].percentage_exit == 25
    assert updated[0] == default_targets()[0]


@pytest.mark.parametrize("raw", ["abc", "", float("nan"), None])
def test_update_target_tolerates_garbage(raw):
    targets = [TradeTarget(id="1", price=10.0, percentage_exit=50.0)]

    updated = update_target(targets, "1", percentage_exit=raw)

    expected = 50.0 if raw is None else 0.0
    assert updated[0].percentage_exit == expected
    assert updated[0].price == 10.0


def test_update_unknown_target():
    with pytest.raises(TargetNotFoundError):
        update_target(default_targets(), "9", price=1)


@pytest.mark.parametrize(
    "price, percentage_exit, expected_shares, expected_price",
    [
        (160.0, float("nan"), 0, 160.0),
        (160.0, float("inf"), 0, 160.0),
        (float("nan"), 50.0, 10, 0.0),
        (float("inf"), 50.0, 10, 0.0),
    ],
)
def test_non_finite_target_values_count_as_zero(
    long_inputs, long_result, price, percentage_exit, expected_shares, expected_price
):
    targets = [TradeTarget(id="1", price=price, percentage_exit=percentage_exit)]

    metrics = plan_targets(targets, long_inputs, long_result)

    fill = metrics.fills[0]
    assert fill.shares_to_sell == expected_shares
    assert fill.price == expected_price
    assert metrics.total_profit == pytest.approx(expected_shares * (expected_price - 150.0))
