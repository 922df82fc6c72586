import math
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence, Tuple

from app.services.position_sizing import PositionSizeInputs, PositionSizeResult
from app.utils.numbers import parse_number

MAX_TARGETS = 4
MIN_TARGETS = 1


class TargetListError(ValueError):
    """Raised when a target list mutation breaks the list-size rules."""


class TargetNotFoundError(TargetListError):
    """Raised when a target id is not in the list."""


@dataclass(frozen=True)
class TradeTarget:
    id: str
    price: float = 0.0
    percentage_exit: float = 0.0  # % of the ORIGINAL position, 0-100


@dataclass(frozen=True)
class TargetFill:
    target_id: str
    price: float
    percentage_exit: float
    shares_to_sell: int
    profit_per_share: float
    profit: float
    r_multiple: float


@dataclass(frozen=True)
class TargetPlanMetrics:
    total_profit: float = 0.0
    r_multiple: float = 0.0
    risk_reward: float = 0.0
    shares_allocated: int = 0
    shares_unallocated: int = 0
    total_exit_percentage: float = 0.0
    fills: Tuple[TargetFill, ...] = field(default_factory=tuple)


# -------------------------------------------------
# Metrics
# -------------------------------------------------
def shares_for_exit(total_shares: int, percentage_exit: float) -> int:
    # floored per target; negative or non-finite percentages sell nothing
    raw = total_shares * (parse_number(percentage_exit) / 100)
    if not math.isfinite(raw):
        return 0
    return max(0, math.floor(raw))


def target_r_multiple(
    target_price: float,
    inputs: PositionSizeInputs,
    result: PositionSizeResult,
) -> float:
    """Signed R of a single target price. 0 when there is no valid risk unit."""
    if not result.is_valid or inputs.entry_price == inputs.stop_loss_price:
        return 0.0

    risk_unit = abs(inputs.entry_price - inputs.stop_loss_price)
    return (target_price - inputs.entry_price) / risk_unit


def plan_targets(
    targets: Sequence[TradeTarget],
    inputs: PositionSizeInputs,
    result: PositionSizeResult,
) -> TargetPlanMetrics:
    """
    Realized profit if every target fills.

    Percentages are of the original position and are NOT normalized; the
    shares left over after flooring are reported, never priced.
    """
    if not result.is_valid:
        return TargetPlanMetrics()

    fills: List[TargetFill] = []
    realized_profit = 0.0
    allocated = 0
    total_exit_pct = 0.0

    for t in targets:
        # NaN / inf from unparsed callers count as 0, like form input
        price = parse_number(t.price)
        percentage_exit = parse_number(t.percentage_exit)

        shares_to_sell = shares_for_exit(result.shares, percentage_exit)
        profit_per_share = price - inputs.entry_price
        profit = shares_to_sell * profit_per_share

        realized_profit += profit
        allocated += shares_to_sell
        total_exit_pct += percentage_exit

        fills.append(
            TargetFill(
                target_id=t.id,
                price=price,
                percentage_exit=percentage_exit,
                shares_to_sell=shares_to_sell,
                profit_per_share=profit_per_share,
                profit=profit,
                r_multiple=target_r_multiple(price, inputs, result),
            )
        )

    risk = result.risk_amount
    r_multiple = realized_profit / risk if risk > 0 else 0.0

    return TargetPlanMetrics(
        total_profit=realized_profit,
        r_multiple=r_multiple,
        risk_reward=r_multiple,
        shares_allocated=allocated,
        shares_unallocated=max(0, result.shares - allocated),
        total_exit_percentage=total_exit_pct,
        fills=tuple(fills),
    )


# -------------------------------------------------
# List management (every operation returns a new list)
# -------------------------------------------------
def default_targets() -> List[TradeTarget]:
    return [
        TradeTarget(id="1", price=0.0, percentage_exit=50.0),
        TradeTarget(id="2", price=0.0, percentage_exit=50.0),
    ]


def seed_target_prices(
    targets: Sequence[TradeTarget],
    inputs: PositionSizeInputs,
    result: PositionSizeResult,
) -> List[TradeTarget]:
    """
    Put unset (zero-price) targets at 2R, 3R, ... by list position.
    Prices the user already set are left alone.
    """
    if not result.is_valid or inputs.entry_price <= 0:
        return list(targets)

    risk = abs(inputs.entry_price - inputs.stop_loss_price)
    return [
        replace(t, price=inputs.entry_price + risk * (idx + 2)) if t.price == 0 else t
        for idx, t in enumerate(targets)
    ]


def add_target(
    targets: Sequence[TradeTarget],
    inputs: PositionSizeInputs,
    *,
    target_id: Optional[str] = None,
) -> List[TradeTarget]:
    if len(targets) >= MAX_TARGETS:
        raise TargetListError(f"At most {MAX_TARGETS} targets are allowed.")

    risk = abs(inputs.entry_price - inputs.stop_loss_price)
    last_price = targets[-1].price if targets else 0.0
    base_price = last_price or inputs.entry_price

    new_target = TradeTarget(
        id=target_id or uuid.uuid4().hex,
        price=base_price + risk,
        percentage_exit=0.0,
    )
    return [*targets, new_target]


def _index_of(targets: Sequence[TradeTarget], target_id: str) -> int:
    for idx, t in enumerate(targets):
        if t.id == target_id:
            return idx
    raise TargetNotFoundError(f"Unknown target id: {target_id}")


def remove_target(targets: Sequence[TradeTarget], target_id: str) -> List[TradeTarget]:
    idx = _index_of(targets, target_id)
    if len(targets) <= MIN_TARGETS:
        raise TargetListError("At least one target must remain.")
    return [t for i, t in enumerate(targets) if i != idx]


def update_target(
    targets: Sequence[TradeTarget],
    target_id: str,
    *,
    price: Any = None,
    percentage_exit: Any = None,
) -> List[TradeTarget]:
    """Edit price and/or exit %. Raw form values are parsed leniently (garbage -> 0)."""
    idx = _index_of(targets, target_id)

    changes = {}
    if price is not None:
        changes["price"] = parse_number(price)
    if percentage_exit is not None:
        changes["percentage_exit"] = parse_number(percentage_exit)

    updated = list(targets)
    updated[idx] = replace(targets[idx], **changes)
    return updated
