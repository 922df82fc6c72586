# app/services/stop_ladder.py

from dataclasses import dataclass
from typing import List, Optional, Tuple

from app.models.enums import TradeDirection
from app.services.position_sizing import PositionSizeInputs, PositionSizeResult

# (label, fraction of the full stop distance); the last tranche sits on the stop itself
LADDER_LEVELS: Tuple[Tuple[str, float], ...] = (
    ("Early Stop (33%)", 1 / 3),
    ("Mid Stop (66%)", 2 / 3),
    ("Final Stop (LoD)", 1.0),
)


@dataclass(frozen=True)
class StopBatch:
    id: int
    label: str
    shares: int
    price: float
    risk_amount: float
    risk_percent_r: float


@dataclass(frozen=True)
class BlendedStopSummary:
    direction: TradeDirection
    blended_stop: float
    effective_risk: float
    batches: Tuple[StopBatch, ...]
    risk_amount: float

    @property
    def effective_r(self) -> float:
        """Effective risk as a fraction of 1R (always <= 1)."""
        if self.risk_amount <= 0:
            return 0.0
        return self.effective_risk / self.risk_amount

    @property
    def total_shares(self) -> int:
        return sum(b.shares for b in self.batches)


def trade_direction(entry_price: float, stop_loss_price: float) -> TradeDirection:
    return TradeDirection.LONG if entry_price > stop_loss_price else TradeDirection.SHORT


def split_into_batches(shares: int) -> List[int]:
    """
    Early and Mid get floor(shares / 3); Final absorbs the remainder,
    so the three always sum to `shares`.
    """
    batch_size = shares // 3
    return [batch_size, batch_size, shares - 2 * batch_size]


def plan_stop_ladder(
    inputs: PositionSizeInputs,
    result: PositionSizeResult,
) -> Optional[BlendedStopSummary]:
    """
    Three-stop exit ladder for a sized position.

    Returns None ("no plan") when the sizing is invalid or has no shares.
    """
    if not result.is_valid or result.shares <= 0:
        return None

    entry = inputs.entry_price
    direction = trade_direction(entry, inputs.stop_loss_price)
    dir_mult = -1 if direction == TradeDirection.LONG else 1
    risk_dist = result.risk_per_share

    batches: List[StopBatch] = []
    total_loss = 0.0

    for idx, ((label, fraction), batch_shares) in enumerate(
        zip(LADDER_LEVELS, split_into_batches(result.shares)), start=1
    ):
        if idx == len(LADDER_LEVELS):
            price = inputs.stop_loss_price  # full 1R, exact
        else:
            price = entry + dir_mult * (risk_dist * fraction)

        loss = abs(entry - price) * batch_shares
        total_loss += loss

        batches.append(
            StopBatch(
                id=idx,
                label=label,
                shares=batch_shares,
                price=price,
                risk_amount=loss,
                risk_percent_r=loss / result.risk_amount if result.risk_amount > 0 else 0.0,
            )
        )

    avg_loss_per_share = total_loss / result.shares
    blended_stop = entry + dir_mult * avg_loss_per_share

    return BlendedStopSummary(
        direction=direction,
        blended_stop=blended_stop,
        effective_risk=total_loss,
        batches=tuple(batches),
        risk_amount=result.risk_amount,
    )
