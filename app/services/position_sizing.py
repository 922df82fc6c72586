import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionSizeInputs:
    account_size: float = 10000.0
    risk_percentage: float = 1.0  # 0-100
    entry_price: float = 0.0
    stop_loss_price: float = 0.0


@dataclass(frozen=True)
class PositionSizeResult:
    shares: int
    position_value: float
    risk_amount: float
    risk_per_share: float
    is_valid: bool


INVALID_RESULT = PositionSizeResult(
    shares=0,
    position_value=0.0,
    risk_amount=0.0,
    risk_per_share=0.0,
    is_valid=False,
)


def has_valid_prices(entry_price: float, stop_loss_price: float) -> bool:
    if not (math.isfinite(entry_price) and math.isfinite(stop_loss_price)):
        return False
    return entry_price > 0 and stop_loss_price > 0 and entry_price != stop_loss_price


def size_position(inputs: PositionSizeInputs) -> PositionSizeResult:
    """
    Fixed-fractional share sizing.

    - Never raises: bad prices or a non-finite budget produce INVALID_RESULT
    - Share count is floored, so the position never exceeds the risk budget
    - Zero / negative account size or risk % degrade to 0 shares
    """

    # --- Validation ---
    if not has_valid_prices(inputs.entry_price, inputs.stop_loss_price):
        logger.debug(
            "invalid sizing inputs entry=%s stop=%s",
            inputs.entry_price,
            inputs.stop_loss_price,
        )
        return INVALID_RESULT

    # --- Core math ---
    risk_amount = inputs.account_size * (inputs.risk_percentage / 100)
    risk_per_share = abs(inputs.entry_price - inputs.stop_loss_price)
    raw_shares = risk_amount / risk_per_share
    if not math.isfinite(raw_shares):
        logger.debug(
            "non-finite sizing budget account=%s risk_pct=%s",
            inputs.account_size,
            inputs.risk_percentage,
        )
        return INVALID_RESULT

    shares = max(0, math.floor(raw_shares))
    position_value = shares * inputs.entry_price
    if not math.isfinite(position_value):
        return INVALID_RESULT

    logger.debug(
        "sized position shares=%d risk_amount=%.2f risk_per_share=%.4f",
        shares,
        risk_amount,
        risk_per_share,
    )

    return PositionSizeResult(
        shares=shares,
        position_value=position_value,
        risk_amount=risk_amount,
        risk_per_share=risk_per_share,
        is_valid=True,
    )
