from typing import Any, Dict, List, Optional, Sequence

from app.models.enums import TradeDirection
from app.risk.codes import (
    MAX_RISK_PCT,
    POSITION_EXCEEDS_ACCOUNT,
    RISK_BUDGET_TOO_SMALL,
    TARGETS_OVER_ALLOCATED,
    TARGET_WRONG_SIDE,
)
from app.services.position_sizing import PositionSizeInputs, PositionSizeResult
from app.services.stop_ladder import trade_direction
from app.services.target_planner import TradeTarget

ENGINE_TRADE_PLAN = "trade_plan_v1"

MAX_RISK_WARNING_PCT = 2.0
MAX_RISK_CRITICAL_PCT = 5.0


def _advisory(
    code: str,
    *,
    severity: str,
    metric: str,
    allowed: Any,
    actual: Any,
    message: str,
) -> Dict[str, Any]:
    return {
        "code": code,
        "severity": severity,
        "metric": metric,
        "allowed": allowed,
        "actual": actual,
        "message": message,
        "engine": ENGINE_TRADE_PLAN,
    }


# =================================================
# CANONICAL ADVISORY ENGINE (ENTRYPOINT)
# =================================================
def compute_plan_advisories(
    inputs: PositionSizeInputs,
    result: PositionSizeResult,
    targets: Optional[Sequence[TradeTarget]] = None,
) -> List[Dict[str, Any]]:
    """
    Soft warnings about a trade plan.

    Advisory only:
    - Never blocks or alters the plan
    - Returns [] for invalid sizings (nothing to advise on)
    """
    if not result.is_valid:
        return []

    results: List[Dict[str, Any]] = []
    results.extend(build_sizing_advisories(inputs, result))
    if targets:
        results.extend(build_target_advisories(targets, inputs))
    return results


# =================================================
# SIZING RULES
# =================================================
def build_sizing_advisories(
    inputs: PositionSizeInputs,
    result: PositionSizeResult,
) -> List[Dict[str, Any]]:
    results: List[Dict[str, Any]] = []

    # -------------------------------------------------
    # RULE: Risk % of account
    # -------------------------------------------------
    risk_pct = inputs.risk_percentage
    if risk_pct >= MAX_RISK_WARNING_PCT:
        results.append(
            _advisory(
                MAX_RISK_PCT,
                severity="critical" if risk_pct >= MAX_RISK_CRITICAL_PCT else "warning",
                metric="risk_pct",
                allowed=MAX_RISK_WARNING_PCT,
                actual=round(risk_pct, 4),
                message=f"Risk per trade is {risk_pct:.2f}% of account",
            )
        )

    # -------------------------------------------------
    # RULE: Position larger than account (needs margin)
    # -------------------------------------------------
    if inputs.account_size > 0 and result.position_value > inputs.account_size:
        exposure = result.position_value / inputs.account_size
        results.append(
            _advisory(
                POSITION_EXCEEDS_ACCOUNT,
                severity="warning",
                metric="exposure_ratio",
                allowed=1.0,
                actual=round(exposure, 4),
                message=f"Position is {exposure:.2f}x the account size",
            )
        )

    # -------------------------------------------------
    # RULE: Budget smaller than one share of risk
    # -------------------------------------------------
    if result.shares == 0:
        results.append(
            _advisory(
                RISK_BUDGET_TOO_SMALL,
                severity="warning",
                metric="risk_amount",
                allowed=round(result.risk_per_share, 4),
                actual=round(result.risk_amount, 2),
                message=(
                    f"Risk budget ${result.risk_amount:.2f} is below "
                    f"${result.risk_per_share:.2f} risk per share"
                ),
            )
        )

    return results


# =================================================
# TARGET RULES
# =================================================
def build_target_advisories(
    targets: Sequence[TradeTarget],
    inputs: PositionSizeInputs,
) -> List[Dict[str, Any]]:
    results: List[Dict[str, Any]] = []

    total_exit = sum(t.percentage_exit for t in targets)
    if total_exit > 100:
        results.append(
            _advisory(
                TARGETS_OVER_ALLOCATED,
                severity="warning",
                metric="total_exit_pct",
                allowed=100,
                actual=round(total_exit, 4),
                message=f"Targets exit {total_exit:.0f}% of the original position",
            )
        )

    direction = trade_direction(inputs.entry_price, inputs.stop_loss_price)
    for t in targets:
        if t.price <= 0:
            continue
        wrong_side = (
            t.price < inputs.entry_price
            if direction == TradeDirection.LONG
            else t.price > inputs.entry_price
        )
        if wrong_side:
            results.append(
                _advisory(
                    TARGET_WRONG_SIDE,
                    severity="warning",
                    metric="target_price",
                    allowed=inputs.entry_price,
                    actual=t.price,
                    message=(
                        f"Target {t.id} at {t.price:.2f} loses money "
                        f"on a {direction.value} entry at {inputs.entry_price:.2f}"
                    ),
                )
            )

    return results
