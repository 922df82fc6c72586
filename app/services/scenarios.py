from dataclasses import dataclass, replace
from typing import Iterable, List

from app.services.position_sizing import (
    PositionSizeInputs,
    PositionSizeResult,
    size_position,
)

BASE_RISK_SCENARIOS = (0.25, 0.33, 0.5, 0.66, 0.75, 1.0, 1.5)


@dataclass(frozen=True)
class RiskScenario:
    risk_percentage: float
    risk_amount: float
    shares: int
    position_value: float
    is_current: bool


def scenario_percentages(
    current_pct: float,
    base: Iterable[float] = BASE_RISK_SCENARIOS,
) -> List[float]:
    return sorted(p for p in {*base, current_pct} if p > 0)


def build_risk_scenarios(
    inputs: PositionSizeInputs,
    result: PositionSizeResult,
    base: Iterable[float] = BASE_RISK_SCENARIOS,
) -> List[RiskScenario]:
    """Re-size the same trade at each candidate risk %. Empty when the sizing is invalid."""
    if not result.is_valid or inputs.entry_price <= 0:
        return []

    rows: List[RiskScenario] = []
    for pct in scenario_percentages(inputs.risk_percentage, base):
        sized = size_position(replace(inputs, risk_percentage=pct))
        rows.append(
            RiskScenario(
                risk_percentage=pct,
                risk_amount=sized.risk_amount,
                shares=sized.shares,
                position_value=sized.position_value,
                is_current=pct == inputs.risk_percentage,
            )
        )
    return rows
