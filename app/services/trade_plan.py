from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from app.risk.advisories import compute_plan_advisories
from app.services.position_sizing import (
    PositionSizeInputs,
    PositionSizeResult,
    size_position,
)
from app.services.scenarios import RiskScenario, build_risk_scenarios
from app.services.stop_ladder import BlendedStopSummary, plan_stop_ladder
from app.services.target_planner import (
    TargetPlanMetrics,
    TradeTarget,
    default_targets,
    plan_targets,
    seed_target_prices,
)


@dataclass(frozen=True)
class TradePlan:
    inputs: PositionSizeInputs
    position: PositionSizeResult
    stop_ladder: Optional[BlendedStopSummary]
    targets: List[TradeTarget]
    target_metrics: TargetPlanMetrics
    scenarios: List[RiskScenario]
    advisories: List[Dict[str, Any]] = field(default_factory=list)


def build_trade_plan(
    inputs: PositionSizeInputs,
    targets: Optional[Sequence[TradeTarget]] = None,
) -> TradePlan:
    """
    One full recompute from an input snapshot.

    Nothing is cached; callers re-run this on every input or target change.
    """
    position = size_position(inputs)

    user_targets = list(targets) if targets else default_targets()
    # seeding steps up from entry even on SHORT plans, so advisories only look
    # at prices the caller chose
    plan_targets_list = seed_target_prices(
        user_targets,
        inputs,
        position,
    )

    return TradePlan(
        inputs=inputs,
        position=position,
        stop_ladder=plan_stop_ladder(inputs, position),
        targets=plan_targets_list,
        target_metrics=plan_targets(plan_targets_list, inputs, position),
        scenarios=build_risk_scenarios(inputs, position),
        advisories=compute_plan_advisories(inputs, position, user_targets),
    )
