from typing import List

from fastapi import APIRouter

from app.schemas.position_sizing import (
    PositionSizeRequest,
    PositionSizeResponse,
    RiskScenarioResponse,
    StopLadderPlan,
    StopLadderResponse,
    TradePlanRequest,
    TradePlanResponse,
)
from app.schemas.targets import TargetPlanResponse, TradeTargetSchema
from app.services.position_sizing import size_position
from app.services.scenarios import build_risk_scenarios
from app.services.stop_ladder import plan_stop_ladder
from app.services.trade_plan import build_trade_plan

router = APIRouter(prefix="/api/risk", tags=["risk"])


@router.post("/position-size", response_model=PositionSizeResponse)
def position_size_calculator(payload: PositionSizeRequest):
    # invalid prices are a result state (is_valid=False), not a 400
    return PositionSizeResponse.model_validate(size_position(payload.to_inputs()))


@router.post("/stop-ladder", response_model=StopLadderResponse)
def stop_ladder(payload: PositionSizeRequest):
    """
    Three-stop ladder for the sized position.
    `plan` is null when there is nothing to ladder.
    """
    inputs = payload.to_inputs()
    sizing = size_position(inputs)
    ladder = plan_stop_ladder(inputs, sizing)

    return StopLadderResponse(
        position=PositionSizeResponse.model_validate(sizing),
        plan=StopLadderPlan.model_validate(ladder) if ladder else None,
    )


@router.post("/scenarios", response_model=List[RiskScenarioResponse])
def risk_scenarios(payload: PositionSizeRequest):
    inputs = payload.to_inputs()
    sizing = size_position(inputs)
    return [
        RiskScenarioResponse.model_validate(s)
        for s in build_risk_scenarios(inputs, sizing)
    ]


@router.post("/plan", response_model=TradePlanResponse)
def trade_plan(payload: TradePlanRequest):
    """
    Full recompute: sizing, stop ladder, seeded targets, scenarios, advisories.
    Advisory only.
    """
    targets = [t.to_target() for t in payload.targets] if payload.targets else None
    plan = build_trade_plan(payload.to_inputs(), targets)

    return TradePlanResponse(
        position=PositionSizeResponse.model_validate(plan.position),
        stop_ladder=(
            StopLadderPlan.model_validate(plan.stop_ladder) if plan.stop_ladder else None
        ),
        targets=[TradeTargetSchema.model_validate(t) for t in plan.targets],
        target_metrics=TargetPlanResponse.model_validate(plan.target_metrics),
        scenarios=[RiskScenarioResponse.model_validate(s) for s in plan.scenarios],
        advisories=plan.advisories,
    )
