# app/api/targets.py
#
# Stateless target-list endpoints: the caller sends the whole list and gets
# the new list back. Nothing is stored server side.

from typing import List

from fastapi import APIRouter, HTTPException

from app.schemas.targets import (
    TargetPlanRequest,
    TargetPlanResponse,
    TargetUpdateRequest,
    TradeTargetSchema,
)
from app.services.position_sizing import size_position
from app.services.target_planner import (
    TargetListError,
    TargetNotFoundError,
    TradeTarget,
    add_target,
    plan_targets,
    remove_target,
    seed_target_prices,
    update_target,
)

router = APIRouter(prefix="/api/targets", tags=["targets"])


# =================================================
# Helpers
# =================================================
def _out(targets: List[TradeTarget]) -> List[TradeTargetSchema]:
    return [TradeTargetSchema.model_validate(t) for t in targets]


def _raise_for(exc: TargetListError):
    if isinstance(exc, TargetNotFoundError):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    raise HTTPException(status_code=409, detail=str(exc)) from exc


# =================================================
# Metrics
# =================================================
@router.post("/plan", response_model=TargetPlanResponse)
def target_plan(payload: TargetPlanRequest):
    inputs = payload.to_inputs()
    metrics = plan_targets(payload.to_targets(), inputs, size_position(inputs))
    return TargetPlanResponse.model_validate(metrics)


# =================================================
# List mutations
# =================================================
@router.post("/seed", response_model=List[TradeTargetSchema])
def seed_targets(payload: TargetPlanRequest):
    inputs = payload.to_inputs()
    return _out(seed_target_prices(payload.to_targets(), inputs, size_position(inputs)))


@router.post("/add", response_model=List[TradeTargetSchema])
def add(payload: TargetPlanRequest):
    try:
        return _out(add_target(payload.to_targets(), payload.to_inputs()))
    except TargetListError as exc:
        _raise_for(exc)


@router.post("/remove/{target_id}", response_model=List[TradeTargetSchema])
def remove(target_id: str, payload: TargetPlanRequest):
    try:
        return _out(remove_target(payload.to_targets(), target_id))
    except TargetListError as exc:
        _raise_for(exc)


@router.post("/update/{target_id}", response_model=List[TradeTargetSchema])
def update(target_id: str, payload: TargetUpdateRequest):
    try:
        updated = update_target(
            payload.to_targets(),
            target_id,
            price=payload.price,
            percentage_exit=payload.percentage_exit,
        )
    except TargetListError as exc:
        _raise_for(exc)
    return _out(updated)
