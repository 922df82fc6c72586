from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import TradeDirection
from app.schemas.targets import TargetPlanResponse, TradeTargetSchema
from app.services.position_sizing import PositionSizeInputs


class PositionSizeRequest(BaseModel):
    # prices are NOT gt=0 validated: bad prices come back as is_valid=False
    account_size: float = 10000.0
    risk_percentage: float = 1.0
    entry_price: float = 0.0
    stop_loss_price: float = 0.0

    def to_inputs(self) -> PositionSizeInputs:
        return PositionSizeInputs(
            account_size=self.account_size,
            risk_percentage=self.risk_percentage,
            entry_price=self.entry_price,
            stop_loss_price=self.stop_loss_price,
        )


class PositionSizeResponse(BaseModel):
    shares: int
    position_value: float
    risk_amount: float
    risk_per_share: float
    is_valid: bool

    model_config = ConfigDict(from_attributes=True)


class StopBatchResponse(BaseModel):
    id: int
    label: str
    shares: int
    price: float
    risk_amount: float
    risk_percent_r: float

    model_config = ConfigDict(from_attributes=True)


class StopLadderPlan(BaseModel):
    direction: TradeDirection
    blended_stop: float
    effective_risk: float
    effective_r: float
    batches: List[StopBatchResponse]

    model_config = ConfigDict(from_attributes=True)


class StopLadderResponse(BaseModel):
    position: PositionSizeResponse
    plan: Optional[StopLadderPlan] = None


class RiskScenarioResponse(BaseModel):
    risk_percentage: float
    risk_amount: float
    shares: int
    position_value: float
    is_current: bool

    model_config = ConfigDict(from_attributes=True)


class TradePlanRequest(PositionSizeRequest):
    targets: Optional[List[TradeTargetSchema]] = Field(default=None, max_length=4)


class TradePlanResponse(BaseModel):
    position: PositionSizeResponse
    stop_ladder: Optional[StopLadderPlan] = None
    targets: List[TradeTargetSchema]
    target_metrics: TargetPlanResponse
    scenarios: List[RiskScenarioResponse]
    advisories: List[Dict[str, Any]] = []
