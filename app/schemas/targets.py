from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.services.position_sizing import PositionSizeInputs
from app.services.target_planner import TradeTarget


class TradeTargetSchema(BaseModel):
    id: str
    price: float = 0.0
    percentage_exit: float = 0.0

    model_config = ConfigDict(from_attributes=True)

    def to_target(self) -> TradeTarget:
        return TradeTarget(id=self.id, price=self.price, percentage_exit=self.percentage_exit)


class TargetPlanRequest(BaseModel):
    account_size: float = 10000.0
    risk_percentage: float = 1.0
    entry_price: float = 0.0
    stop_loss_price: float = 0.0
    targets: List[TradeTargetSchema] = Field(default_factory=list, max_length=4)

    def to_inputs(self) -> PositionSizeInputs:
        return PositionSizeInputs(
            account_size=self.account_size,
            risk_percentage=self.risk_percentage,
            entry_price=self.entry_price,
            stop_loss_price=self.stop_loss_price,
        )

    def to_targets(self) -> List[TradeTarget]:
        return [t.to_target() for t in self.targets]


class TargetUpdateRequest(TargetPlanRequest):
    # raw form values; parsed leniently, garbage becomes 0
    price: Optional[Union[float, str]] = None
    percentage_exit: Optional[Union[float, str]] = None


class TargetFillResponse(BaseModel):
    target_id: str
    price: float
    percentage_exit: float
    shares_to_sell: int
    profit_per_share: float
    profit: float
    r_multiple: float

    model_config = ConfigDict(from_attributes=True)


class TargetPlanResponse(BaseModel):
    total_profit: float
    r_multiple: float
    risk_reward: float
    shares_allocated: int
    shares_unallocated: int
    total_exit_percentage: float
    fills: List[TargetFillResponse]

    model_config = ConfigDict(from_attributes=True)
