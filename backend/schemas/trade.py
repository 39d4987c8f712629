"""Pydantic schemas for trade ledger reads."""

from datetime import datetime
from pydantic import BaseModel


class TradeRead(BaseModel):
    id: int
    user_id: int
    asset: str
    category: str
    price: float
    quantity: float
    profit_loss: float | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
