"""Pydantic schemas for the bindings and dashboard API."""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from backend.schemas.trade import TradeRead


class BindingCreate(BaseModel):
    trader_uid: str = Field(max_length=64)

    @field_validator("trader_uid")
    @classmethod
    def _trim(cls, value: str) -> str:
        return value.strip()


class BindingRead(BaseModel):
    id: int
    investor_id: int
    trader_id: int
    status: str
    created_at: datetime
    approved_at: datetime | None = None

    model_config = {"from_attributes": True}


class TraderPublic(BaseModel):
    """What an investor is allowed to see about a trader."""

    id: int
    username: str
    trader_uid: str | None = None
    currency: str

    model_config = {"from_attributes": True}


class InvestorRequest(BaseModel):
    """A binding as seen from the trader side."""

    id: int
    investor_id: int
    investor_username: str | None = None
    status: str
    created_at: datetime
    approved_at: datetime | None = None


class BindingStateRead(BaseModel):
    status: str  # "none", "pending", "approved"
    binding: BindingRead | None = None
    trader: TraderPublic | None = None


class TraderStatsRead(BaseModel):
    total_trades: int = 0
    total_value: float = 0.0
    total_pnl: float = 0.0


class InvestorDashboardRead(BaseModel):
    status: str
    trader: TraderPublic | None = None
    currency_symbol: str | None = None
    stats: TraderStatsRead = Field(default_factory=TraderStatsRead)
    recent_trades: list[TradeRead] = []
    stats_available: bool = True
