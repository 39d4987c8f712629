"""Trade model — append-only ledger entry owned by a trader."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    asset: str  # e.g. "BTC", "AAPL"
    category: str  # e.g. "crypto", "stocks", "forex"
    price: float
    quantity: float
    profit_loss: float | None = None  # None while the position is open
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
