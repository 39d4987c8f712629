"""Binding model — the investor to trader relationship and its approval state."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class Binding(SQLModel, table=True):
    __tablename__ = "binding"

    id: int | None = Field(default=None, primary_key=True)
    # One row per investor; the unique index is what serializes double submits
    investor_id: int = Field(foreign_key="user.id", unique=True, index=True)
    trader_id: int = Field(foreign_key="user.id", index=True)
    status: str = "pending"  # "pending", "approved"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    approved_at: datetime | None = None
