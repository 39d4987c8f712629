"""User model — traders and investors."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    hashed_password: str
    role: str = Field(index=True)  # "trader" or "investor"
    currency: str = "USD"
    # Public lookup code, issued to traders only and never changed
    trader_uid: str | None = Field(default=None, unique=True, index=True, max_length=8)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
