"""Pydantic schemas for the current user profile."""

from datetime import datetime
from pydantic import BaseModel


class UserRead(BaseModel):
    id: int
    username: str
    role: str
    currency: str
    trader_uid: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
