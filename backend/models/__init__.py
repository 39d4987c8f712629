"""Database models."""

from backend.models.user import User
from backend.models.binding import Binding
from backend.models.trade import Trade

__all__ = [
    "User",
    "Binding",
    "Trade",
]
