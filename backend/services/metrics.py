"""Metrics aggregator — investor-facing stats over a trader's ledger.

Stats are recomputed from the full ledger on every call.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from backend.config import settings
from backend.models.trade import Trade
from backend.services.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class TraderStats:
    total_trades: int = 0
    total_value: float = 0.0
    total_pnl: float = 0.0


@dataclass
class TraderStatsResult:
    stats: TraderStats = field(default_factory=TraderStats)
    recent: list[Trade] = field(default_factory=list)


def aggregate_trades(trades: Sequence[Trade], recent_limit: int = 5) -> TraderStatsResult:
    """Aggregate trades already ordered newest first.

    fsum keeps totals independent of summation order.
    """
    stats = TraderStats(
        total_trades=len(trades),
        total_value=math.fsum(t.price * t.quantity for t in trades),
        total_pnl=math.fsum(t.profit_loss or 0.0 for t in trades),
    )
    return TraderStatsResult(stats=stats, recent=list(trades[:recent_limit]))


def fetch_ledger(session: Session, trader_id: int) -> list[Trade]:
    """All trades for a trader, newest first."""
    try:
        return list(session.exec(
            select(Trade)
            .where(Trade.user_id == trader_id)
            .order_by(Trade.created_at.desc(), Trade.id.desc())
        ).all())
    except SQLAlchemyError as e:
        logger.error(f"Ledger read failed for trader {trader_id}: {e}")
        raise TransportError() from e


def compute_trader_stats(
    session: Session, trader_id: int, recent_limit: int | None = None
) -> TraderStatsResult:
    if recent_limit is None:
        recent_limit = settings.recent_trades_limit
    trades = fetch_ledger(session, trader_id)
    return aggregate_trades(trades, recent_limit=recent_limit)
