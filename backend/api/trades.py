"""Trade history API — read-only ledger access."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from backend.database import get_session
from backend.models.trade import Trade
from backend.models.user import User
from backend.schemas.trade import TradeRead
from backend.services.binding import get_binding_for_investor
from backend.services.errors import BindingServiceError, TransportError
from backend.api.bindings import to_http_error
from backend.api.deps import get_current_user
from backend.utils.constants import BINDING_APPROVED, ROLE_TRADER

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trades", tags=["trades"])


def _ledger_owner(session: Session, user: User) -> int:
    """Traders read their own ledger; investors read their approved trader's."""
    if user.role == ROLE_TRADER:
        return user.id
    try:
        binding = get_binding_for_investor(session, user.id)
    except BindingServiceError as e:
        raise to_http_error(e)
    if binding is None or binding.status != BINDING_APPROVED:
        raise HTTPException(status_code=404, detail="No approved trader binding")
    return binding.trader_id


@router.get("", response_model=list[TradeRead])
def list_trades(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    owner_id = _ledger_owner(session, user)
    stmt = (
        select(Trade)
        .where(Trade.user_id == owner_id)
        .order_by(Trade.created_at.desc(), Trade.id.desc())
        .offset(offset)
        .limit(limit)
    )
    try:
        return session.exec(stmt).all()
    except SQLAlchemyError as e:
        logger.error(f"Ledger page read failed for trader {owner_id}: {e}")
        raise to_http_error(TransportError())


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(
    trade_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    owner_id = _ledger_owner(session, user)
    try:
        trade = session.get(Trade, trade_id)
    except SQLAlchemyError as e:
        logger.error(f"Trade {trade_id} read failed: {e}")
        raise to_http_error(TransportError())
    if not trade or trade.user_id != owner_id:
        raise HTTPException(status_code=404, detail="Trade not found")
    return trade
