"""Dashboard API — investor view of the bound trader's performance."""

import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session

from backend.database import get_session
from backend.api.bindings import to_http_error
from backend.api.deps import get_current_investor
from backend.models.user import User
from backend.schemas.binding import InvestorDashboardRead, TraderPublic, TraderStatsRead
from backend.schemas.trade import TradeRead
from backend.services.binding import get_binding_state
from backend.services.errors import BindingServiceError, TransportError
from backend.services.metrics import compute_trader_stats
from backend.utils.constants import BINDING_APPROVED, CURRENCY_SYMBOLS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/investor", response_model=InvestorDashboardRead)
def investor_dashboard(
    investor: User = Depends(get_current_investor),
    session: Session = Depends(get_session),
):
    """Binding status plus, once approved, the trader's stats and recent trades."""
    try:
        state = get_binding_state(session, investor.id)
    except BindingServiceError as e:
        raise to_http_error(e)

    result = InvestorDashboardRead(status=state.status)
    if state.trader is not None:
        result.trader = TraderPublic.model_validate(state.trader)
        result.currency_symbol = CURRENCY_SYMBOLS.get(state.trader.currency, state.trader.currency)

    if state.status != BINDING_APPROVED:
        return result

    try:
        computed = compute_trader_stats(session, state.binding.trader_id)
    except TransportError as e:
        logger.warning(f"Could not compute stats for trader {state.binding.trader_id}: {e}")
        result.stats_available = False
        return result

    result.stats = TraderStatsRead(
        total_trades=computed.stats.total_trades,
        total_value=round(computed.stats.total_value, 2),
        total_pnl=round(computed.stats.total_pnl, 2),
    )
    result.recent_trades = [TradeRead.model_validate(t) for t in computed.recent]
    return result
