"""Bindings API — investor requests and trader approvals."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session, select

from backend.database import get_session
from backend.models.user import User
from backend.schemas.binding import (
    BindingCreate,
    BindingRead,
    BindingStateRead,
    InvestorRequest,
    TraderPublic,
)
from backend.services import binding as binding_service
from backend.services.errors import (
    BindingServiceError,
    DuplicateRequestError,
    InvalidTransitionError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from backend.api.deps import get_current_investor, get_current_trader
from backend.utils.constants import STORED_BINDING_STATUSES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bindings", tags=["bindings"])

ERROR_STATUS = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateRequestError: status.HTTP_409_CONFLICT,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    TransportError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_error(exc: BindingServiceError) -> HTTPException:
    code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=exc.message)


@router.get("/me", response_model=BindingStateRead)
def my_binding(
    investor: User = Depends(get_current_investor),
    session: Session = Depends(get_session),
):
    try:
        state = binding_service.get_binding_state(session, investor.id)
    except BindingServiceError as e:
        raise to_http_error(e)
    return BindingStateRead(
        status=state.status,
        binding=BindingRead.model_validate(state.binding) if state.binding else None,
        trader=TraderPublic.model_validate(state.trader) if state.trader else None,
    )


@router.post("", response_model=BindingRead, status_code=201)
def request_binding(
    data: BindingCreate,
    investor: User = Depends(get_current_investor),
    session: Session = Depends(get_session),
):
    try:
        return binding_service.request_binding(session, investor.id, data.trader_uid)
    except BindingServiceError as e:
        raise to_http_error(e)


@router.get("/requests", response_model=list[InvestorRequest])
def list_requests(
    status_filter: str | None = Query(default=None, alias="status"),
    trader: User = Depends(get_current_trader),
    session: Session = Depends(get_session),
):
    if status_filter is not None and status_filter not in STORED_BINDING_STATUSES:
        allowed = ", ".join(STORED_BINDING_STATUSES)
        raise HTTPException(status_code=422, detail=f"status must be one of: {allowed}")
    try:
        bindings = binding_service.list_requests_for_trader(session, trader.id, status_filter)
    except BindingServiceError as e:
        raise to_http_error(e)

    investor_ids = {b.investor_id for b in bindings}
    names = {}
    if investor_ids:
        investors = session.exec(select(User).where(User.id.in_(investor_ids))).all()  # type: ignore[attr-defined]
        names = {u.id: u.username for u in investors}

    return [
        InvestorRequest(
            id=b.id,
            investor_id=b.investor_id,
            investor_username=names.get(b.investor_id),
            status=b.status,
            created_at=b.created_at,
            approved_at=b.approved_at,
        )
        for b in bindings
    ]


@router.post("/{binding_id}/approve", response_model=BindingRead)
def approve_binding(
    binding_id: int,
    trader: User = Depends(get_current_trader),
    session: Session = Depends(get_session),
):
    try:
        return binding_service.approve_binding(session, trader.id, binding_id)
    except BindingServiceError as e:
        raise to_http_error(e)
