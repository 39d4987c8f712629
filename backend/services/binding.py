"""Binding manager — investor to trader relationship lifecycle.

States: "none" (no row), "pending", "approved".

    none --request_binding--> pending --approve_binding--> approved

There is no reject or unbind transition. Duplicate requests are not
pre-checked: the unique index on binding.investor_id decides the winner when
two requests race, and the loser gets DuplicateRequestError.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from backend.models.binding import Binding
from backend.models.user import User
from backend.services.errors import (
    DuplicateRequestError,
    InvalidTransitionError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from backend.utils.constants import (
    BINDING_APPROVED,
    BINDING_NONE,
    BINDING_PENDING,
    ROLE_TRADER,
    TRADER_UID_LENGTH,
)

logger = logging.getLogger(__name__)

TRADER_UID_PATTERN = re.compile(rf"^[A-Z0-9]{{{TRADER_UID_LENGTH}}}$")

# PostgreSQL unique_violation SQLSTATE
UNIQUE_VIOLATION = "23505"


@dataclass
class BindingState:
    """Explicit binding state for an investor, "none" included."""

    status: str
    binding: Binding | None = None
    trader: User | None = None


def normalize_trader_uid(raw: str | None) -> str:
    """Trim and upper-case a trader code, rejecting anything malformed."""
    code = (raw or "").strip().upper()
    if not code:
        raise ValidationError("Please enter a trader UID")
    if not TRADER_UID_PATTERN.match(code):
        raise ValidationError(
            f"Trader UID must be {TRADER_UID_LENGTH} letters or digits"
        )
    return code


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    # sqlite3 exposes no SQLSTATE
    return "UNIQUE constraint failed" in str(orig)


def get_binding_for_investor(session: Session, investor_id: int) -> Binding | None:
    """Return the investor's binding, if any."""
    try:
        return session.exec(
            select(Binding).where(Binding.investor_id == investor_id)
        ).first()
    except SQLAlchemyError as e:
        logger.error(f"Binding lookup failed for investor {investor_id}: {e}")
        raise TransportError() from e


def get_binding_state(session: Session, investor_id: int) -> BindingState:
    binding = get_binding_for_investor(session, investor_id)
    if binding is None:
        return BindingState(status=BINDING_NONE)
    try:
        trader = session.get(User, binding.trader_id)
    except SQLAlchemyError as e:
        raise TransportError() from e
    return BindingState(status=binding.status, binding=binding, trader=trader)


def find_trader_by_uid(session: Session, trader_uid: str) -> User | None:
    try:
        return session.exec(
            select(User).where(User.trader_uid == trader_uid, User.role == ROLE_TRADER)
        ).first()
    except SQLAlchemyError as e:
        logger.error(f"Trader lookup failed for {trader_uid}: {e}")
        raise TransportError() from e


def request_binding(session: Session, investor_id: int, trader_public_id: str) -> Binding:
    """Create a pending binding from an investor to the trader with this code.

    Raises ValidationError for an empty or malformed code, NotFoundError when
    no trader has the code, DuplicateRequestError when the investor already
    has a binding and TransportError for any other store failure.
    """
    code = normalize_trader_uid(trader_public_id)

    trader = find_trader_by_uid(session, code)
    if trader is None:
        raise NotFoundError("Trader not found")

    binding = Binding(investor_id=investor_id, trader_id=trader.id, status=BINDING_PENDING)
    session.add(binding)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if _is_unique_violation(e):
            logger.info(f"Duplicate binding request from investor {investor_id}")
            raise DuplicateRequestError("You have already sent a binding request") from e
        raise TransportError() from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Binding insert failed for investor {investor_id}: {e}")
        raise TransportError() from e

    session.refresh(binding)
    logger.info(
        f"Binding {binding.id} requested: investor {investor_id} -> trader {trader.id} ({code})"
    )
    return binding


def list_requests_for_trader(
    session: Session, trader_id: int, status: str | None = None
) -> list[Binding]:
    stmt = (
        select(Binding)
        .where(Binding.trader_id == trader_id)
        .order_by(Binding.created_at.desc())
    )
    if status is not None:
        stmt = stmt.where(Binding.status == status)
    try:
        return list(session.exec(stmt).all())
    except SQLAlchemyError as e:
        raise TransportError() from e


def approve_binding(session: Session, trader_id: int, binding_id: int) -> Binding:
    """Trader-side transition pending -> approved."""
    try:
        binding = session.get(Binding, binding_id)
    except SQLAlchemyError as e:
        raise TransportError() from e

    if binding is None or binding.trader_id != trader_id:
        raise NotFoundError("Binding request not found")
    if binding.status != BINDING_PENDING:
        raise InvalidTransitionError(f"Binding is already {binding.status}")

    binding.status = BINDING_APPROVED
    binding.approved_at = datetime.now(timezone.utc)
    session.add(binding)
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise TransportError() from e
    session.refresh(binding)
    logger.info(f"Binding {binding.id} approved by trader {trader_id}")
    return binding
