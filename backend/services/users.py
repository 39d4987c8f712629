"""User provisioning and trader UID issuance."""

import logging
import secrets

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from backend.models.user import User
from backend.services.auth import hash_password
from backend.utils.constants import (
    DEFAULT_CURRENCY,
    ROLE_TRADER,
    TRADER_UID_ALPHABET,
    TRADER_UID_LENGTH,
    VALID_ROLES,
)

logger = logging.getLogger(__name__)

MAX_UID_ATTEMPTS = 10


def generate_trader_uid() -> str:
    return "".join(secrets.choice(TRADER_UID_ALPHABET) for _ in range(TRADER_UID_LENGTH))


def _uid_taken(session: Session, uid: str) -> bool:
    return session.exec(select(User.id).where(User.trader_uid == uid)).first() is not None


def create_user(
    session: Session,
    username: str,
    password: str,
    role: str,
    currency: str = DEFAULT_CURRENCY,
) -> User:
    """Create a user. Traders get a fresh, unused trader UID."""
    if role not in VALID_ROLES:
        raise ValueError(f"role must be one of: {', '.join(VALID_ROLES)}")

    trader_uid = None
    if role == ROLE_TRADER:
        for _ in range(MAX_UID_ATTEMPTS):
            candidate = generate_trader_uid()
            if not _uid_taken(session, candidate):
                trader_uid = candidate
                break
        else:
            raise RuntimeError("Could not allocate a unique trader UID")

    user = User(
        username=username,
        hashed_password=hash_password(password),
        role=role,
        currency=currency.upper(),
        trader_uid=trader_uid,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ValueError(f"User '{username}' already exists (or UID collided, retry)")
    session.refresh(user)
    logger.info(f"Created {role} '{username}'" + (f" with trader UID {trader_uid}" if trader_uid else ""))
    return user
