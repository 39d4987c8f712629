"""Shared fixtures: in-memory SQLite store, user factory and API client."""

import os

# Must be set before backend.config is imported
os.environ.setdefault("IDB_DATABASE_URL", "sqlite://")
os.environ.setdefault("IDB_JWT_SECRET", "test-secret")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from backend.database import create_db_and_tables, get_session
from backend.main import app
from backend.models.trade import Trade
from backend.models.user import User
from backend.services.auth import create_access_token, hash_password

TEST_PASSWORD = "hunter2-but-longer"
_HASHED = hash_password(TEST_PASSWORD)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_user(session):
    def _make(username: str, role: str, trader_uid: str | None = None, currency: str = "USD") -> User:
        user = User(
            username=username,
            hashed_password=_HASHED,
            role=role,
            currency=currency,
            trader_uid=trader_uid,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def trader(make_user):
    return make_user("alice", "trader", trader_uid="ABC12345")


@pytest.fixture
def investor(make_user):
    return make_user("bob", "investor")


@pytest.fixture
def add_trades(session):
    """Insert trades for a trader, oldest first, one minute apart."""

    def _add(trader_id: int, rows: list[dict]) -> list[Trade]:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        trades = []
        for i, row in enumerate(rows):
            trade = Trade(
                user_id=trader_id,
                asset=row.get("asset", f"SYM{i}"),
                category=row.get("category", "crypto"),
                price=row["price"],
                quantity=row["quantity"],
                profit_loss=row.get("profit_loss"),
                created_at=start + timedelta(minutes=i),
            )
            session.add(trade)
            trades.append(trade)
        session.commit()
        for trade in trades:
            session.refresh(trade)
        return trades

    return _add


@pytest.fixture
def client(session):
    app.dependency_overrides[get_session] = lambda: session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(subject=user.username)
        return {"Authorization": f"Bearer {token}"}

    return _headers
