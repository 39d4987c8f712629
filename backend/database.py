"""SQLModel database engine and session management."""

import logging

from sqlalchemy import inspect, text
from sqlmodel import SQLModel, create_engine, Session

from backend.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
)

BINDING_INVESTOR_INDEX = "ix_binding_investor_id"


def _has_unique_investor_index(inspector) -> bool:
    for idx in inspector.get_indexes("binding"):
        if idx.get("unique") and idx.get("column_names") == ["investor_id"]:
            return True
    for constraint in inspector.get_unique_constraints("binding"):
        if constraint.get("column_names") == ["investor_id"]:
            return True
    return False


def _run_migrations(bind=None):
    """Ensure the one-binding-per-investor constraint exists on older tables."""
    bind = bind or engine
    inspector = inspect(bind)

    if "binding" not in inspector.get_table_names():
        return

    if not _has_unique_investor_index(inspector):
        logger.info("Migrating: adding unique index on binding.investor_id")
        with bind.connect() as conn:
            conn.execute(text(
                f"CREATE UNIQUE INDEX {BINDING_INVESTOR_INDEX}_unique "
                "ON binding (investor_id)"
            ))
            conn.commit()


def create_db_and_tables(bind=None):
    """Create all tables. Called on startup."""
    import backend.models  # noqa: F401  registers table metadata

    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    _run_migrations(bind)


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
