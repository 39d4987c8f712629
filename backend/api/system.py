"""System API — health check."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from backend.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check(session: Session = Depends(get_session)):
    try:
        session.connection().execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.warning(f"Health check: database unreachable: {e}")
        database = "unavailable"
    return {"status": "ok", "database": database}
