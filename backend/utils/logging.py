"""Logging setup for the API process and CLI."""

import logging

from backend.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None):
    """Configure the root logger once from settings."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    # SQL echo is controlled by the engine, keep the driver chatter down
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
