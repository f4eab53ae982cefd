# File: src/lms_assessment/config/log_config.py
import logging

from .settings import LOG_LEVEL


def configure_logging(level: str | None = None) -> None:
    """Set up root logging for processes that embed the engine (workers, scripts, alembic)."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="[%(levelname)s] %(asctime)s %(name)s: %(message)s",
    )
    # SQLAlchemy is chatty at INFO; only surface its warnings unless SQL_ECHO is on
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
