# File: src/lms_assessment/db/session.py
import logging
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import configure_mappers
from sqlmodel import Session, SQLModel, create_engine

from ..config.settings import DATABASE_URL, SQL_ECHO

# Make sure every table is registered on SQLModel.metadata
from .. import models  # noqa: F401

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, echo=SQL_ECHO, connect_args=connect_args)


def create_db_and_tables(bind=None) -> None:
    """Configure mappers and create any missing tables (local/dev setups; production uses alembic)."""
    bind = bind or engine
    logger.info("Configuring SQLAlchemy mappers...")
    try:
        configure_mappers()
        logger.info("Mappers configured successfully.")
    except Exception as e:
        logger.error(f"Mapper configuration failed: {e}", exc_info=True)
        raise

    logger.info("Creating database and tables...")
    SQLModel.metadata.create_all(bind)


def commit(db: Session, action: str, *instances) -> None:
    """Commit the unit of work or roll all of it back, then refresh the given rows."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error while trying to {action}: {e}", exc_info=True)
        raise
    for instance in instances:
        db.refresh(instance)


def get_db() -> Iterator[Session]:
    """One session per request; the request layer owns its lifetime."""
    with Session(engine) as session:
        yield session
