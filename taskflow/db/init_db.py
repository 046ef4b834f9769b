"""
Database initialization.

Creates all tables registered on the SQLModel metadata.
"""

import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """
    Initialize database schema.

    Imports every model so SQLModel.metadata knows about it, then creates
    missing tables. Existing tables are left untouched; schema changes go
    through Alembic.
    """
    import taskflow.db.base  # noqa: F401

    logger.info("Creating database tables on %s", engine.url.render_as_string(hide_password=True))
    SQLModel.metadata.create_all(engine)
    logger.info("Database initialization complete")
