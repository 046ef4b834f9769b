"""
Database session management.

Provides SQLModel engine construction and per-request sessions. The engine is
built by the application factory and kept on ``app.state``; nothing here is a
module-level connection.
"""

from typing import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from taskflow.core.config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """
    Create a database engine for the configured URL.

    SQLite URLs (used in development and tests) get a thread-shareable
    connection; in-memory SQLite keeps a single connection so every session
    sees the same database.
    """
    url = settings.SQLALCHEMY_DATABASE_URI

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.DEBUG, **kwargs)

    return create_engine(
        url,
        echo=settings.DEBUG,  # Log SQL queries in debug mode
        pool_pre_ping=True,   # Verify connections before using
        pool_size=5,          # Connection pool size
        max_overflow=10       # Max connections beyond pool_size
    )


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get database session.

    Yields:
        SQLModel Session bound to the application's engine

    Example:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.exec(select(Item)).all()
    """
    with Session(request.app.state.engine) as session:
        yield session
