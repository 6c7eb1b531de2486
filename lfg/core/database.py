"""
Database configuration and setup for SQLAlchemy.

This module handles database connection management, session creation,
and provides the foundation for all database operations in the application.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Generator

from lfg.config.settings import settings


def _engine_kwargs(database_url: str) -> dict:
    kwargs = {"echo": settings.debug}  # Log SQL queries when in debug mode
    if database_url.startswith("sqlite"):
        # For SQLite, we need check_same_thread=False to allow multiple threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory databases live as long as their single connection
            kwargs["poolclass"] = StaticPool
    return kwargs


# Create SQLAlchemy engine
engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))

# Create SessionLocal class for database sessions
# Each instance will be a database session
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)

# Base class for all SQLAlchemy models
# All models will inherit from this base class
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency function to get database session.

    This function creates a new database session for each request
    and ensures it's properly closed after the request completes.
    Uncommitted work is rolled back if the request fails.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def create_tables():
    """
    Create all database tables.

    This function creates all tables defined by SQLAlchemy models
    that inherit from Base. Used for initial database setup.
    """
    # Models must be imported so their tables are registered on Base.metadata
    import lfg.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def drop_tables():
    """
    Drop all database tables.

    This function drops all tables defined by SQLAlchemy models.
    Useful for testing or resetting the database.
    """
    import lfg.models  # noqa: F401
    Base.metadata.drop_all(bind=engine)
