"""
Database configuration and session management

This module provides the basic SQLAlchemy setup for database connectivity.
NO models are defined here - this is just infrastructure.
"""

import os
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.pool import NullPool

# Get database URL from environment variable
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/portfolio.db")


def _make_engine(url: str):
    """Create an engine for the configured URL."""
    connect_args = {}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        # Sessions are used from FastAPI's threadpool
        connect_args["check_same_thread"] = False
        path = parsed.database
        if path and path != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)

    # Using NullPool for better compatibility with containerized environments
    return create_engine(
        url,
        poolclass=NullPool,
        connect_args=connect_args,
        echo=False,  # Set to True for SQL query logging during development
    )


# Create engine
engine = _make_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for ORM models
Base = declarative_base()


def get_db():
    """
    Dependency injection for database sessions
    Usage in FastAPI endpoints:

    @app.get("/endpoint")
    def endpoint(db: Session = Depends(get_db)):
        # use db here
        pass
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Run a block of writes as one unit of work.

    Commits when the block exits normally, rolls back and re-raises on any
    exception so no partial batch is ever visible to other sessions.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def supports_row_locks(db: Session) -> bool:
    """SQLite has no SELECT ... FOR UPDATE; every other backend we run on does."""
    return db.get_bind().dialect.name != "sqlite"


def check_db_connection() -> bool:
    """
    Test database connectivity
    Returns True if connection successful, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
