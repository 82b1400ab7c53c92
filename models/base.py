"""
Database configuration and base model.

Uses SQLAlchemy 2.0 declarative style with SQLite.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import PATHS


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def make_engine(database_url: str) -> Engine:
    """
    Create an engine usable from several threads.

    In-memory SQLite databases share one connection so every session sees
    the same tables.
    """
    kwargs = {"echo": False}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}  # Allow multi-threaded access
        if ":memory:" in database_url or database_url == "sqlite://":
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


# Database engine for the history file
DATABASE_URL = f"sqlite:///{PATHS.database}"
engine = make_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False)


@contextmanager
def get_session(factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """Context manager for database sessions."""
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """Initialize the database, creating all tables."""
    if bind is None:
        PATHS.data_dir.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=bind or engine)
