"""
QuizBuzz Database Models

SQLAlchemy ORM models for the game history.
"""

from models.base import Base, engine, SessionLocal, get_session, init_db, make_engine, make_session_factory
from models.game import GameRecord, RoundRecord

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_session",
    "init_db",
    "make_engine",
    "make_session_factory",
    "GameRecord",
    "RoundRecord",
]
