"""
Database session manager for TradeJournal

This module creates and manages SQLAlchemy database connections and sessions.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from tradejournal.core.config import settings


def make_engine(database_url: str, echo: bool = False):
    """Create an engine, allowing SQLite connections to cross FastAPI's threadpool"""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, pool_pre_ping=True, echo=echo, connect_args=connect_args)


# Create SQLAlchemy engine
engine = make_engine(settings.database_url, echo=settings.debug)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Get a database session

    Yields:
        Session: A SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
