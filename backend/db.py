"""
Database setup for the SQLite-backed store.
Provides SQLAlchemy engine/session utilities for a single-file database.
"""
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def sqlite_url(db_path: str) -> str:
    return f"sqlite:///{Path(db_path)}"


def create_sqlite_engine(db_path: str) -> Engine:
    """Engine holding exactly one connection to the database file."""
    # check_same_thread=False allows usage across FastAPI worker threads;
    # StaticPool keeps a single shared connection
    return create_engine(
        sqlite_url(db_path),
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create tables if they don't exist."""
    from repositories import models  # noqa: F401  Ensures models are registered

    Base.metadata.create_all(bind=engine)
