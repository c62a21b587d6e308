"""
SQLAlchemy connection utility.

The live working set is the in-memory store; the relational database only
holds snapshots of it (see db/snapshot.py). Any SQLAlchemy URL works, the
default is a local SQLite file.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from placement_hub.core.config import get_settings
from placement_hub.db.tables import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def create_db_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite:"):
        connect_args = {"check_same_thread": False}
    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=get_settings().debug,  # Log SQL in debug mode
    )


def get_engine() -> Engine:
    """Get or create the engine for Settings.database_url (singleton pattern)."""
    global _engine, _session_factory
    if _engine is None:
        _engine = create_db_engine(get_settings().database_url)
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def init_db(engine: Optional[Engine] = None) -> None:
    """Create snapshot tables if they do not exist."""
    Base.metadata.create_all(engine or get_engine())


@contextmanager
def get_db_session(engine: Optional[Engine] = None):
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            save_snapshot(store, db)
    """
    if engine is None:
        get_engine()
        session = _session_factory()
    else:
        session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_database_connection(engine: Optional[Engine] = None) -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session(engine) as db:
            row = db.execute(text("SELECT 1 as test")).fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning("Database connection failed: %s", e)
        return False
