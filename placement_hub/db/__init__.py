"""
Database module - in-memory store and SQLAlchemy snapshot persistence.
"""
from placement_hub.db.memory_store import MemoryStore
from placement_hub.db.database import get_db_session, init_db, test_database_connection

__all__ = [
    "MemoryStore",
    "get_db_session",
    "init_db",
    "test_database_connection",
]
