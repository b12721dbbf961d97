"""
Database module - SQLAlchemy engine, session scope and ORM models.
"""
from jobboard.db.database import (
    SessionLocal,
    check_database_connection,
    engine,
    get_db_session,
    init_db,
)
from jobboard.db.models import Base

__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "get_db_session",
    "init_db",
    "check_database_connection",
]
