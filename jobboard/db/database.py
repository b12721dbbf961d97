from contextlib import contextmanager

import structlog
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobboard.core.config import get_settings
from jobboard.db.models import Base

logger = structlog.get_logger(__name__)

settings = get_settings()


def build_engine(url: str) -> Engine:
    """
    Create the SQLAlchemy engine for a URL.

    PostgreSQL gets a connection pool (5 ready, 10 overflow). SQLite is only
    used locally and in tests: one shared connection, foreign keys switched on.
    """
    if url.startswith("sqlite"):
        sqlite_engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.debug,
        )

        @event.listens_for(sqlite_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    return create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=settings.debug,  # Log SQL queries in debug mode
    )


engine = build_engine(settings.sqlalchemy_url)

# Session factory; objects stay readable after commit for response building
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.scalars(select(User)).all()
    Commits on success, rolls back and re-raises on any error.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
    logger.info("database_schema_ready", dialect=engine.dialect.name)


def check_database_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            return db.execute(text("SELECT 1")).scalar_one() == 1
    except SQLAlchemyError as e:
        logger.warning("database_unreachable", error=str(e))
        return False
