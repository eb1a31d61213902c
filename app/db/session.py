from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from fastapi import HTTPException
from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from app.config.settings import settings
from app.core.errors import TrainingError


def _is_postgresql(url: str) -> bool:
    return "postgresql" in url.lower() or "postgres" in url.lower()


def _validate_postgresql_driver() -> None:
    """Validate PostgreSQL driver is installed when using PostgreSQL.

    Must actually import psycopg2 (not just locate it) because SQLAlchemy
    will try to import it when creating the engine.
    """
    try:
        import psycopg2  # noqa: F401

        logger.info("PostgreSQL driver (psycopg2) is available")
    except ImportError as e:
        logger.error("⚠️ CRITICAL: PostgreSQL driver (psycopg2) is not installed! Install it with: pip install psycopg2-binary")
        raise ImportError("PostgreSQL driver required. Install with: pip install psycopg2-binary") from e


def check_database_connection() -> None:
    """Run a trivial query to verify the configured database is reachable."""
    try:
        with _get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("✅ Database connection test successful")
    except Exception as e:
        logger.error(f"❌ Database connection test failed: {e}")
        raise


# Lazy initialization to avoid import-time database connections
_engine = None
_SessionLocal = None


def _get_engine():
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        logger.info(f"Initializing database engine: {settings.database_url}")

        connect_args = {}
        if _is_postgresql(settings.database_url):
            _validate_postgresql_driver()
            connect_args = {
                "connect_timeout": 10,
                "application_name": "fitness-tracker-service",
            }
        else:
            logger.warning("Using SQLite database (local development only)")
            connect_args = {"check_same_thread": False}

        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,
            pool_pre_ping=True,  # Verify connections before using
            pool_recycle=3600,
        )
        logger.info("Database engine initialized")
    return _engine


def get_engine():
    """Get or create the database engine (public API)."""
    return _get_engine()


def _get_session_local():
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


def _handle_session_commit(session: Session) -> None:
    """Commit the unit of work, including state already flushed by services."""
    logger.debug(f"Before commit: dirty={len(session.dirty)}, new={len(session.new)}, deleted={len(session.deleted)}")
    session.commit()
    logger.debug("Database session committed successfully")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get a transactional database session.

    The whole block is one unit of work: it commits when the block exits
    normally and rolls back on any exception.

    - HTTPException / TrainingError: rolled back and re-raised without error
      logging (expected API responses and business rule violations)
    - Other exceptions: logged as database errors, rolled back and re-raised
    """
    session = _get_session_local()()
    try:
        yield session
        _handle_session_commit(session)
    except (HTTPException, TrainingError) as e:
        logger.debug(f"{type(e).__name__} in session, rolling back")
        session.rollback()
        raise
    except Exception as e:
        logger.error(
            f"Database session error, rolling back: {e}. "
            f"Error type: {type(e).__name__}, session state: "
            f"dirty={len(session.dirty)}, new={len(session.new)}, deleted={len(session.deleted)}"
        )
        logger.exception("Full exception traceback:")
        session.rollback()
        raise
    finally:
        session.close()
