"""Database connection and session management for the SQL storage backend.

SQLite is the default (a file in the data directory); any SQLAlchemy URL given via
`DATABASE_URL` works.
"""

import logging
import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Base class for declarative models
Base = declarative_base()


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def get_engine_kwargs(database_url: str) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    Separated from `build_engine` so it can be unit tested without connecting.
    """
    engine_kwargs: dict = {
        "echo": os.getenv("DEBUG", "False").lower() == "true",
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # Timer callbacks and request handlers share the engine across threads
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    engine_kwargs["pool_size"] = int(os.getenv("DB_POOL_SIZE", "5"))
    engine_kwargs["max_overflow"] = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    engine_kwargs["pool_timeout"] = int(os.getenv("DB_POOL_TIMEOUT_SEC", "30"))
    return engine_kwargs


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable foreign keys so sub-goals cascade with their task."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **overrides) -> Engine:
    kwargs = get_engine_kwargs(database_url)
    kwargs.update(overrides)
    engine = create_engine(database_url, **kwargs)
    if _is_sqlite_url(database_url):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create tables and seed default categories into an empty database."""
    # Import models so they register on Base.metadata
    from taskflow.storage import models  # noqa: F401
    from taskflow.storage.models import CategoryDB
    from taskflow.models.constants import DEFAULT_CATEGORIES

    Base.metadata.create_all(bind=engine)

    session = build_session_factory(engine)()
    try:
        if session.query(CategoryDB).first() is None:
            for section_id, names in DEFAULT_CATEGORIES.items():
                for name in names:
                    session.add(CategoryDB(name=name, section_id=section_id.value))
            session.commit()
            logger.info("Seeded default categories")
    except Exception as e:
        session.rollback()
        logger.error(f"Failed to initialize database: {type(e).__name__}: {str(e)}")
        raise
    finally:
        session.close()
