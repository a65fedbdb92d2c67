"""
Storage Configuration Module
============================

Default locations of the warehouse access data and SQLAlchemy engine and
session management for the activity log.

The users file and the activity database both live in the application's
data directory. Every helper accepts explicit values so callers (the CLI,
tests) point the components at their own files instead of mutating these
module-level defaults.

Security Note: the activity log uses SQLite for portability. A deployment
shared by several workstations would move it to a server database.
"""

import os
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

# Data file locations
DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), 'data')
USERS_FILE_PATH = os.path.join(DATA_DIR, 'users.txt')
DB_PATH = os.path.join(DATA_DIR, 'activity.db')
DATABASE_URL = f"sqlite:///{DB_PATH}"

# Base class for declarative models
Base = declarative_base()


def create_db_engine(url: str = DATABASE_URL) -> Engine:
    """
    Create an engine for the activity log database.

    Args:
        url: SQLAlchemy database URL

    Returns:
        Configured SQLAlchemy engine
    """
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # Required for SQLite
        if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
            os.makedirs(os.path.dirname(os.path.abspath(url[len("sqlite:///"):])), exist_ok=True)

    return create_engine(
        url,
        echo=False,  # Set to True for SQL debugging
        connect_args=connect_args
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to the given engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_session(session_factory: Optional[sessionmaker] = None):
    """
    Context manager for database sessions.

    Ensures proper session lifecycle management with automatic
    commit on success and rollback on failure.

    Usage:
        with get_session(factory) as session:
            logs = ActivityLogger(session).get_all_logs()
    """
    if session_factory is None:
        session_factory = create_session_factory(create_db_engine())

    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Optional[Engine] = None) -> Engine:
    """
    Initialize the activity log schema.

    Creates all tables defined in the models if they don't exist.
    Safe to call multiple times.
    """
    from . import entities  # noqa: F401 - Ensure models are loaded
    engine = engine or create_db_engine()
    Base.metadata.create_all(bind=engine)
    return engine


def reset_db(engine: Optional[Engine] = None) -> Engine:
    """
    Reset the activity log by dropping and recreating all tables.

    WARNING: This destroys all logs. Use only for development/testing.
    """
    from . import entities  # noqa: F401
    engine = engine or create_db_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    return engine
