"""Database infrastructure for the budgeting dashboard.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine holding user documents. It belongs to the infrastructure layer
because it deals with external systems (SQLite or a database server).
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool

from src.application.ports.database import DatabaseEnginePort
from src.utils.utils import get_project_root

DOCUMENTS_DB_URL_ENV = "SPENDLY_DB_URL"


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def default_documents_url() -> str:
    """Return the SQLite URL used when no database URL is configured."""
    return f"sqlite:///{get_project_root() / 'data' / 'spendly.db'}"


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine for the documents database.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance with health checks enabled and,
        for database servers, a small connection pool.
    """
    if make_url(db_url).get_backend_name() == "sqlite":
        return create_engine(
            db_url,
            pool_pre_ping=True,
            future=True,
        )
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_documents_engine: Optional[Engine] = None


def get_documents_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the documents database.

    Returns:
        Engine: Lazily initialized engine connected to the documents store.
    """
    global _documents_engine
    if _documents_engine is None:
        try:
            db_url = _get_env_var(DOCUMENTS_DB_URL_ENV)
        except RuntimeError:
            db_url = default_documents_url()
            (get_project_root() / "data").mkdir(parents=True, exist_ok=True)
        _documents_engine = _create_engine(db_url)
    return _documents_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so store adapters can depend only on the protocol.
    """

    def get_documents_engine(self) -> Engine:
        """Get the engine for the documents database.

        Returns:
            Engine: SQLAlchemy engine connected to the documents store.
        """
        return get_documents_engine()


__all__ = [
    "default_documents_url",
    "get_documents_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
