"""Database ports for the budgeting dashboard.

This module defines the application-layer protocol for accessing the
database engine that backs the SQL document store. Infrastructure
implementations are expected to provide concrete adapters that satisfy it.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine holding user documents.

    Store adapters can depend on this protocol instead of concrete
    database drivers or configuration details.
    """

    def get_documents_engine(self) -> Engine:
        """Get the engine for the user documents database.

        Returns:
            Engine: SQLAlchemy engine connected to the documents store.
        """


__all__ = ["DatabaseEnginePort"]
