"""SQLAlchemy-backed store keeping one JSON document per user."""

import asyncio
import json
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.document_store import DocumentStorePort
from src.domain.errors import PersistenceError
from src.infrastructure.logging.logger import get_app_logger
from src.utils.document_utils import merge_documents


CREATE_USER_DOCUMENTS_SQL = """
CREATE TABLE IF NOT EXISTS user_documents (
    user_id VARCHAR(128) PRIMARY KEY,
    body TEXT NOT NULL
)
"""

SELECT_DOCUMENT_SQL = text(
    """
    SELECT body
    FROM user_documents
    WHERE user_id = :user_id
    """
)

INSERT_DOCUMENT_SQL = text(
    """
    INSERT INTO user_documents (user_id, body)
    VALUES (:user_id, :body)
    """
)

UPDATE_DOCUMENT_SQL = text(
    """
    UPDATE user_documents
    SET body = :body
    WHERE user_id = :user_id
    """
)


class SqlAlchemyDocumentStore(DocumentStorePort):
    """Document store backed by a SQLAlchemy engine.

    Blocking database calls run in a worker thread so the event loop keeps
    serving the session while a write is in flight.
    """

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the documents engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()
        self._prepared = False

    def prepare_destination(self) -> None:
        """Ensure the documents table exists."""
        engine = self._db_port.get_documents_engine()
        with engine.begin() as conn:
            conn.exec_driver_sql(CREATE_USER_DOCUMENTS_SQL)
        self._prepared = True

    async def read(self, key: str) -> dict[str, Any] | None:
        """Return the document stored for ``key`` or None when absent.

        Raises:
            PersistenceError: If the database or the stored JSON fails.
        """
        return await asyncio.to_thread(self._read_sync, key)

    async def write(
        self,
        key: str,
        document: dict[str, Any],
        merge: bool = True,
    ) -> None:
        """Store ``document`` for ``key``, merging by default.

        Raises:
            PersistenceError: If the database or the stored JSON fails.
        """
        await asyncio.to_thread(self._write_sync, key, document, merge)

    def _read_sync(self, key: str) -> dict[str, Any] | None:
        try:
            self._ensure_prepared()
            engine = self._db_port.get_documents_engine()
            with engine.connect() as conn:
                row = conn.execute(
                    SELECT_DOCUMENT_SQL,
                    {"user_id": key},
                ).first()
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to read document for {key}: {exc}"
            ) from exc
        if row is None:
            return None
        return self._decode(key, row.body)

    def _write_sync(
        self,
        key: str,
        document: dict[str, Any],
        merge: bool,
    ) -> None:
        try:
            self._ensure_prepared()
            engine = self._db_port.get_documents_engine()
            with engine.begin() as conn:
                row = conn.execute(
                    SELECT_DOCUMENT_SQL,
                    {"user_id": key},
                ).first()
                stored = self._decode(key, row.body) if row else None
                body = merge_documents(stored, document) if merge else document
                params = {"user_id": key, "body": self._encode(key, body)}
                if row is None:
                    conn.execute(INSERT_DOCUMENT_SQL, params)
                else:
                    conn.execute(UPDATE_DOCUMENT_SQL, params)
        except SQLAlchemyError as exc:
            raise PersistenceError(
                f"Failed to write document for {key}: {exc}"
            ) from exc
        self._logger.debug(
            f"Stored document for {key} (merge={merge}, {len(body)} keys)"
        )

    def _ensure_prepared(self) -> None:
        if not self._prepared:
            self.prepare_destination()

    @staticmethod
    def _decode(key: str, body: str) -> dict[str, Any]:
        try:
            document = json.loads(body)
        except json.JSONDecodeError as exc:
            raise PersistenceError(
                f"Stored document for {key} is not valid JSON: {exc}"
            ) from exc
        if not isinstance(document, dict):
            raise PersistenceError(
                f"Stored document for {key} is not a JSON object"
            )
        return document

    @staticmethod
    def _encode(key: str, document: dict[str, Any]) -> str:
        try:
            return json.dumps(document, ensure_ascii=False, sort_keys=True)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(
                f"Document for {key} is not JSON serializable: {exc}"
            ) from exc


__all__ = ["SqlAlchemyDocumentStore", "CREATE_USER_DOCUMENTS_SQL"]
