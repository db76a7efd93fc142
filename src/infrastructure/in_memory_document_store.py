"""Process-local document store used for demos and tests."""

import copy
from typing import Any

from src.application.ports.document_store import DocumentStorePort
from src.utils.document_utils import merge_documents


class InMemoryDocumentStore(DocumentStorePort):
    """Document store keeping deep copies of documents in a dict."""

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None):
        self._documents = {
            key: copy.deepcopy(value)
            for key, value in (documents or {}).items()
        }
        self.writes: list[tuple[str, dict[str, Any], bool]] = []

    async def read(self, key: str) -> dict[str, Any] | None:
        document = self._documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    async def write(
        self,
        key: str,
        document: dict[str, Any],
        merge: bool = True,
    ) -> None:
        self.writes.append((key, copy.deepcopy(document), merge))
        if merge:
            self._documents[key] = merge_documents(
                self._documents.get(key),
                document,
            )
        else:
            self._documents[key] = copy.deepcopy(document)

    def snapshot(self, key: str) -> dict[str, Any] | None:
        """Return a copy of the stored document without awaiting."""
        document = self._documents.get(key)
        return copy.deepcopy(document) if document is not None else None


__all__ = ["InMemoryDocumentStore"]
