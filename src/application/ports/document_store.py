"""Port for the remote per-user document store."""

from typing import Any, Protocol


class DocumentStorePort(Protocol):
    """Port exposing keyed JSON documents, one per user.

    Implementations raise ``PersistenceError`` when the backing store
    fails; callers never see driver-specific exceptions.
    """

    async def read(self, key: str) -> dict[str, Any] | None:
        """Return the document stored under ``key`` or None when absent."""

    async def write(
        self,
        key: str,
        document: dict[str, Any],
        merge: bool = True,
    ) -> None:
        """Store ``document`` under ``key``.

        With ``merge`` the document is merged into the existing one: nested
        maps merge key by key, other values replace. Without it the stored
        document is replaced.
        """


__all__ = ["DocumentStorePort"]
