"""Use case committing ledger snapshots to the remote document store.

Commits are write-through and fire-and-forget for the caller: mutations
enqueue a snapshot and return immediately while a background worker
performs the write. Each session queues into a single slot:

* a newer snapshot replaces an older one that has not been sent yet;
* a write already in flight is never cancelled;
* once it finishes, the worker sends the newest pending snapshot.

The remote document therefore converges to the last mutation instead of
whichever network response happened to arrive last.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from src.application.events import (
    PERSISTENCE_COMMITTED,
    PERSISTENCE_DEFERRED,
    PERSISTENCE_FAILED,
    SessionEvents,
)
from src.application.ports.document_store import DocumentStorePort
from src.application.ports.identity import IdentityProviderPort
from src.domain.errors import PersistenceDeferred, PersistenceError
from src.domain.models import UserLedger
from src.domain.services.document_mapping import ledger_to_document
from src.infrastructure.logging.logger import get_app_logger

DEFAULT_RETRY_INTERVAL_SECONDS = 0.3
DEFAULT_MAX_IDENTITY_ATTEMPTS = 20

_NO_SESSION = object()


@dataclass(frozen=True)
class _PendingCommit:
    version: int
    ledger: UserLedger
    owner: str | None


class PersistenceSynchronizer:
    """Serialize ledger snapshots and merge them into their owner's document.

    Pending snapshots and committed versions are tracked per session, so
    sessions sharing one synchronizer never drop each other's writes.
    """

    def __init__(
        self,
        document_store: DocumentStorePort,
        identity: IdentityProviderPort,
        events: SessionEvents | None = None,
        logger=None,
        *,
        retry_interval: float = DEFAULT_RETRY_INTERVAL_SECONDS,
        max_identity_attempts: int = DEFAULT_MAX_IDENTITY_ATTEMPTS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the synchronizer.

        Args:
            document_store: Port writing user documents.
            identity: Port resolving the signed-in user id for snapshots
                queued without an owner.
            events: Bus receiving commit outcomes.
            logger: Optional logger compatible with logging.Logger-like API.
            retry_interval: Seconds between identity resolution attempts.
            max_identity_attempts: Attempts before a commit is deferred.
            sleep: Awaitable sleep, replaceable in tests.
        """
        self._document_store = document_store
        self._identity = identity
        self._logger = logger or get_app_logger()
        self._events = events or SessionEvents(logger=self._logger)
        self._retry_interval = retry_interval
        self._max_identity_attempts = max(1, max_identity_attempts)
        self._sleep = sleep
        self._pending: dict[str | None, _PendingCommit] = {}
        self._committed: dict[str | None, int] = {}
        self._worker: asyncio.Task | None = None

    def committed_version(self, session: str | None = None) -> int:
        """Return the newest version written remotely for ``session``."""
        return self._committed.get(session, 0)

    @property
    def has_pending(self) -> bool:
        """Return True while a snapshot is waiting to be written."""
        return bool(self._pending)

    def request_commit(
        self,
        ledger: UserLedger,
        version: int,
        *,
        owner: str | None = None,
        session: str | None = None,
    ) -> asyncio.Task | None:
        """Queue a snapshot for writing without waiting for the result.

        Args:
            ledger: Snapshot to persist.
            version: Monotonic version of the snapshot within ``session``.
            owner: User id whose document receives the snapshot; the
                identity port is asked at write time when None.
            session: Key of the ledger session producing the snapshot.

        Returns:
            asyncio.Task | None: The worker draining the queue, or None when
            no event loop is running; call ``flush`` later in that case.
        """
        self._enqueue(_PendingCommit(version, ledger, owner), session)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._logger.debug(
                f"No running event loop; version {version} waits for flush"
            )
            return None
        if self._worker is None or self._worker.done():
            self._worker = loop.create_task(self._drain())
        return self._worker

    async def flush(self) -> None:
        """Wait until every queued snapshot has been handled."""
        loop = asyncio.get_running_loop()
        worker = self._worker
        if (
            worker is None
            or worker.done()
            or worker.get_loop() is not loop
        ):
            if not self._pending:
                return
            worker = loop.create_task(self._drain())
            self._worker = worker
        await worker

    async def commit(
        self,
        ledger: UserLedger,
        version: int | None = None,
        *,
        owner: str | None = None,
        session: str | None = None,
    ) -> None:
        """Write a snapshot with merge semantics.

        Args:
            ledger: Snapshot to persist.
            version: Optional snapshot version recorded on success.
            owner: User id whose document is written; resolved through the
                identity port when None.
            session: Key under which ``version`` is recorded.

        Raises:
            PersistenceDeferred: If no owner was given and the user id
                never resolved.
            PersistenceError: If the document store rejected the write.
        """
        user_id = owner or await self._resolve_user_id()
        document = ledger_to_document(ledger)
        await self._document_store.write(user_id, document, merge=True)
        if version is not None:
            self._committed[session] = max(
                self._committed.get(session, 0),
                version,
            )
        self._logger.info(
            f"Committed ledger version {version} for user {user_id}"
        )
        self._events.publish(
            PERSISTENCE_COMMITTED,
            user_id=user_id,
            version=version,
        )

    def _enqueue(self, entry: _PendingCommit, session: str | None) -> None:
        pending = self._pending.get(session)
        if pending is not None:
            if pending.version >= entry.version:
                return
            self._logger.debug(
                f"Coalescing unsent version {pending.version} "
                f"into {entry.version}"
            )
        self._pending[session] = entry

    async def _drain(self) -> None:
        deferred: set[str | None] = set()
        while True:
            session = next(
                (key for key in self._pending if key not in deferred),
                _NO_SESSION,
            )
            if session is _NO_SESSION:
                return
            entry = self._pending.pop(session)
            version = entry.version
            committed = self._committed.get(session, 0)
            if version <= committed:
                self._logger.debug(
                    f"Dropping stale version {version}; "
                    f"{committed} already committed"
                )
                continue
            try:
                await self.commit(
                    entry.ledger,
                    version,
                    owner=entry.owner,
                    session=session,
                )
            except PersistenceDeferred as exc:
                self._pending.setdefault(session, entry)
                deferred.add(session)
                self._logger.warning(
                    f"Commit of version {version} deferred: {exc}"
                )
                self._events.publish(
                    PERSISTENCE_DEFERRED,
                    version=version,
                    attempts=exc.attempts,
                )
            except PersistenceError as exc:
                self._logger.error(
                    f"Commit of version {version} failed: {exc}; "
                    "local state stays authoritative"
                )
                self._events.publish(
                    PERSISTENCE_FAILED,
                    version=version,
                    error=str(exc),
                )
            except Exception as exc:
                self._logger.exception(
                    f"Unexpected error committing version {version}: {exc}"
                )
                self._events.publish(
                    PERSISTENCE_FAILED,
                    version=version,
                    error=str(exc),
                )

    async def _resolve_user_id(self) -> str:
        for attempt in range(1, self._max_identity_attempts + 1):
            user_id = self._identity.current_user_id()
            if user_id:
                return user_id
            if attempt == self._max_identity_attempts:
                break
            message = (
                f"User id not resolved yet (attempt {attempt}/"
                f"{self._max_identity_attempts}); retrying in "
                f"{self._retry_interval * 1000:.0f}ms"
            )
            if attempt == 1:
                self._logger.warning(message)
            else:
                self._logger.debug(message)
            await self._sleep(self._retry_interval)
        raise PersistenceDeferred(self._max_identity_attempts)


__all__ = [
    "PersistenceSynchronizer",
    "DEFAULT_RETRY_INTERVAL_SECONDS",
    "DEFAULT_MAX_IDENTITY_ATTEMPTS",
]
