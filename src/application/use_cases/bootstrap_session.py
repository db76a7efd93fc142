"""Use case hydrating a ledger session from the remote user document."""

import asyncio
from datetime import datetime
from typing import Callable

from src.application.events import LEDGER_READY, SessionEvents
from src.application.ports.document_store import DocumentStorePort
from src.application.ports.identity import IdentityProviderPort
from src.application.use_cases.ledger_store import LedgerStore
from src.application.use_cases.persistence_sync import PersistenceSynchronizer
from src.domain.errors import PersistenceDeferred, SpendlyError
from src.domain.services.document_mapping import (
    default_document,
    document_to_ledger,
)
from src.infrastructure.logging.logger import get_app_logger


class BootstrapSessionUseCase:
    """Read or create the user document and open a ledger session."""

    def __init__(
        self,
        document_store: DocumentStorePort,
        identity: IdentityProviderPort,
        events: SessionEvents | None = None,
        logger=None,
        synchronizer: PersistenceSynchronizer | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the use case.

        Args:
            document_store: Port reading and writing user documents.
            identity: Port resolving the signed-in user id.
            events: Bus receiving the ``ledger-ready`` signal.
            logger: Optional logger compatible with logging.Logger-like API.
            synchronizer: Synchronizer attached to every opened store; one
                sharing the same ports is created when omitted.
            clock: Source of the current local time.
        """
        self._document_store = document_store
        self._identity = identity
        self._logger = logger or get_app_logger()
        self._events = events or SessionEvents(logger=self._logger)
        self._synchronizer = synchronizer or PersistenceSynchronizer(
            document_store,
            identity,
            events=self._events,
            logger=self._logger,
        )
        self._clock = clock
        self._sessions: list[asyncio.Task] = []

    @property
    def events(self) -> SessionEvents:
        return self._events

    @property
    def identity(self) -> IdentityProviderPort:
        return self._identity

    @property
    def synchronizer(self) -> PersistenceSynchronizer:
        return self._synchronizer

    async def execute(self, user_id: str | None = None) -> LedgerStore:
        """Hydrate a session for ``user_id`` or the current identity.

        A first-time user gets the default document written as-is before
        hydration.

        Args:
            user_id: Explicit user id; the identity port is used when None.

        Returns:
            LedgerStore: Store holding the hydrated ledger.

        Raises:
            PersistenceDeferred: If no user id is available.
            PersistenceError: If the document store fails.
        """
        resolved = user_id or self._identity.current_user_id()
        if not resolved:
            raise PersistenceDeferred(1)
        now = self._clock()
        document = await self._document_store.read(resolved)
        if document is None:
            self._logger.info(
                f"No document for user {resolved}; creating defaults"
            )
            document = default_document(now)
            await self._document_store.write(resolved, document, merge=False)
        ledger = document_to_ledger(document, now=now, logger=self._logger)
        store = LedgerStore(
            ledger,
            self._synchronizer,
            user_id=resolved,
            clock=self._clock,
            logger=self._logger,
        )
        self._logger.info(
            f"Ledger ready for user {resolved}: "
            f"{len(ledger.transactions)} transactions, "
            f"{len(ledger.goals)} goals, {len(ledger.loans)} loans"
        )
        self._events.publish(LEDGER_READY, user_id=resolved, store=store)
        return store

    def attach(self) -> None:
        """Hydrate a new session whenever the identity resolves a user."""
        self._identity.subscribe(self._on_identity_change)

    def _on_identity_change(self, user_id: str | None) -> None:
        if not user_id:
            self._logger.debug("Identity cleared; waiting for sign-in")
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._logger.warning(
                f"No running event loop; cannot hydrate user {user_id}"
            )
            return
        task = loop.create_task(self._hydrate_safely(user_id))
        self._sessions.append(task)
        task.add_done_callback(self._sessions.remove)

    async def _hydrate_safely(self, user_id: str) -> LedgerStore | None:
        try:
            return await self.execute(user_id)
        except SpendlyError as exc:
            self._logger.error(f"Hydration failed for user {user_id}: {exc}")
            return None


__all__ = ["BootstrapSessionUseCase"]
