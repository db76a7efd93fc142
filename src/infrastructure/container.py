"""Composition root for wiring infrastructure adapters."""

from src.application.events import SessionEvents
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.document_store import DocumentStorePort
from src.application.ports.identity import IdentityProviderPort
from src.application.use_cases.bootstrap_session import (
    BootstrapSessionUseCase,
)
from src.application.use_cases.get_dashboard_summary import (
    GetDashboardSummaryUseCase,
)
from src.application.use_cases.persistence_sync import PersistenceSynchronizer
from src.domain.models import HeatmapThresholds
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.document_store import SqlAlchemyDocumentStore
from src.infrastructure.identity import StaticIdentityProvider
from src.infrastructure.in_memory_document_store import InMemoryDocumentStore
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import SpendlySettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_document_store(
    settings: SpendlySettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> DocumentStorePort:
    """Return the configured document store adapter."""
    resolved = settings or SpendlySettings.from_env()
    if resolved.store_backend == "memory":
        return InMemoryDocumentStore()
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyDocumentStore(resolved_db, logger=get_app_logger())


def build_identity_provider(
    settings: SpendlySettings | None = None,
) -> StaticIdentityProvider:
    """Return an identity provider seeded from settings."""
    resolved = settings or SpendlySettings.from_env()
    return StaticIdentityProvider(resolved.user_id, logger=get_app_logger())


def build_synchronizer(
    document_store: DocumentStorePort,
    identity: IdentityProviderPort,
    events: SessionEvents,
    settings: SpendlySettings | None = None,
) -> PersistenceSynchronizer:
    """Return a synchronizer using the configured identity retry budget."""
    resolved = settings or SpendlySettings.from_env()
    return PersistenceSynchronizer(
        document_store,
        identity,
        events=events,
        logger=get_app_logger(),
        retry_interval=resolved.retry_interval_seconds,
        max_identity_attempts=resolved.max_identity_attempts,
    )


def build_bootstrapper(
    settings: SpendlySettings | None = None,
    document_store: DocumentStorePort | None = None,
    identity: IdentityProviderPort | None = None,
    events: SessionEvents | None = None,
) -> BootstrapSessionUseCase:
    """Return the session bootstrapper wired from settings."""
    resolved = settings or SpendlySettings.from_env()
    store = document_store or build_document_store(resolved)
    resolved_identity = identity or build_identity_provider(resolved)
    logger = get_app_logger()
    bus = events or SessionEvents(logger=logger)
    return BootstrapSessionUseCase(
        store,
        resolved_identity,
        events=bus,
        logger=logger,
        synchronizer=build_synchronizer(
            store,
            resolved_identity,
            bus,
            resolved,
        ),
    )


def build_dashboard_use_case(
    settings: SpendlySettings | None = None,
) -> GetDashboardSummaryUseCase:
    """Return the dashboard derivation use case."""
    resolved = settings or SpendlySettings.from_env()
    return GetDashboardSummaryUseCase(
        thresholds=HeatmapThresholds(
            medium=resolved.heatmap_medium,
            high=resolved.heatmap_high,
        ),
        heatmap_mode=resolved.heatmap_mode,
        goal_policy=resolved.goal_policy,
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_document_store",
    "build_identity_provider",
    "build_synchronizer",
    "build_bootstrapper",
    "build_dashboard_use_case",
]
