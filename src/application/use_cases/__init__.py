"""Application use cases package."""

from .bootstrap_session import BootstrapSessionUseCase
from .get_dashboard_summary import GetDashboardSummaryUseCase
from .ledger_store import LedgerStore
from .persistence_sync import PersistenceSynchronizer

__all__ = [
    "BootstrapSessionUseCase",
    "GetDashboardSummaryUseCase",
    "LedgerStore",
    "PersistenceSynchronizer",
]
