"""Domain package for budgeting rules and the ledger aggregate."""

from .errors import (
    PersistenceDeferred,
    PersistenceError,
    SpendlyError,
    ValidationError,
)
from .models import (
    ChatMessage,
    DashboardSummary,
    FixedExpense,
    Goal,
    GroupMember,
    HeatmapDay,
    HeatmapThresholds,
    Loan,
    Profile,
    SafeSpendBreakdown,
    SentimentTotals,
    Transaction,
    UserLedger,
)
from .services import (
    compute_heatmap,
    compute_safe_spend,
    compute_sentiment_totals,
    document_to_ledger,
    ledger_to_document,
)

__all__ = [
    "PersistenceDeferred",
    "PersistenceError",
    "SpendlyError",
    "ValidationError",
    "ChatMessage",
    "DashboardSummary",
    "FixedExpense",
    "Goal",
    "GroupMember",
    "HeatmapDay",
    "HeatmapThresholds",
    "Loan",
    "Profile",
    "SafeSpendBreakdown",
    "SentimentTotals",
    "Transaction",
    "UserLedger",
    "compute_heatmap",
    "compute_safe_spend",
    "compute_sentiment_totals",
    "document_to_ledger",
    "ledger_to_document",
]
