"""Domain models package."""

from .dashboard import (
    HEATMAP_TIER_HEAVY,
    HEATMAP_TIER_LABELS,
    HEATMAP_TIER_LIGHT,
    HEATMAP_TIER_MODERATE,
    HEATMAP_TIER_NONE,
    DashboardSummary,
    HeatmapDay,
    HeatmapThresholds,
    SafeSpendBreakdown,
    SentimentTotals,
)
from .ledger import (
    ChatMessage,
    FixedExpense,
    Goal,
    GroupMember,
    Loan,
    Profile,
    Transaction,
    UserLedger,
)

__all__ = [
    "ChatMessage",
    "FixedExpense",
    "Goal",
    "GroupMember",
    "Loan",
    "Profile",
    "Transaction",
    "UserLedger",
    "HEATMAP_TIER_NONE",
    "HEATMAP_TIER_LIGHT",
    "HEATMAP_TIER_MODERATE",
    "HEATMAP_TIER_HEAVY",
    "HEATMAP_TIER_LABELS",
    "DashboardSummary",
    "HeatmapDay",
    "HeatmapThresholds",
    "SafeSpendBreakdown",
    "SentimentTotals",
]
