"""Domain services package."""

from .budget import (
    compute_safe_spend,
    days_in_month,
    days_until,
    effective_goal_contribution,
    goal_daily_contribution,
    loan_daily_amount,
    spent_on,
)
from .document_mapping import (
    default_document,
    document_to_ledger,
    ledger_to_document,
)
from .heatmap import classify_spend, compute_heatmap, daily_spend_for_month
from .normalization import normalize_sentiment, parse_timestamp, to_epoch_ms
from .sentiment import (
    compute_sentiment_totals,
    filter_by_sentiment,
    filter_by_window,
)

__all__ = [
    "compute_safe_spend",
    "days_in_month",
    "days_until",
    "effective_goal_contribution",
    "goal_daily_contribution",
    "loan_daily_amount",
    "spent_on",
    "default_document",
    "document_to_ledger",
    "ledger_to_document",
    "classify_spend",
    "compute_heatmap",
    "daily_spend_for_month",
    "normalize_sentiment",
    "parse_timestamp",
    "to_epoch_ms",
    "compute_sentiment_totals",
    "filter_by_sentiment",
    "filter_by_window",
]
