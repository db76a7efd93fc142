"""Domain services for sentiment-based spending analysis."""

from collections.abc import Iterable
from datetime import datetime, timedelta

from src.domain.constants import (
    SENTIMENT_REGRET,
    SENTIMENT_WORTHY,
    TIME_FILTER_WINDOWS_DAYS,
)
from src.domain.errors import ValidationError
from src.domain.models import SentimentTotals, Transaction


def filter_by_window(
    transactions: Iterable[Transaction],
    time_filter: str,
    now: datetime,
) -> list[Transaction]:
    """Keep transactions inside a sliding window ending at ``now``.

    Windows are 24h, 7x24h and 30x24h for day, week and month; they are
    not aligned to calendar boundaries.

    Raises:
        ValidationError: If the filter name is unknown.
    """
    if time_filter not in TIME_FILTER_WINDOWS_DAYS:
        raise ValidationError(
            "time_filter",
            f"must be one of {', '.join(TIME_FILTER_WINDOWS_DAYS)}",
        )
    window_days = TIME_FILTER_WINDOWS_DAYS[time_filter]
    if window_days is None:
        return list(transactions)
    window = timedelta(days=window_days)
    return [tx for tx in transactions if now - tx.timestamp < window]


def filter_by_sentiment(
    transactions: Iterable[Transaction],
    sentiment: str,
) -> list[Transaction]:
    """Keep transactions tagged ``sentiment``; ``all`` keeps every one."""
    if sentiment == "all":
        return list(transactions)
    return [tx for tx in transactions if tx.sentiment == sentiment]


def compute_sentiment_totals(
    transactions: Iterable[Transaction],
    time_filter: str,
    now: datetime,
) -> SentimentTotals:
    """Sum spending per sentiment inside the chosen window.

    Anything not tagged worthy or regret counts as neutral, so the three
    buckets always add up to the filtered total.
    """
    worthy = regret = neutral = 0
    for tx in filter_by_window(transactions, time_filter, now):
        if tx.sentiment == SENTIMENT_WORTHY:
            worthy += tx.amount
        elif tx.sentiment == SENTIMENT_REGRET:
            regret += tx.amount
        else:
            neutral += tx.amount
    return SentimentTotals(
        worthy=worthy,
        regret=regret,
        neutral=neutral,
        time_filter=time_filter,
    )


__all__ = [
    "filter_by_window",
    "filter_by_sentiment",
    "compute_sentiment_totals",
]
