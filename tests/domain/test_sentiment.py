"""Tests for sentiment filtering and totals."""

from datetime import datetime, timedelta

import pytest

from src.domain.errors import ValidationError
from src.domain.models import Transaction
from src.domain.services.sentiment import (
    compute_sentiment_totals,
    filter_by_sentiment,
    filter_by_window,
)


NOW = datetime(2026, 5, 20, 18, 0)


def _tx(age: timedelta, amount: int, sentiment: str) -> Transaction:
    return Transaction(NOW - age, "Store", "General", amount, sentiment)


TRANSACTIONS = (
    _tx(timedelta(hours=1), 100, "worthy"),
    _tx(timedelta(hours=23, minutes=59), 200, "regret"),
    _tx(timedelta(days=1), 400, "neutral"),
    _tx(timedelta(days=6, hours=23), 800, "worthy"),
    _tx(timedelta(days=7), 1600, "regret"),
    _tx(timedelta(days=29), 3200, "neutral"),
    _tx(timedelta(days=30), 6400, "worthy"),
    _tx(timedelta(days=400), 12800, "regret"),
)


@pytest.mark.parametrize(
    ("time_filter", "expected"),
    [
        ("day", 300),
        ("week", 1500),
        ("month", 6300),
        ("all", 25500),
    ],
)
def test_windows_slide_from_now(time_filter: str, expected: int) -> None:
    """Windows are strict sliding intervals ending now."""
    kept = filter_by_window(TRANSACTIONS, time_filter, NOW)

    assert sum(tx.amount for tx in kept) == expected


@pytest.mark.parametrize("time_filter", ["day", "week", "month", "all"])
def test_totals_add_up_to_filtered_sum(time_filter: str) -> None:
    """Worthy, regret and neutral always add up to the window total."""
    totals = compute_sentiment_totals(TRANSACTIONS, time_filter, NOW)
    kept = filter_by_window(TRANSACTIONS, time_filter, NOW)

    assert totals.total == sum(tx.amount for tx in kept)
    assert totals.time_filter == time_filter


def test_totals_split_by_sentiment() -> None:
    """Each bucket sums only its own sentiment."""
    totals = compute_sentiment_totals(TRANSACTIONS, "week", NOW)

    assert (totals.worthy, totals.regret, totals.neutral) == (900, 200, 400)


def test_unknown_sentiment_counts_as_neutral() -> None:
    """Untagged spending lands in the neutral bucket."""
    odd = (_tx(timedelta(minutes=5), 50, "impulse"),)

    totals = compute_sentiment_totals(odd, "day", NOW)

    assert totals.neutral == 50
    assert totals.total == 50


def test_unknown_filter_is_rejected() -> None:
    """Only day, week, month and all are valid windows."""
    with pytest.raises(ValidationError) as excinfo:
        filter_by_window(TRANSACTIONS, "year", NOW)
    assert excinfo.value.field == "time_filter"


def test_filter_by_sentiment_keeps_matching_or_all() -> None:
    """The drill-down keeps one sentiment, or everything for all."""
    regrets = filter_by_sentiment(TRANSACTIONS, "regret")

    assert [tx.amount for tx in regrets] == [200, 1600, 12800]
    assert len(filter_by_sentiment(TRANSACTIONS, "all")) == len(TRANSACTIONS)
