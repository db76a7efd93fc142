"""Tests for the monthly spending heatmap."""

from datetime import date, datetime

import pytest

from src.domain.models import (
    HEATMAP_TIER_HEAVY,
    HEATMAP_TIER_LIGHT,
    HEATMAP_TIER_MODERATE,
    HEATMAP_TIER_NONE,
    HeatmapThresholds,
    Transaction,
    UserLedger,
)
from src.domain.services.heatmap import classify_spend, compute_heatmap


@pytest.mark.parametrize(
    ("spent", "tier"),
    [
        (0, HEATMAP_TIER_NONE),
        (1, HEATMAP_TIER_LIGHT),
        (499, HEATMAP_TIER_LIGHT),
        (500, HEATMAP_TIER_MODERATE),
        (1999, HEATMAP_TIER_MODERATE),
        (2000, HEATMAP_TIER_HEAVY),
        (75000, HEATMAP_TIER_HEAVY),
    ],
)
def test_classify_spend_default_thresholds(spent: int, tier: int) -> None:
    """Default thresholds are 500 for moderate and 2000 for heavy."""
    assert classify_spend(spent, HeatmapThresholds()) == tier


@pytest.mark.parametrize(
    "thresholds",
    [
        HeatmapThresholds(),
        HeatmapThresholds(medium=1, high=1),
        HeatmapThresholds(medium=300, high=300),
        HeatmapThresholds.relative_to(466),
        HeatmapThresholds.relative_to(0),
    ],
)
def test_classify_spend_is_monotonic(thresholds: HeatmapThresholds) -> None:
    """Spending more can never lower the tier."""
    tiers = [classify_spend(spent, thresholds) for spent in range(0, 3001)]

    assert tiers == sorted(tiers)
    assert tiers[0] == HEATMAP_TIER_NONE


def test_thresholds_reject_inverted_bounds() -> None:
    """High must not be below medium and medium must be positive."""
    with pytest.raises(ValueError):
        HeatmapThresholds(medium=600, high=500)
    with pytest.raises(ValueError):
        HeatmapThresholds(medium=0, high=500)


def test_relative_thresholds_follow_daily_budget() -> None:
    """Over budget is moderate and over 120% of it is heavy."""
    thresholds = HeatmapThresholds.relative_to(1000)

    assert thresholds == HeatmapThresholds(medium=1001, high=1201)
    assert classify_spend(1000, thresholds) == HEATMAP_TIER_LIGHT
    assert classify_spend(1001, thresholds) == HEATMAP_TIER_MODERATE
    assert classify_spend(1200, thresholds) == HEATMAP_TIER_MODERATE
    assert classify_spend(1201, thresholds) == HEATMAP_TIER_HEAVY


def test_relative_thresholds_without_budget_mark_any_spend_heavy() -> None:
    """With nothing left to spend every positive day is heavy."""
    thresholds = HeatmapThresholds.relative_to(-40)

    assert classify_spend(0, thresholds) == HEATMAP_TIER_NONE
    assert classify_spend(1, thresholds) == HEATMAP_TIER_HEAVY


def test_compute_heatmap_covers_whole_month() -> None:
    """One cell per day of the month, summing only that month's spend."""
    ledger = UserLedger(
        transactions=(
            Transaction(datetime(2026, 2, 3, 8), "Bakery", "Food", 300),
            Transaction(datetime(2026, 2, 3, 20), "Cinema", "Fun", 400),
            Transaction(datetime(2026, 2, 28, 12), "Flight", "Travel", 9000),
            Transaction(datetime(2026, 1, 3, 12), "Old", "Misc", 5000),
            Transaction(datetime(2025, 2, 3, 12), "Older", "Misc", 5000),
        )
    )

    cells = compute_heatmap(ledger, date(2026, 2, 10))

    assert len(cells) == 28
    assert cells[0].day == date(2026, 2, 1)
    assert cells[-1].day == date(2026, 2, 28)
    assert cells[2].spent == 700
    assert cells[2].label == "moderate"
    assert cells[27].tier == HEATMAP_TIER_HEAVY
    assert sum(cell.spent for cell in cells) == 9700
    assert cells[1].label == "none"
