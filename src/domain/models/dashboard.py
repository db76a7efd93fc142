"""Domain models for values derived from a ledger snapshot."""

from dataclasses import dataclass
from datetime import date

from src.domain.constants import (
    DEFAULT_HEATMAP_HIGH,
    DEFAULT_HEATMAP_MEDIUM,
    RELATIVE_HEATMAP_HEAVY_PERCENT,
)

HEATMAP_TIER_NONE = 0
HEATMAP_TIER_LIGHT = 1
HEATMAP_TIER_MODERATE = 2
HEATMAP_TIER_HEAVY = 3

HEATMAP_TIER_LABELS = {
    HEATMAP_TIER_NONE: "none",
    HEATMAP_TIER_LIGHT: "light",
    HEATMAP_TIER_MODERATE: "moderate",
    HEATMAP_TIER_HEAVY: "heavy",
}


@dataclass(frozen=True)
class HeatmapThresholds:
    """Lower bounds of the moderate and heavy heatmap tiers.

    Any positive spend below ``medium`` is light.
    """

    medium: int = DEFAULT_HEATMAP_MEDIUM
    high: int = DEFAULT_HEATMAP_HIGH

    def __post_init__(self) -> None:
        if self.medium < 1:
            raise ValueError("medium threshold must be at least 1")
        if self.high < self.medium:
            raise ValueError("high threshold must not be below medium")

    @classmethod
    def relative_to(cls, daily_budget: int) -> "HeatmapThresholds":
        """Derive thresholds from the daily budget.

        Spending above the budget is moderate, above 120% of it heavy.
        With no budget left any spending is heavy.
        """
        if daily_budget <= 0:
            return cls(medium=1, high=1)
        return cls(
            medium=daily_budget + 1,
            high=daily_budget * RELATIVE_HEATMAP_HEAVY_PERCENT // 100 + 1,
        )


@dataclass(frozen=True)
class SafeSpendBreakdown:
    """Daily safe-spend figure with every intermediate term.

    Attributes:
        monthly_limit: Budget for the whole calendar month.
        fixed_total: Sum of fixed monthly expenses.
        days_in_month: Total number of days in the current month.
        daily_base: Disposable budget per day before deductions.
        daily_debt: Daily repayment of borrowed loans.
        daily_goals: Daily contribution towards savings goals.
        spent_today: Amount already spent on the current date.
        safe_to_spend: What may still be spent today, never negative.
        days_left: Days remaining in the month after today.
    """

    monthly_limit: int
    fixed_total: int
    days_in_month: int
    daily_base: int
    daily_debt: int
    daily_goals: int
    spent_today: int
    safe_to_spend: int
    days_left: int

    @property
    def disposable(self) -> int:
        """Return the monthly limit minus fixed expenses."""
        return self.monthly_limit - self.fixed_total


@dataclass(frozen=True)
class HeatmapDay:
    """Spending total and intensity tier for one calendar day."""

    day: date
    spent: int
    tier: int
    label: str


@dataclass(frozen=True)
class SentimentTotals:
    """Spending grouped by sentiment for a time window."""

    worthy: int
    regret: int
    neutral: int
    time_filter: str

    @property
    def total(self) -> int:
        """Return the sum of all three sentiment buckets."""
        return self.worthy + self.regret + self.neutral


@dataclass(frozen=True)
class DashboardSummary:
    """Everything the dashboard renders for a ledger snapshot."""

    safe_spend: SafeSpendBreakdown
    heatmap: list[HeatmapDay]
    sentiment: SentimentTotals


__all__ = [
    "HEATMAP_TIER_NONE",
    "HEATMAP_TIER_LIGHT",
    "HEATMAP_TIER_MODERATE",
    "HEATMAP_TIER_HEAVY",
    "HEATMAP_TIER_LABELS",
    "HeatmapThresholds",
    "SafeSpendBreakdown",
    "HeatmapDay",
    "SentimentTotals",
    "DashboardSummary",
]
