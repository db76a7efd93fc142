"""Domain services for the monthly spending heatmap."""

from datetime import date

from src.domain.models import (
    HEATMAP_TIER_HEAVY,
    HEATMAP_TIER_LABELS,
    HEATMAP_TIER_LIGHT,
    HEATMAP_TIER_MODERATE,
    HEATMAP_TIER_NONE,
    HeatmapDay,
    HeatmapThresholds,
    UserLedger,
)
from src.domain.services.budget import days_in_month


def classify_spend(spent: int, thresholds: HeatmapThresholds) -> int:
    """Return the intensity tier for a day's spending.

    Args:
        spent: Amount spent on the day.
        thresholds: Lower bounds of the moderate and heavy tiers.

    Returns:
        int: Tier between none (0) and heavy (3), monotonic in ``spent``.
    """
    if spent <= 0:
        return HEATMAP_TIER_NONE
    if spent >= thresholds.high:
        return HEATMAP_TIER_HEAVY
    if spent >= thresholds.medium:
        return HEATMAP_TIER_MODERATE
    return HEATMAP_TIER_LIGHT


def daily_spend_for_month(ledger: UserLedger, today: date) -> dict[int, int]:
    """Sum transaction amounts per day of the month containing ``today``.

    Returns:
        dict[int, int]: Day-of-month mapped to the amount spent.
    """
    totals: dict[int, int] = {}
    for tx in ledger.transactions:
        moment = tx.timestamp
        if moment.year != today.year or moment.month != today.month:
            continue
        totals[moment.day] = totals.get(moment.day, 0) + tx.amount
    return totals


def compute_heatmap(
    ledger: UserLedger,
    today: date,
    thresholds: HeatmapThresholds | None = None,
) -> list[HeatmapDay]:
    """Build one heatmap cell per day of the current month.

    Args:
        ledger: Ledger snapshot.
        today: Any date inside the month to render.
        thresholds: Tier thresholds; absolute defaults when omitted.

    Returns:
        list[HeatmapDay]: Cells ordered from the 1st to the last day.
    """
    resolved = thresholds or HeatmapThresholds()
    totals = daily_spend_for_month(ledger, today)
    cells = []
    for day_number in range(1, days_in_month(today) + 1):
        spent = totals.get(day_number, 0)
        tier = classify_spend(spent, resolved)
        cells.append(
            HeatmapDay(
                day=date(today.year, today.month, day_number),
                spent=spent,
                tier=tier,
                label=HEATMAP_TIER_LABELS[tier],
            )
        )
    return cells


__all__ = ["classify_spend", "daily_spend_for_month", "compute_heatmap"]
