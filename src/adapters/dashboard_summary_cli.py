"""CLI adapter printing the budget summary of a user's ledger.

This module wires the session bootstrapper and the dashboard use case to
the configured adapters and prints today's safe-spend figures.
"""

import asyncio
import os

from src.domain.constants import TIME_FILTER_ALL, TIME_FILTER_WINDOWS_DAYS
from src.domain.errors import SpendlyError
from src.domain.models import HEATMAP_TIER_HEAVY, DashboardSummary
from src.infrastructure.container import (
    build_bootstrapper,
    build_dashboard_use_case,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import SpendlySettings


def _parse_time_filter(value: str | None, logger) -> str:
    """Return a valid sentiment window name.

    Args:
        value: Raw window name (day, week, month or all).
        logger: Logger used for warnings.

    Returns:
        str: The window name, or ``all`` when missing or invalid.
    """
    if not value:
        return TIME_FILTER_ALL
    normalized = value.strip().lower()
    if normalized not in TIME_FILTER_WINDOWS_DAYS:
        logger.warning(
            f"Invalid time filter '{value}'. Expected one of "
            f"{', '.join(TIME_FILTER_WINDOWS_DAYS)}."
        )
        return TIME_FILTER_ALL
    return normalized


def _format_summary(summary: DashboardSummary) -> list[str]:
    """Return the printable lines of a dashboard summary."""
    safe = summary.safe_spend
    sentiment = summary.sentiment
    heavy_days = [
        cell.day.day
        for cell in summary.heatmap
        if cell.tier == HEATMAP_TIER_HEAVY
    ]
    return [
        f"Safe to spend today: {safe.safe_to_spend}",
        f"Monthly limit: {safe.monthly_limit} "
        f"(fixed {safe.fixed_total}, disposable {safe.disposable})",
        f"Daily budget: {safe.daily_base} over {safe.days_in_month} days "
        f"(debt {safe.daily_debt}, goals {safe.daily_goals}, "
        f"spent today {safe.spent_today})",
        f"Days left in month: {safe.days_left}",
        f"Sentiment ({sentiment.time_filter}): worthy {sentiment.worthy}, "
        f"regret {sentiment.regret}, neutral {sentiment.neutral}, "
        f"total {sentiment.total}",
        "Heavy spending days: "
        + (", ".join(str(day) for day in heavy_days) or "none"),
    ]


def main() -> None:
    """Print the dashboard summary for the configured user."""
    logger = get_app_logger()
    settings = SpendlySettings.from_env()
    if not settings.user_id:
        logger.warning("SPENDLY_USER_ID is required to open a ledger.")
        return

    time_filter = _parse_time_filter(
        os.getenv("SPENDLY_SUMMARY_FILTER"),
        logger,
    )
    bootstrapper = build_bootstrapper(settings)
    try:
        store = asyncio.run(bootstrapper.execute(settings.user_id))
    except SpendlyError as exc:
        logger.error(f"Cannot open ledger for {settings.user_id}: {exc}")
        return

    use_case = build_dashboard_use_case(settings)
    summary = use_case.execute(store.ledger, time_filter=time_filter)
    for line in _format_summary(summary):
        print(line)


if __name__ == "__main__":  # pragma: no cover
    main()
