"""Domain services for the daily safe-spend budget."""

import calendar
from datetime import date

from src.domain.constants import GOAL_POLICY_CACHED, GOAL_POLICY_ROLLING
from src.domain.errors import ValidationError
from src.domain.models import Goal, SafeSpendBreakdown, UserLedger


def days_in_month(day: date) -> int:
    """Return the total number of days in the month containing ``day``."""
    return calendar.monthrange(day.year, day.month)[1]


def days_until(deadline: date, today: date) -> int:
    """Return whole days from ``today`` to ``deadline``, at least one."""
    return max((deadline - today).days, 1)


def goal_daily_contribution(target_amount: int, days_remaining: int) -> int:
    """Return the daily saving needed to reach a goal in time.

    The ceiling guarantees ``contribution * days_remaining >= target_amount``.

    Args:
        target_amount: Amount to save.
        days_remaining: Days left until the deadline.

    Returns:
        int: Daily contribution rounded up.
    """
    return -(-target_amount // max(days_remaining, 1))


def loan_daily_amount(amount: int, duration_days: int) -> int:
    """Return the daily repayment slice of a loan.

    Raises:
        ValidationError: If the duration is not strictly positive.
    """
    if duration_days <= 0:
        raise ValidationError("duration_days", "must be greater than zero")
    return amount // duration_days


def spent_on(ledger: UserLedger, day: date) -> int:
    """Return the sum of transaction amounts logged on ``day``."""
    return sum(
        tx.amount for tx in ledger.transactions if tx.timestamp.date() == day
    )


def effective_goal_contribution(
    goal: Goal,
    today: date,
    policy: str,
) -> int:
    """Return the contribution of a goal under the chosen policy.

    The cached policy keeps the value computed at creation; the rolling
    policy recomputes it against the days left to the deadline.
    """
    if policy == GOAL_POLICY_ROLLING:
        return goal_daily_contribution(
            goal.target_amount,
            days_until(goal.deadline, today),
        )
    return goal.daily_contribution


def compute_safe_spend(
    ledger: UserLedger,
    today: date,
    *,
    monthly_limit: int | None = None,
    goal_policy: str = GOAL_POLICY_CACHED,
) -> SafeSpendBreakdown:
    """Compute what may still be spent today.

    ``max(0, floor((limit - fixed) / days_in_month) - borrow debt
    - goal contributions - spent today)``.

    Args:
        ledger: Ledger snapshot.
        today: Current calendar date.
        monthly_limit: Optional candidate limit for budget previews.
        goal_policy: Goal contribution policy (cached or rolling).

    Returns:
        SafeSpendBreakdown: Final figure and its intermediate terms.
    """
    limit = ledger.monthly_limit if monthly_limit is None else monthly_limit
    fixed_total = ledger.fixed_total
    total_days = days_in_month(today)
    daily_base = (limit - fixed_total) // total_days
    daily_debt = sum(
        loan.daily_amount for loan in ledger.loans if loan.is_borrow
    )
    daily_goals = sum(
        effective_goal_contribution(goal, today, goal_policy)
        for goal in ledger.goals
    )
    spent_today = spent_on(ledger, today)
    safe = max(0, daily_base - daily_debt - daily_goals - spent_today)
    return SafeSpendBreakdown(
        monthly_limit=limit,
        fixed_total=fixed_total,
        days_in_month=total_days,
        daily_base=daily_base,
        daily_debt=daily_debt,
        daily_goals=daily_goals,
        spent_today=spent_today,
        safe_to_spend=safe,
        days_left=total_days - today.day,
    )


__all__ = [
    "days_in_month",
    "days_until",
    "goal_daily_contribution",
    "loan_daily_amount",
    "spent_on",
    "effective_goal_contribution",
    "compute_safe_spend",
]
