"""Use case deriving the dashboard figures from a ledger snapshot."""

from datetime import datetime
from typing import Callable

from src.domain.constants import (
    GOAL_POLICIES,
    GOAL_POLICY_CACHED,
    TIME_FILTER_ALL,
)
from src.domain.models import (
    DashboardSummary,
    HeatmapThresholds,
    SafeSpendBreakdown,
    Transaction,
    UserLedger,
)
from src.domain.services.budget import compute_safe_spend
from src.domain.services.heatmap import compute_heatmap
from src.domain.services.sentiment import (
    compute_sentiment_totals,
    filter_by_sentiment,
    filter_by_window,
)
from src.domain.services.validation import require_non_negative_int
from src.infrastructure.logging.logger import get_app_logger

HEATMAP_MODE_ABSOLUTE = "absolute"
HEATMAP_MODE_RELATIVE = "relative"
HEATMAP_MODES = (HEATMAP_MODE_ABSOLUTE, HEATMAP_MODE_RELATIVE)


class GetDashboardSummaryUseCase:
    """Compute safe spend, heatmap and sentiment totals for a ledger."""

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        thresholds: HeatmapThresholds | None = None,
        heatmap_mode: str = HEATMAP_MODE_ABSOLUTE,
        goal_policy: str = GOAL_POLICY_CACHED,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            clock: Source of the current local time.
            thresholds: Absolute heatmap thresholds; defaults when omitted.
            heatmap_mode: ``absolute`` or ``relative`` to the daily budget.
            goal_policy: ``cached`` or ``rolling`` goal contributions.
            logger: Optional logger compatible with logging.Logger-like API.

        Raises:
            ValueError: If the heatmap mode or goal policy is unknown.
        """
        if heatmap_mode not in HEATMAP_MODES:
            raise ValueError(f"Unknown heatmap mode: {heatmap_mode}")
        if goal_policy not in GOAL_POLICIES:
            raise ValueError(f"Unknown goal policy: {goal_policy}")
        self._clock = clock
        self._thresholds = thresholds or HeatmapThresholds()
        self._heatmap_mode = heatmap_mode
        self._goal_policy = goal_policy
        self._logger = logger or get_app_logger()

    def execute(
        self,
        ledger: UserLedger,
        time_filter: str = TIME_FILTER_ALL,
    ) -> DashboardSummary:
        """Return every derived dashboard value.

        Args:
            ledger: Ledger snapshot to derive from.
            time_filter: Sentiment window (day, week, month or all).

        Returns:
            DashboardSummary: Safe spend breakdown, heatmap and sentiment.
        """
        now = self._clock()
        today = now.date()
        safe_spend = compute_safe_spend(
            ledger,
            today,
            goal_policy=self._goal_policy,
        )
        thresholds = self._thresholds
        if self._heatmap_mode == HEATMAP_MODE_RELATIVE:
            thresholds = HeatmapThresholds.relative_to(safe_spend.daily_base)
        heatmap = compute_heatmap(ledger, today, thresholds)
        sentiment = compute_sentiment_totals(
            ledger.transactions,
            time_filter,
            now,
        )
        self._logger.debug(
            f"Dashboard derived for {today}: safe={safe_spend.safe_to_spend} "
            f"sentiment_total={sentiment.total}"
        )
        return DashboardSummary(
            safe_spend=safe_spend,
            heatmap=heatmap,
            sentiment=sentiment,
        )

    def preview_safe_spend(
        self,
        ledger: UserLedger,
        monthly_limit,
    ) -> SafeSpendBreakdown:
        """Evaluate safe spend for a candidate limit without mutating."""
        limit = require_non_negative_int(monthly_limit, "monthly_limit")
        return compute_safe_spend(
            ledger,
            self._clock().date(),
            monthly_limit=limit,
            goal_policy=self._goal_policy,
        )

    def transactions_for(
        self,
        ledger: UserLedger,
        time_filter: str = TIME_FILTER_ALL,
        sentiment: str = "all",
    ) -> list[Transaction]:
        """Return the drill-down list for a window and sentiment."""
        windowed = filter_by_window(
            ledger.transactions,
            time_filter,
            self._clock(),
        )
        return filter_by_sentiment(windowed, sentiment)


__all__ = [
    "GetDashboardSummaryUseCase",
    "HEATMAP_MODE_ABSOLUTE",
    "HEATMAP_MODE_RELATIVE",
    "HEATMAP_MODES",
]
