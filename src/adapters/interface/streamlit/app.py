"""Streamlit dashboard entry point."""

import asyncio
from collections.abc import Sequence

import streamlit as st
import altair as alt

from src.application.use_cases.bootstrap_session import (
    BootstrapSessionUseCase,
)
from src.application.use_cases.get_dashboard_summary import (
    GetDashboardSummaryUseCase,
)
from src.application.use_cases.ledger_store import LedgerStore
from src.domain.constants import (
    SENTIMENT_NEUTRAL,
    SENTIMENTS,
    TIME_FILTER_ALL,
    TIME_FILTER_WINDOWS_DAYS,
)
from src.domain.errors import SpendlyError, ValidationError
from src.domain.models import HeatmapDay, SentimentTotals
from src.infrastructure.container import (
    build_bootstrapper,
    build_dashboard_use_case,
)
from src.infrastructure.logging.logger import get_app_logger

CURRENCY_SYMBOL = "₹"

HEATMAP_COLORS = {
    "none": "#1f2430",
    "light": "#2e7d32",
    "moderate": "#f4a261",
    "heavy": "#e63946",
}

SENTIMENT_COLORS = {
    "worthy": "#2e7d32",
    "regret": "#e63946",
    "neutral": "#6c8ead",
}


def _check_altair_dependencies() -> tuple[bool, str | None]:
    """Check that the numpy/pandas stack Altair relies on is usable.

    Returns:
        tuple[bool, str | None]: Whether charts can render and, if not,
        a message naming the broken dependency.
    """
    try:
        import numpy
        import pandas
    except ImportError as exc:
        return False, f"Altair dependencies unavailable: {exc}"
    if not hasattr(numpy, "ndarray"):
        return False, "numpy is installed but incomplete (missing ndarray)."
    if not hasattr(pandas, "Timestamp"):
        return False, (
            "pandas is installed but incomplete (missing Timestamp)."
        )
    return True, None


def _fetch_bootstrapper() -> BootstrapSessionUseCase:
    """Build the session bootstrapper from environment settings."""
    return build_bootstrapper()


@st.cache_resource(show_spinner=False)
def _load_bootstrapper() -> BootstrapSessionUseCase:
    """Cached wrapper around _fetch_bootstrapper for Streamlit sessions."""
    return _fetch_bootstrapper()


@st.cache_resource(show_spinner=False)
def _load_dashboard_use_case() -> GetDashboardSummaryUseCase:
    """Cached dashboard derivation use case."""
    return build_dashboard_use_case()


def _fetch_session(
    bootstrapper: BootstrapSessionUseCase,
    user_id: str,
) -> LedgerStore:
    """Hydrate the ledger session for ``user_id``."""
    return asyncio.run(bootstrapper.execute(user_id))


def _flush(bootstrapper: BootstrapSessionUseCase) -> None:
    """Write pending ledger snapshots before the script run ends."""
    asyncio.run(bootstrapper.synchronizer.flush())


def _format_currency(value: int) -> str:
    """Format whole currency amounts for display."""
    return f"{CURRENCY_SYMBOL}{value:,}"


def _prepare_heatmap_data(
    days: Sequence[HeatmapDay],
) -> list[dict[str, str | int]]:
    """Prepare calendar cells laid out by week row and weekday column."""
    if not days:
        return []
    offset = days[0].day.weekday()
    return [
        {
            "date": cell.day.isoformat(),
            "day": cell.day.day,
            "weekday": cell.day.strftime("%a"),
            "week": (cell.day.day - 1 + offset) // 7,
            "spent": cell.spent,
            "spent_label": _format_currency(cell.spent),
            "tier": cell.label,
        }
        for cell in days
    ]


def _prepare_sentiment_data(
    totals: SentimentTotals,
) -> list[dict[str, str | int]]:
    """Prepare donut slices, dropping empty sentiment buckets."""
    data = []
    for sentiment in SENTIMENTS:
        amount = getattr(totals, sentiment)
        if amount <= 0:
            continue
        share = amount * 100 / totals.total if totals.total else 0
        data.append(
            {
                "sentiment": sentiment,
                "amount": amount,
                "amount_label": _format_currency(amount),
                "share_label": f"{share:.1f}%",
            }
        )
    return data


def _render_heatmap(days: Sequence[HeatmapDay]) -> None:
    """Render the monthly spending calendar."""
    data = _prepare_heatmap_data(days)
    weekdays = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    base = alt.Chart(alt.Data(values=data)).encode(
        x=alt.X("weekday:N", sort=weekdays, title=None),
        y=alt.Y("week:O", axis=None),
    )
    cells = base.mark_rect(cornerRadius=4, stroke="#0f1115").encode(
        color=alt.Color(
            "tier:N",
            scale=alt.Scale(
                domain=list(HEATMAP_COLORS),
                range=list(HEATMAP_COLORS.values()),
            ),
            legend=alt.Legend(orient="bottom", title=None),
        ),
        tooltip=[
            alt.Tooltip("date:N"),
            alt.Tooltip("spent_label:N", title="Spent"),
            alt.Tooltip("tier:N"),
        ],
    )
    labels = base.mark_text(color="#f5f7ff", fontSize=11).encode(
        text="day:Q"
    )
    chart = alt.layer(cells, labels).properties(height=260).configure_view(
        stroke=None
    )
    st.subheader("Spending heatmap")
    st.altair_chart(chart, width="stretch")


def _render_sentiment_chart(totals: SentimentTotals) -> None:
    """Render a donut of spending by sentiment."""
    st.subheader("Spending by sentiment")
    data = _prepare_sentiment_data(totals)
    if not data:
        st.info("No spending in the selected period.")
        return
    chart = alt.Chart(alt.Data(values=data)).mark_arc(
        innerRadius=70,
        cornerRadius=6,
        padAngle=0.02,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color(
            "sentiment:N",
            scale=alt.Scale(
                domain=list(SENTIMENT_COLORS),
                range=list(SENTIMENT_COLORS.values()),
            ),
            legend=alt.Legend(orient="bottom", title=None),
        ),
        tooltip=[
            alt.Tooltip("sentiment:N"),
            alt.Tooltip("amount_label:N", title="Amount"),
            alt.Tooltip("share_label:N", title="Share"),
        ],
    ).properties(width=280, height=280)
    st.altair_chart(chart, width="stretch")
    st.caption(f"Total: {_format_currency(totals.total)}")


def _render_expense_form(
    store: LedgerStore,
    bootstrapper: BootstrapSessionUseCase,
) -> None:
    """Render the add-expense form and apply submissions."""
    with st.form("add_expense", clear_on_submit=True):
        st.subheader("Log an expense")
        merchant = st.text_input("Merchant")
        amount = st.number_input("Amount", min_value=0, step=10)
        category = st.text_input("Category", placeholder="General")
        sentiment = st.radio(
            "Was it worth it?",
            SENTIMENTS,
            index=SENTIMENTS.index(SENTIMENT_NEUTRAL),
            horizontal=True,
        )
        submitted = st.form_submit_button("Add expense")
    if not submitted:
        return
    try:
        store.add_transaction(merchant, amount, category, sentiment)
    except ValidationError as exc:
        st.error(f"Invalid {exc.field}: {exc.message}")
        return
    _flush(bootstrapper)
    st.success(f"Logged {_format_currency(int(amount))} at {merchant}.")


def _render_budget_settings(
    store: LedgerStore,
    use_case: GetDashboardSummaryUseCase,
    bootstrapper: BootstrapSessionUseCase,
) -> None:
    """Render the monthly limit editor with a live safe-spend preview."""
    st.sidebar.subheader("Budget")
    limit = st.sidebar.number_input(
        "Monthly limit",
        min_value=0,
        step=500,
        value=store.ledger.monthly_limit,
    )
    preview = use_case.preview_safe_spend(store.ledger, limit)
    st.sidebar.caption(
        f"Safe to spend today: {_format_currency(preview.safe_to_spend)}"
    )
    if st.sidebar.button("Save limit"):
        store.set_monthly_limit(limit)
        _flush(bootstrapper)
        st.sidebar.success("Monthly limit saved.")


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Spendly", layout="wide")
    st.title("Spendly")

    ok, message = _check_altair_dependencies()
    if not ok:
        st.error(message)
        return

    bootstrapper = _load_bootstrapper()
    use_case = _load_dashboard_use_case()
    default_user = bootstrapper.identity.current_user_id() or ""
    user_id = st.sidebar.text_input("User id", value=default_user).strip()
    if not user_id:
        st.warning("Enter a user id to open a ledger.")
        return

    sessions = st.session_state.setdefault("ledger_sessions", {})
    store = sessions.get(user_id)
    if store is None:
        try:
            store = _fetch_session(bootstrapper, user_id)
        except SpendlyError as exc:
            get_app_logger().error(f"Cannot open ledger for {user_id}: {exc}")
            st.error(f"Cannot open ledger: {exc}")
            return
        sessions[user_id] = store

    _render_budget_settings(store, use_case, bootstrapper)
    time_filter = st.sidebar.selectbox(
        "Sentiment period",
        list(TIME_FILTER_WINDOWS_DAYS),
        index=list(TIME_FILTER_WINDOWS_DAYS).index(TIME_FILTER_ALL),
    )

    summary = use_case.execute(store.ledger, time_filter=time_filter)
    safe = summary.safe_spend
    safe_col, base_col, spent_col, left_col = st.columns(4)
    safe_col.metric(
        "Safe to spend today", _format_currency(safe.safe_to_spend)
    )
    base_col.metric("Daily budget", _format_currency(safe.daily_base))
    spent_col.metric("Spent today", _format_currency(safe.spent_today))
    left_col.metric("Days left", safe.days_left)
    st.caption(
        f"Debt {_format_currency(safe.daily_debt)}/day, "
        f"goals {_format_currency(safe.daily_goals)}/day, "
        f"fixed {_format_currency(safe.fixed_total)}/month"
    )

    chart_left, chart_right = st.columns(2)
    with chart_left:
        _render_heatmap(summary.heatmap)
    with chart_right:
        _render_sentiment_chart(summary.sentiment)

    _render_expense_form(store, bootstrapper)

    recent = use_case.transactions_for(store.ledger, time_filter)
    st.subheader("Transactions")
    st.caption(f"{len(recent)} transactions shown")
    st.dataframe(
        [
            {
                "When": tx.timestamp.strftime("%Y-%m-%d %H:%M"),
                "Merchant": tx.merchant,
                "Category": tx.category,
                "Amount": _format_currency(tx.amount),
                "Sentiment": tx.sentiment,
            }
            for tx in recent
        ],
        width="stretch",
        hide_index=True,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
