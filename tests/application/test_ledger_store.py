"""Tests for the in-memory ledger store."""

from datetime import date, datetime
from itertools import count
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.ledger_store import LedgerStore
from src.domain.errors import ValidationError
from src.domain.models import FixedExpense, UserLedger


NOW = datetime(2026, 4, 15, 10, 30)


def _store(ledger: UserLedger | None = None):
    synchronizer = MagicMock()
    ids = count(1)
    store = LedgerStore(
        ledger,
        synchronizer,
        user_id="user-1",
        clock=lambda: NOW,
        id_factory=lambda: f"id-{next(ids)}",
        logger=MagicMock(),
        usage_logger=MagicMock(),
    )
    return store, synchronizer


def test_add_transaction_prepends_and_requests_commit() -> None:
    """New spends go to the head of the list and are queued for writing."""
    store, synchronizer = _store()

    store.add_transaction("Cafe", 120, "Food", "worthy")
    ledger = store.add_transaction("Bus", "40")

    assert [tx.merchant for tx in ledger.transactions] == ["Bus", "Cafe"]
    latest = ledger.transactions[0]
    assert latest.amount == 40
    assert latest.category == "General"
    assert latest.sentiment == "neutral"
    assert latest.timestamp == NOW
    assert store.version == 2
    synchronizer.request_commit.assert_called_with(
        ledger,
        2,
        owner="user-1",
        session=store.session_id,
    )


def test_add_transaction_normalizes_legacy_sentiment() -> None:
    """The legacy ignore tag is accepted as neutral."""
    store, _ = _store()

    ledger = store.add_transaction("Kiosk", 10, sentiment="Ignore")

    assert ledger.transactions[0].sentiment == "neutral"


@pytest.mark.parametrize(
    ("kwargs", "field"),
    [
        ({"merchant": "", "amount": 10}, "merchant"),
        ({"merchant": "Cafe", "amount": 0}, "amount"),
        ({"merchant": "Cafe", "amount": "ten"}, "amount"),
        ({"merchant": "Cafe", "amount": True}, "amount"),
        ({"merchant": "Cafe", "amount": 5, "sentiment": "meh"}, "sentiment"),
    ],
)
def test_invalid_transaction_is_rejected_without_commit(kwargs, field) -> None:
    """Invalid input raises and leaves the ledger and version untouched."""
    store, synchronizer = _store()
    before = store.ledger

    with pytest.raises(ValidationError) as excinfo:
        store.add_transaction(**kwargs)

    assert excinfo.value.field == field
    assert store.ledger is before
    assert store.version == 0
    synchronizer.request_commit.assert_not_called()


def test_add_transaction_normalizes_timestamps() -> None:
    """Aware datetimes, ISO strings and epoch ms become local naive times."""
    store, _ = _store()
    earlier = datetime(2026, 4, 15, 8, 0)

    store.add_transaction("Cafe", 10, timestamp=NOW.astimezone())
    store.add_transaction("Bus", 20, timestamp="2026-04-15T08:00:00")
    ledger = store.add_transaction(
        "Kiosk",
        30,
        timestamp=int(earlier.timestamp() * 1000),
    )

    stamps = [tx.timestamp for tx in ledger.transactions]
    assert stamps == [earlier, earlier, NOW]
    assert all(stamp.tzinfo is None for stamp in stamps)


@pytest.mark.parametrize("timestamp", ["yesterday", object(), True])
def test_add_transaction_rejects_unparseable_timestamp(timestamp) -> None:
    """Timestamps that cannot be read raise instead of being stored."""
    store, synchronizer = _store()

    with pytest.raises(ValidationError) as excinfo:
        store.add_transaction("Cafe", 10, timestamp=timestamp)

    assert excinfo.value.field == "timestamp"
    assert store.ledger.transactions == ()
    synchronizer.request_commit.assert_not_called()


def test_fixed_expenses_add_and_remove() -> None:
    """Fixed expenses append and are removed by index."""
    store, _ = _store()
    store.add_fixed_expense("Rent", 15000)
    store.add_fixed_expense("Gym", "1200")

    ledger = store.remove_fixed_expense(0)

    assert ledger.fixed_expenses == (FixedExpense("Gym", 1200),)
    assert store.version == 3


@pytest.mark.parametrize("index", [5, -1])
def test_remove_absent_fixed_expense_is_a_noop(index: int) -> None:
    """Removing an absent index neither bumps the version nor commits."""
    ledger = UserLedger(fixed_expenses=(FixedExpense("Rent", 15000),))
    store, synchronizer = _store(ledger)

    assert store.remove_fixed_expense(index) is ledger
    assert store.version == 0
    synchronizer.request_commit.assert_not_called()


def test_add_goal_fixes_contribution_at_creation() -> None:
    """The daily contribution is rounded up over the days left."""
    store, _ = _store()

    ledger = store.add_goal("Bike", 1000, "2026-04-18")

    goal = ledger.goals[0]
    assert goal.id == "id-1"
    assert goal.deadline == date(2026, 4, 18)
    assert goal.days_remaining == 3
    assert goal.daily_contribution == 334
    assert goal.daily_contribution * goal.days_remaining >= 1000


def test_add_goal_with_past_deadline_uses_one_day() -> None:
    """Deadlines today or earlier clamp to a single day."""
    store, _ = _store()

    goal = store.add_goal("Late", 500, date(2026, 4, 1)).goals[0]

    assert goal.days_remaining == 1
    assert goal.daily_contribution == 500


def test_add_goal_requires_deadline() -> None:
    """Goals without a deadline are rejected."""
    store, _ = _store()

    with pytest.raises(ValidationError) as excinfo:
        store.add_goal("Bike", 1000, None)

    assert excinfo.value.field == "deadline"


def test_remove_goal_matches_ids_as_strings() -> None:
    """Goal ids from forms may arrive as strings or numbers."""
    store, _ = _store()
    store.add_goal("Bike", 1000, "2026-05-01")
    store.add_goal("Trip", 2000, "2026-06-01")

    ledger = store.remove_goal("id-1")
    unchanged = store.remove_goal("missing")

    assert [goal.name for goal in ledger.goals] == ["Trip"]
    assert unchanged is ledger
    assert store.version == 3


def test_add_loan_computes_daily_amount() -> None:
    """Loans repay in floored daily slices."""
    store, _ = _store()

    loan = store.add_loan("Borrow", "Ravi", 10000, 50).loans[0]

    assert loan.type == "borrow"
    assert loan.counterparty == "Ravi"
    assert loan.daily_amount == 200
    assert loan.is_borrow


@pytest.mark.parametrize(
    ("args", "field"),
    [
        (("gift", "Ravi", 100, 5), "type"),
        (("lend", "", 100, 5), "counterparty"),
        (("lend", "Ravi", -1, 5), "amount"),
        (("lend", "Ravi", 100, 0), "duration_days"),
    ],
)
def test_invalid_loan_is_rejected(args, field: str) -> None:
    """Loan type, counterparty, amount and duration are validated."""
    store, _ = _store()

    with pytest.raises(ValidationError) as excinfo:
        store.add_loan(*args)

    assert excinfo.value.field == field


def test_set_monthly_limit_accepts_zero_and_rejects_negative() -> None:
    """The monthly limit is a non-negative integer."""
    store, _ = _store()

    assert store.set_monthly_limit("30000").monthly_limit == 30000
    assert store.set_monthly_limit(0).monthly_limit == 0
    with pytest.raises(ValidationError):
        store.set_monthly_limit(-1)


def test_update_profile_ignores_blank_values() -> None:
    """Blank values keep the current profile field."""
    store, _ = _store()
    store.update_profile({"name": "Mira", "email": "m@x.io"})

    profile = store.update_profile({"name": "  ", "phone": "555"}).profile

    assert profile.name == "Mira"
    assert profile.phone == "555"
    assert profile.email == "m@x.io"


@pytest.mark.parametrize("partial", [{}, {"name": "  ", "phone": None}])
def test_update_profile_without_values_is_a_noop(partial) -> None:
    """Updates carrying no values neither bump the version nor commit."""
    store, synchronizer = _store()

    ledger = store.update_profile(partial)

    assert ledger is store.ledger
    assert store.version == 0
    synchronizer.request_commit.assert_not_called()


def test_update_profile_rejects_unknown_fields() -> None:
    """Only name, phone, email and avatar_url may be updated."""
    store, synchronizer = _store()

    with pytest.raises(ValidationError) as excinfo:
        store.update_profile({"name": "Mira", "monthlyLimit": 5})

    assert excinfo.value.field == "profile"
    synchronizer.request_commit.assert_not_called()


def test_post_message_creates_group_history() -> None:
    """Posting to an unknown group creates its message list."""
    store, _ = _store()

    store.post_message("Trip", {"text": "Booked!"})
    ledger = store.post_message(
        "Trip",
        {"type": "split", "item": "Fuel", "amount": "900", "author": "Ravi"},
    )

    first, second = ledger.chat_groups["Trip"]
    assert (first.type, first.author, first.text) == ("text", "You", "Booked!")
    assert first.timestamp == NOW
    assert (second.type, second.item, second.amount) == ("split", "Fuel", 900)
    assert second.author == "Ravi"


@pytest.mark.parametrize(
    ("message", "field"),
    [
        ({"type": "text", "text": ""}, "text"),
        ({"type": "split", "item": "Fuel"}, "amount"),
        ({"type": "split", "amount": 10}, "item"),
        ({"type": "poll", "text": "?"}, "type"),
    ],
)
def test_invalid_message_is_rejected(message, field: str) -> None:
    """Each message type requires its own fields."""
    store, _ = _store()

    with pytest.raises(ValidationError) as excinfo:
        store.post_message("Trip", message)

    assert excinfo.value.field == field


def test_create_group_seeds_system_message_once() -> None:
    """A new group gets a system message; re-creating keeps history."""
    store, _ = _store()
    members = [
        {"name": "Ravi", "phone": "111"},
        {"name": "Ana", "phone": "222", "email": "ana@x.io"},
    ]

    ledger = store.create_group("Flat", members)
    ledger = store.create_group("Flat", members[:1])

    history = ledger.chat_groups["Flat"]
    assert len(history) == 1
    assert history[0].type == "system"
    assert history[0].text == 'Group "Flat" created with 2 members.'
    assert [member.name for member in ledger.group_members["Flat"]] == [
        "Ravi"
    ]


def test_create_group_requires_member_phone() -> None:
    """Every member needs a name and a phone number."""
    store, _ = _store()

    with pytest.raises(ValidationError) as excinfo:
        store.create_group("Flat", [{"name": "Ravi"}])

    assert excinfo.value.field == "member.phone"
    assert store.ledger.group_members == {}


def test_mutations_are_logged_to_usage_logger() -> None:
    """Each successful mutation writes one usage line."""
    usage_logger = MagicMock()
    store = LedgerStore(
        clock=lambda: NOW,
        user_id="user-9",
        logger=MagicMock(),
        usage_logger=usage_logger,
    )

    store.set_monthly_limit(100)

    usage_logger.info.assert_called_once_with(
        "set_monthly_limit user=user-9 version=1"
    )
