"""Domain models for the per-user budgeting ledger."""

from dataclasses import dataclass, field
from datetime import date, datetime

from src.domain.constants import (
    DEFAULT_AUTHOR,
    DEFAULT_AVATAR_URL,
    DEFAULT_PROFILE_NAME,
    LOAN_BORROW,
    MESSAGE_TEXT,
    SENTIMENT_NEUTRAL,
)


@dataclass(frozen=True)
class Profile:
    """Display profile of the ledger owner."""

    name: str = DEFAULT_PROFILE_NAME
    phone: str = ""
    email: str = ""
    avatar_url: str = DEFAULT_AVATAR_URL


@dataclass(frozen=True)
class FixedExpense:
    """Recurring monthly bill deducted before the daily budget."""

    name: str
    amount: int


@dataclass(frozen=True)
class Transaction:
    """Single logged spend.

    Attributes:
        timestamp: Local time the spend was logged.
        merchant: Where or what the money went to.
        category: Free-form spending category.
        amount: Spent amount in whole currency units.
        sentiment: One of worthy, regret or neutral.
    """

    timestamp: datetime
    merchant: str
    category: str
    amount: int
    sentiment: str = SENTIMENT_NEUTRAL


@dataclass(frozen=True)
class Goal:
    """Savings goal with a daily contribution fixed at creation time."""

    id: str | int
    name: str
    target_amount: int
    deadline: date
    daily_contribution: int
    days_remaining: int


@dataclass(frozen=True)
class Loan:
    """Money borrowed from or lent to a peer, repaid in daily slices."""

    id: str | int
    type: str
    counterparty: str
    amount: int
    duration_days: int
    daily_amount: int

    @property
    def is_borrow(self) -> bool:
        """Return True when the loan reduces the disposable budget."""
        return self.type == LOAN_BORROW


@dataclass(frozen=True)
class ChatMessage:
    """Group chat entry: plain text, split request or system notice."""

    type: str = MESSAGE_TEXT
    author: str = DEFAULT_AUTHOR
    timestamp: datetime | None = None
    text: str | None = None
    item: str | None = None
    amount: int | None = None


@dataclass(frozen=True)
class GroupMember:
    """Contact attached to a chat group."""

    name: str
    phone: str
    email: str = ""


@dataclass(frozen=True)
class UserLedger:
    """Root aggregate holding every piece of a user's budgeting state.

    Snapshots are immutable; the ledger store swaps in a new snapshot on
    each mutation so in-flight commits keep the state they were issued for.
    """

    profile: Profile = field(default_factory=Profile)
    monthly_limit: int = 0
    fixed_expenses: tuple[FixedExpense, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    goals: tuple[Goal, ...] = ()
    loans: tuple[Loan, ...] = ()
    chat_groups: dict[str, tuple[ChatMessage, ...]] = field(
        default_factory=dict
    )
    group_members: dict[str, tuple[GroupMember, ...]] = field(
        default_factory=dict
    )
    created_at: datetime | None = None

    @property
    def fixed_total(self) -> int:
        """Return the sum of all fixed expense amounts."""
        return sum(expense.amount for expense in self.fixed_expenses)


__all__ = [
    "Profile",
    "FixedExpense",
    "Transaction",
    "Goal",
    "Loan",
    "ChatMessage",
    "GroupMember",
    "UserLedger",
]
