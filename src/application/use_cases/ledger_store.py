"""In-memory owner of the signed-in user's ledger.

Every mutator validates its input, swaps in a new immutable snapshot,
bumps the aggregate version and asks the synchronizer to persist the
snapshot. Remote failures never roll the local state back.
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable
from uuid import uuid4

from src.application.use_cases.persistence_sync import PersistenceSynchronizer
from src.domain.constants import (
    DEFAULT_AUTHOR,
    DEFAULT_CATEGORY,
    LEGACY_SENTIMENT_ALIASES,
    LOAN_TYPES,
    MESSAGE_SPLIT,
    MESSAGE_SYSTEM,
    MESSAGE_TEXT,
    MESSAGE_TYPES,
    SENTIMENT_NEUTRAL,
    SENTIMENTS,
)
from src.domain.errors import ValidationError
from src.domain.models import (
    ChatMessage,
    FixedExpense,
    Goal,
    GroupMember,
    Loan,
    Transaction,
    UserLedger,
)
from src.domain.services.budget import (
    days_until,
    goal_daily_contribution,
    loan_daily_amount,
)
from src.domain.services.normalization import parse_timestamp
from src.domain.services.validation import (
    coerce_int,
    parse_deadline,
    require_choice,
    require_non_negative_int,
    require_positive_int,
    require_text,
)
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger

_PROFILE_FIELDS = ("name", "phone", "email", "avatar_url")


class LedgerStore:
    """Session handle exposing ledger mutations and the current snapshot."""

    def __init__(
        self,
        ledger: UserLedger | None = None,
        synchronizer: PersistenceSynchronizer | None = None,
        *,
        user_id: str | None = None,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] | None = None,
        logger=None,
        usage_logger=None,
    ) -> None:
        """Initialize the store.

        Args:
            ledger: Hydrated snapshot; an empty ledger when omitted.
            synchronizer: Receives a commit request after each mutation.
            user_id: Owner of the ledger; its document receives commits.
            clock: Source of the current local time.
            id_factory: Generates goal and loan identifiers.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording user-facing mutations.
        """
        self._ledger = ledger or UserLedger()
        self._synchronizer = synchronizer
        self._user_id = user_id
        self._clock = clock
        self._id_factory = id_factory or (lambda: uuid4().hex)
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()
        self._version = 0
        self._session_id = uuid4().hex

    @property
    def ledger(self) -> UserLedger:
        """Return the current snapshot."""
        return self._ledger

    @property
    def version(self) -> int:
        """Return the number of successful mutations in this session."""
        return self._version

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def session_id(self) -> str:
        """Return the key under which this session's commits are queued."""
        return self._session_id

    def add_transaction(
        self,
        merchant,
        amount,
        category=None,
        sentiment=SENTIMENT_NEUTRAL,
        timestamp=None,
    ) -> UserLedger:
        """Log a spend at the head of the transaction list.

        ``timestamp`` accepts a datetime, epoch milliseconds or an ISO
        string and defaults to now; aware values are converted to local
        time.

        Raises:
            ValidationError: If any field is missing or malformed.
        """
        raw_sentiment = sentiment or SENTIMENT_NEUTRAL
        if str(raw_sentiment).strip().lower() in LEGACY_SENTIMENT_ALIASES:
            raw_sentiment = LEGACY_SENTIMENT_ALIASES[
                str(raw_sentiment).strip().lower()
            ]
        tx = Transaction(
            timestamp=self._timestamp(timestamp),
            merchant=require_text(merchant, "merchant"),
            category=(str(category).strip() if category else "")
            or DEFAULT_CATEGORY,
            amount=require_positive_int(amount, "amount"),
            sentiment=require_choice(raw_sentiment, SENTIMENTS, "sentiment"),
        )
        return self._apply(
            "add_transaction",
            replace(
                self._ledger,
                transactions=(tx, *self._ledger.transactions),
            ),
        )

    def add_fixed_expense(self, name, amount) -> UserLedger:
        """Append a recurring monthly bill."""
        expense = FixedExpense(
            name=require_text(name, "name"),
            amount=require_positive_int(amount, "amount"),
        )
        return self._apply(
            "add_fixed_expense",
            replace(
                self._ledger,
                fixed_expenses=(*self._ledger.fixed_expenses, expense),
            ),
        )

    def remove_fixed_expense(self, index) -> UserLedger:
        """Remove the fixed expense at ``index``; bad indexes do nothing."""
        position = coerce_int(index, "index")
        expenses = self._ledger.fixed_expenses
        if position < 0 or position >= len(expenses):
            self._logger.debug(f"No fixed expense at index {position}")
            return self._ledger
        return self._apply(
            "remove_fixed_expense",
            replace(
                self._ledger,
                fixed_expenses=expenses[:position] + expenses[position + 1:],
            ),
        )

    def add_goal(self, name, target_amount, deadline) -> UserLedger:
        """Create a savings goal.

        The daily contribution is fixed now as
        ``ceil(target / max(days until deadline, 1))``.
        """
        goal_name = require_text(name, "name")
        target = require_positive_int(target_amount, "target_amount")
        due = parse_deadline(deadline)
        days_remaining = days_until(due, self._clock().date())
        goal = Goal(
            id=self._id_factory(),
            name=goal_name,
            target_amount=target,
            deadline=due,
            daily_contribution=goal_daily_contribution(target, days_remaining),
            days_remaining=days_remaining,
        )
        return self._apply(
            "add_goal",
            replace(self._ledger, goals=(*self._ledger.goals, goal)),
        )

    def remove_goal(self, goal_id) -> UserLedger:
        """Remove the goal with ``goal_id``; unknown ids are a no-op."""
        remaining = tuple(
            goal for goal in self._ledger.goals if str(goal.id) != str(goal_id)
        )
        if len(remaining) == len(self._ledger.goals):
            self._logger.debug(f"No goal with id {goal_id}")
            return self._ledger
        return self._apply(
            "remove_goal",
            replace(self._ledger, goals=remaining),
        )

    def add_loan(
        self,
        loan_type,
        counterparty,
        amount,
        duration_days,
    ) -> UserLedger:
        """Record money borrowed or lent, repaid over ``duration_days``."""
        kind = require_choice(loan_type, LOAN_TYPES, "type")
        person = require_text(counterparty, "counterparty")
        principal = require_positive_int(amount, "amount")
        duration = require_positive_int(duration_days, "duration_days")
        loan = Loan(
            id=self._id_factory(),
            type=kind,
            counterparty=person,
            amount=principal,
            duration_days=duration,
            daily_amount=loan_daily_amount(principal, duration),
        )
        return self._apply(
            "add_loan",
            replace(self._ledger, loans=(*self._ledger.loans, loan)),
        )

    def set_monthly_limit(self, value) -> UserLedger:
        """Set the total budget for the calendar month."""
        limit = require_non_negative_int(value, "monthly_limit")
        return self._apply(
            "set_monthly_limit",
            replace(self._ledger, monthly_limit=limit),
        )

    def update_profile(self, partial: Mapping[str, Any]) -> UserLedger:
        """Update profile fields; blank values keep the current value."""
        unknown = sorted(set(partial) - set(_PROFILE_FIELDS))
        if unknown:
            raise ValidationError(
                "profile",
                f"unknown fields: {', '.join(unknown)}",
            )
        changes = {
            key: str(value).strip()
            for key, value in partial.items()
            if value is not None and str(value).strip()
        }
        if not changes:
            self._logger.debug("Profile update carried no values")
            return self._ledger
        return self._apply(
            "update_profile",
            replace(
                self._ledger,
                profile=replace(self._ledger.profile, **changes),
            ),
        )

    def post_message(self, group, message: Mapping[str, Any]) -> UserLedger:
        """Append a text, split or system message to a group chat.

        Unknown groups get a new message list.
        """
        group_name = require_text(group, "group")
        message_type = require_choice(
            message.get("type") or MESSAGE_TEXT,
            MESSAGE_TYPES,
            "type",
        )
        author = str(message.get("author") or DEFAULT_AUTHOR).strip()
        timestamp = self._timestamp(message.get("timestamp"))
        if message_type == MESSAGE_SPLIT:
            entry = ChatMessage(
                type=MESSAGE_SPLIT,
                author=author,
                timestamp=timestamp,
                item=require_text(message.get("item"), "item"),
                amount=require_positive_int(message.get("amount"), "amount"),
            )
        else:
            entry = ChatMessage(
                type=message_type,
                author=author,
                timestamp=timestamp,
                text=require_text(message.get("text"), "text"),
            )
        return self._apply(
            "post_message",
            self._with_message(self._ledger, group_name, entry),
        )

    def create_group(
        self,
        name,
        members: Iterable[Mapping[str, Any]] = (),
    ) -> UserLedger:
        """Create or replace a group's member list.

        A group without chat history is seeded with a system message.
        """
        group_name = require_text(name, "name")
        roster = tuple(
            GroupMember(
                name=require_text(member.get("name"), "member.name"),
                phone=require_text(member.get("phone"), "member.phone"),
                email=str(member.get("email") or "").strip(),
            )
            for member in members
        )
        ledger = replace(
            self._ledger,
            group_members={**self._ledger.group_members, group_name: roster},
        )
        if not ledger.chat_groups.get(group_name):
            ledger = self._with_message(
                ledger,
                group_name,
                ChatMessage(
                    type=MESSAGE_SYSTEM,
                    author="System",
                    timestamp=self._clock(),
                    text=(
                        f'Group "{group_name}" created with '
                        f"{len(roster)} members."
                    ),
                ),
            )
        return self._apply("create_group", ledger)

    def _timestamp(self, value) -> datetime:
        if value is None or (isinstance(value, str) and not value.strip()):
            return self._clock()
        parsed = parse_timestamp(value)
        if parsed is None:
            raise ValidationError(
                "timestamp",
                f"unrecognized timestamp {value!r}",
            )
        return parsed

    @staticmethod
    def _with_message(
        ledger: UserLedger,
        group: str,
        message: ChatMessage,
    ) -> UserLedger:
        history = ledger.chat_groups.get(group, ())
        return replace(
            ledger,
            chat_groups={**ledger.chat_groups, group: (*history, message)},
        )

    def _apply(self, operation: str, ledger: UserLedger) -> UserLedger:
        self._ledger = ledger
        self._version += 1
        self._usage_logger.info(
            f"{operation} user={self._user_id} version={self._version}"
        )
        if self._synchronizer is not None:
            self._synchronizer.request_commit(
                ledger,
                self._version,
                owner=self._user_id,
                session=self._session_id,
            )
        return ledger


__all__ = ["LedgerStore"]
