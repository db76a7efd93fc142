"""Mapping between ``UserLedger`` snapshots and stored user documents.

The stored document is a flat JSON object::

    {name, phone, email, avatar, monthlyLimit, transactions[],
     fixedExpenses[], goals[], loans[], chatGroups{}, groupMembers{},
     createdAt}

Timestamps travel as epoch milliseconds and goal deadlines as ISO dates.
Reading is lenient: missing optional fields fall back to defaults and
malformed collection entries are skipped with a warning.
"""

from datetime import date, datetime
from logging import Logger
from typing import Any

from src.domain.constants import (
    DEFAULT_AUTHOR,
    DEFAULT_AVATAR_URL,
    DEFAULT_CATEGORY,
    DEFAULT_PROFILE_NAME,
    LOAN_TYPES,
    MESSAGE_TEXT,
    MESSAGE_TYPES,
)
from src.domain.errors import ValidationError
from src.domain.models import (
    ChatMessage,
    FixedExpense,
    Goal,
    GroupMember,
    Loan,
    Profile,
    Transaction,
    UserLedger,
)
from src.domain.services.budget import (
    days_until,
    goal_daily_contribution,
)
from src.domain.services.normalization import (
    normalize_sentiment,
    parse_timestamp,
    to_epoch_ms,
)
from src.domain.services.validation import (
    coerce_int,
    parse_deadline,
    require_non_negative_int,
)


def default_document(created_at: datetime) -> dict[str, Any]:
    """Return the document written for a first-time user.

    Args:
        created_at: Creation instant of the account document.

    Returns:
        dict[str, Any]: Document with empty collections and a zero limit.
    """
    return {
        "name": DEFAULT_PROFILE_NAME,
        "phone": "",
        "email": "",
        "avatar": DEFAULT_AVATAR_URL,
        "transactions": [],
        "fixedExpenses": [],
        "goals": [],
        "loans": [],
        "chatGroups": {},
        "groupMembers": {},
        "monthlyLimit": 0,
        "createdAt": to_epoch_ms(created_at),
    }


def ledger_to_document(ledger: UserLedger) -> dict[str, Any]:
    """Serialize a ledger snapshot into the stored document shape."""
    document: dict[str, Any] = {
        "name": ledger.profile.name,
        "phone": ledger.profile.phone,
        "email": ledger.profile.email,
        "avatar": ledger.profile.avatar_url,
        "monthlyLimit": ledger.monthly_limit,
        "transactions": [
            {
                "timestamp": to_epoch_ms(tx.timestamp),
                "merchant": tx.merchant,
                "category": tx.category,
                "amount": tx.amount,
                "sentiment": tx.sentiment,
            }
            for tx in ledger.transactions
        ],
        "fixedExpenses": [
            {"name": expense.name, "amount": expense.amount}
            for expense in ledger.fixed_expenses
        ],
        "goals": [
            {
                "id": goal.id,
                "name": goal.name,
                "amount": goal.target_amount,
                "deadline": goal.deadline.isoformat(),
                "daily": goal.daily_contribution,
                "daysLeft": goal.days_remaining,
            }
            for goal in ledger.goals
        ],
        "loans": [
            {
                "id": loan.id,
                "type": loan.type,
                "person": loan.counterparty,
                "amount": loan.amount,
                "duration": loan.duration_days,
                "daily": loan.daily_amount,
            }
            for loan in ledger.loans
        ],
        "chatGroups": {
            group: [_message_to_document(msg) for msg in messages]
            for group, messages in ledger.chat_groups.items()
        },
        "groupMembers": {
            group: [
                {
                    "name": member.name,
                    "phone": member.phone,
                    "email": member.email,
                }
                for member in members
            ]
            for group, members in ledger.group_members.items()
        },
    }
    if ledger.created_at is not None:
        document["createdAt"] = to_epoch_ms(ledger.created_at)
    return document


def document_to_ledger(
    document: dict[str, Any],
    *,
    now: datetime,
    logger: Logger,
) -> UserLedger:
    """Hydrate a ledger from a stored document.

    Legacy field names accepted by older dashboards are honoured
    (``displayName``, ``photoURL``, ``activeGoals``, ``activeLoans``).

    Args:
        document: Raw stored document.
        now: Fallback instant for entries missing a timestamp.
        logger: Logger used for warnings about skipped entries.

    Returns:
        UserLedger: Hydrated aggregate; never fails on missing fields.
    """
    profile = Profile(
        name=_text(document.get("name") or document.get("displayName"))
        or DEFAULT_PROFILE_NAME,
        phone=_text(document.get("phone")),
        email=_text(document.get("email")),
        avatar_url=_text(document.get("avatar") or document.get("photoURL"))
        or DEFAULT_AVATAR_URL,
    )
    monthly_limit = _int_or_default(
        document.get("monthlyLimit"),
        0,
        "monthlyLimit",
        logger,
    )
    if monthly_limit < 0:
        logger.warning(
            f"Negative monthlyLimit {monthly_limit} in document; using 0"
        )
        monthly_limit = 0

    raw_goals = document.get("goals") or document.get("activeGoals") or []
    raw_loans = document.get("loans") or document.get("activeLoans") or []

    return UserLedger(
        profile=profile,
        monthly_limit=monthly_limit,
        fixed_expenses=_map_entries(
            document.get("fixedExpenses"),
            _fixed_expense_from_document,
            "fixed expense",
            logger,
        ),
        transactions=_map_entries(
            document.get("transactions"),
            lambda raw: _transaction_from_document(raw, now),
            "transaction",
            logger,
        ),
        goals=_map_entries(
            raw_goals,
            lambda raw: _goal_from_document(raw, now.date()),
            "goal",
            logger,
        ),
        loans=_map_entries(
            raw_loans,
            _loan_from_document,
            "loan",
            logger,
        ),
        chat_groups={
            str(group): _map_entries(
                messages,
                _message_from_document,
                "chat message",
                logger,
            )
            for group, messages in _mapping(document.get("chatGroups")).items()
        },
        group_members={
            str(group): _map_entries(
                members,
                _member_from_document,
                "group member",
                logger,
            )
            for group, members in _mapping(
                document.get("groupMembers")
            ).items()
        },
        created_at=parse_timestamp(document.get("createdAt")),
    )


def _message_to_document(message: ChatMessage) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": message.type, "author": message.author}
    if message.timestamp is not None:
        payload["timestamp"] = to_epoch_ms(message.timestamp)
    if message.text is not None:
        payload["text"] = message.text
    if message.item is not None:
        payload["item"] = message.item
    if message.amount is not None:
        payload["amount"] = message.amount
    return payload


def _map_entries(raw_entries, mapper, label: str, logger: Logger) -> tuple:
    if not isinstance(raw_entries, list):
        if raw_entries:
            logger.warning(f"Ignoring non-list {label} collection")
        return ()
    mapped = []
    for index, raw in enumerate(raw_entries):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping {label} #{index}: not an object")
            continue
        try:
            mapped.append(mapper(raw))
        except ValidationError as exc:
            logger.warning(f"Skipping {label} #{index}: {exc}")
    return tuple(mapped)


def _transaction_from_document(
    raw: dict[str, Any],
    now: datetime,
) -> Transaction:
    return Transaction(
        timestamp=parse_timestamp(raw.get("timestamp")) or now,
        merchant=_text(raw.get("merchant")),
        category=_text(raw.get("category")) or DEFAULT_CATEGORY,
        amount=require_non_negative_int(raw.get("amount", 0), "amount"),
        sentiment=normalize_sentiment(raw.get("sentiment")),
    )


def _fixed_expense_from_document(raw: dict[str, Any]) -> FixedExpense:
    return FixedExpense(
        name=_text(raw.get("name")),
        amount=require_non_negative_int(raw.get("amount", 0), "amount"),
    )


def _goal_from_document(raw: dict[str, Any], today: date) -> Goal:
    target = require_non_negative_int(
        raw.get("amount", raw.get("targetAmount", 0)),
        "amount",
    )
    deadline = parse_deadline(raw.get("deadline"))
    days_left = raw.get("daysLeft", raw.get("daysRemaining"))
    days_remaining = (
        coerce_int(days_left, "daysLeft")
        if days_left is not None
        else days_until(deadline, today)
    )
    daily = raw.get("daily", raw.get("dailyContribution"))
    return Goal(
        id=raw.get("id"),
        name=_text(raw.get("name")),
        target_amount=target,
        deadline=deadline,
        daily_contribution=(
            require_non_negative_int(daily, "daily")
            if daily is not None
            else goal_daily_contribution(target, days_remaining)
        ),
        days_remaining=days_remaining,
    )


def _loan_from_document(raw: dict[str, Any]) -> Loan:
    loan_type = _text(raw.get("type")).lower()
    if loan_type not in LOAN_TYPES:
        raise ValidationError("type", f"unknown loan type '{loan_type}'")
    amount = require_non_negative_int(raw.get("amount", 0), "amount")
    duration = coerce_int(
        raw.get("duration", raw.get("durationDays")),
        "duration",
    )
    if duration <= 0:
        raise ValidationError("duration", "must be greater than zero")
    daily = raw.get("daily", raw.get("dailyAmount"))
    return Loan(
        id=raw.get("id"),
        type=loan_type,
        counterparty=_text(raw.get("person") or raw.get("counterparty")),
        amount=amount,
        duration_days=duration,
        daily_amount=(
            require_non_negative_int(daily, "daily")
            if daily is not None
            else amount // duration
        ),
    )


def _message_from_document(raw: dict[str, Any]) -> ChatMessage:
    message_type = _text(raw.get("type")).lower() or MESSAGE_TEXT
    if message_type not in MESSAGE_TYPES:
        message_type = MESSAGE_TEXT
    amount = raw.get("amount")
    return ChatMessage(
        type=message_type,
        author=_text(raw.get("author")) or DEFAULT_AUTHOR,
        timestamp=parse_timestamp(raw.get("timestamp")),
        text=raw.get("text"),
        item=raw.get("item"),
        amount=coerce_int(amount, "amount") if amount is not None else None,
    )


def _member_from_document(raw: dict[str, Any]) -> GroupMember:
    return GroupMember(
        name=_text(raw.get("name")),
        phone=_text(raw.get("phone")),
        email=_text(raw.get("email")),
    )


def _int_or_default(value, default: int, field: str, logger: Logger) -> int:
    if value is None:
        return default
    try:
        return coerce_int(value, field)
    except ValidationError as exc:
        logger.warning(f"Invalid {field} in document ({exc}); using {default}")
        return default


def _mapping(value) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


__all__ = ["default_document", "ledger_to_document", "document_to_ledger"]
