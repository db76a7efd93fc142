"""Input validation helpers for ledger mutations."""

from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from src.domain.errors import ValidationError


def require_text(value, field_name: str) -> str:
    """Return a stripped non-empty string or raise.

    Args:
        value: Raw input value.
        field_name: Field name reported on failure.

    Returns:
        str: The stripped text.

    Raises:
        ValidationError: If the value is missing or blank.
    """
    if value is None:
        raise ValidationError(field_name, "is required")
    text = str(value).strip()
    if not text:
        raise ValidationError(field_name, "is required")
    return text


def coerce_int(value, field_name: str) -> int:
    """Coerce form-style numeric input to an integer.

    Integers pass through; numeric strings, floats and Decimals are
    truncated toward zero. Booleans are rejected.

    Args:
        value: Raw input value.
        field_name: Field name reported on failure.

    Returns:
        int: The coerced integer.

    Raises:
        ValidationError: If the value is missing or not numeric.
    """
    if value is None:
        raise ValidationError(field_name, "is required")
    if isinstance(value, bool):
        raise ValidationError(field_name, "must be numeric")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError(field_name, "is required")
    try:
        number = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(field_name, "must be numeric") from exc
    if not number.is_finite():
        raise ValidationError(field_name, "must be numeric")
    return int(number)


def require_positive_int(value, field_name: str) -> int:
    """Return a strictly positive integer or raise."""
    number = coerce_int(value, field_name)
    if number <= 0:
        raise ValidationError(field_name, "must be greater than zero")
    return number


def require_non_negative_int(value, field_name: str) -> int:
    """Return an integer greater than or equal to zero or raise."""
    number = coerce_int(value, field_name)
    if number < 0:
        raise ValidationError(field_name, "must not be negative")
    return number


def require_choice(value, choices: Iterable[str], field_name: str) -> str:
    """Return the lower-cased value when it is one of ``choices``."""
    text = require_text(value, field_name).lower()
    allowed = tuple(choices)
    if text not in allowed:
        raise ValidationError(
            field_name,
            f"must be one of {', '.join(allowed)}",
        )
    return text


def parse_deadline(value, field_name: str = "deadline") -> date:
    """Parse a goal deadline from a date, datetime or ISO string.

    Raises:
        ValidationError: If the value is missing or not a valid date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = require_text(value, field_name)
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValidationError(
            field_name,
            "must be a date in YYYY-MM-DD format",
        ) from exc


__all__ = [
    "require_text",
    "coerce_int",
    "require_positive_int",
    "require_non_negative_int",
    "require_choice",
    "parse_deadline",
]
