"""Normalization helpers for values read from stored documents."""

from datetime import date, datetime

from src.domain.constants import (
    LEGACY_SENTIMENT_ALIASES,
    SENTIMENT_NEUTRAL,
    SENTIMENTS,
)


def normalize_sentiment(sentiment: str | None) -> str:
    """Map raw sentiment tags onto worthy, regret or neutral.

    Args:
        sentiment: Raw tag from a form or stored document.

    Returns:
        str: A canonical sentiment; unknown tags fall back to neutral.
    """
    if not sentiment:
        return SENTIMENT_NEUTRAL
    cleaned = str(sentiment).strip().lower()
    cleaned = LEGACY_SENTIMENT_ALIASES.get(cleaned, cleaned)
    return cleaned if cleaned in SENTIMENTS else SENTIMENT_NEUTRAL


def to_epoch_ms(moment: datetime) -> int:
    """Convert a local datetime to epoch milliseconds."""
    return int(round(moment.timestamp() * 1000))


def parse_timestamp(value) -> datetime | None:
    """Parse epoch milliseconds, ISO strings or datetimes.

    Args:
        value: Raw timestamp value.

    Returns:
        datetime | None: Local naive datetime, or None when unparseable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_local_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if not text:
        return None
    if text.lstrip("-").isdigit():
        return parse_timestamp(int(text))
    try:
        return _as_local_naive(datetime.fromisoformat(text))
    except ValueError:
        return None


def _as_local_naive(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


__all__ = ["normalize_sentiment", "to_epoch_ms", "parse_timestamp"]
