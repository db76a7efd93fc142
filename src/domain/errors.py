"""Domain error types."""


class SpendlyError(Exception):
    """Base class for ledger engine errors."""


class ValidationError(SpendlyError):
    """Raised when a ledger mutation receives missing or invalid input.

    Attributes:
        field: Name of the offending input field.
        message: Human-readable reason.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PersistenceDeferred(SpendlyError):
    """Raised when the user identity did not resolve within the retries."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"User identity unavailable after {attempts} attempts"
        )
        self.attempts = attempts


class PersistenceError(SpendlyError):
    """Raised when the remote document store rejects a read or write."""


__all__ = [
    "SpendlyError",
    "ValidationError",
    "PersistenceDeferred",
    "PersistenceError",
]
