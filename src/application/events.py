"""In-process event bus for session notifications.

The bus is the non-blocking notification channel of the engine: the
hydration signal and persistence outcomes are published here instead of
being raised into the caller's event loop.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

LEDGER_READY = "ledger-ready"
PERSISTENCE_COMMITTED = "persistence-committed"
PERSISTENCE_DEFERRED = "persistence-deferred"
PERSISTENCE_FAILED = "persistence-failed"


@dataclass(frozen=True)
class SessionEvent:
    """Notification published on the session bus."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    ts: datetime = field(default_factory=datetime.now)


EventHandler = Callable[[SessionEvent], None]


class SessionEvents:
    """Publish/subscribe registry keyed by event name."""

    def __init__(self, logger=None) -> None:
        self._subscribers: dict[str, list[EventHandler]] = {}
        self._logger = logger

    def subscribe(self, name: str, handler: EventHandler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: EventHandler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, name: str, **payload: Any) -> SessionEvent:
        """Deliver an event to every handler registered for ``name``.

        A failing handler is logged and does not stop delivery to the
        remaining handlers.
        """
        event = SessionEvent(name=name, payload=payload)
        for handler in list(self._subscribers.get(name, [])):
            try:
                handler(event)
            except Exception as exc:
                if self._logger is None:
                    raise
                self._logger.error(
                    f"Event handler {getattr(handler, '__name__', handler)} "
                    f"failed for {name}: {exc}"
                )
        return event


__all__ = [
    "LEDGER_READY",
    "PERSISTENCE_COMMITTED",
    "PERSISTENCE_DEFERRED",
    "PERSISTENCE_FAILED",
    "SessionEvent",
    "SessionEvents",
]
