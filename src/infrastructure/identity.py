"""Identity provider adapters."""

from src.application.ports.identity import (
    IdentityListener,
    IdentityProviderPort,
)
from src.infrastructure.logging.logger import get_app_logger


class StaticIdentityProvider(IdentityProviderPort):
    """Identity provider holding a user id set by the hosting process.

    The id may be unknown at start-up and set later, mirroring an
    asynchronous sign-in.
    """

    def __init__(self, user_id: str | None = None, logger=None) -> None:
        """Initialize the provider.

        Args:
            user_id: Initially signed-in user id, if already known.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._user_id = user_id or None
        self._listeners: list[IdentityListener] = []
        self._logger = logger or get_app_logger()

    def current_user_id(self) -> str | None:
        return self._user_id

    def subscribe(self, listener: IdentityListener) -> None:
        """Register ``listener``; it is called at once if a user is known."""
        self._listeners.append(listener)
        if self._user_id:
            listener(self._user_id)

    def set_user_id(self, user_id: str | None) -> None:
        """Change the signed-in user and notify listeners on change."""
        resolved = user_id or None
        if resolved == self._user_id:
            return
        self._user_id = resolved
        self._logger.info(f"Identity changed to {resolved}")
        for listener in list(self._listeners):
            listener(resolved)


__all__ = ["StaticIdentityProvider"]
