"""Port for the external identity provider."""

from typing import Callable, Protocol


IdentityListener = Callable[[str | None], None]


class IdentityProviderPort(Protocol):
    """Port exposing the signed-in user identifier."""

    def current_user_id(self) -> str | None:
        """Return the resolved user id, or None while sign-in is pending."""

    def subscribe(self, listener: IdentityListener) -> None:
        """Register ``listener`` to be called whenever the identity changes."""


__all__ = ["IdentityListener", "IdentityProviderPort"]
