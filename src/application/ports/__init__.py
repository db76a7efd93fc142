"""Application ports package."""

from .database import DatabaseEnginePort
from .document_store import DocumentStorePort
from .identity import IdentityListener, IdentityProviderPort

__all__ = [
    "DatabaseEnginePort",
    "DocumentStorePort",
    "IdentityListener",
    "IdentityProviderPort",
]
