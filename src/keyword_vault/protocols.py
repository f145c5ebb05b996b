"""Protocols for the vault's external collaborators."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from keyword_vault.models.item import CreateItemInput, Item, UpdateItemInput


@runtime_checkable
class ItemStoreProtocol(Protocol):
    """Persistence for vault items."""

    def list(self) -> list[Item]:
        """Return all items, most recently updated first."""
        ...

    def get(self, item_id: str) -> Item | None:
        """Return an item, or None if it does not exist."""
        ...

    def create(self, data: CreateItemInput) -> Item:
        """Store a new item and return it with id and timestamps."""
        ...

    def update(self, item_id: str, data: UpdateItemInput) -> Item:
        """Apply a partial update; raise ItemNotFoundError for unknown ids."""
        ...

    def delete(self, item_id: str) -> None:
        """Remove an item; raise ItemNotFoundError for unknown ids."""
        ...


@runtime_checkable
class DocumentServiceProtocol(Protocol):
    """Upload and merge of item attachments."""

    def upload(self, path: Path) -> str:
        """Upload a local file and return its storage path."""
        ...

    def merge_to_pdf(self, item_id: str) -> str:
        """Merge an item's files into one PDF and return its storage path."""
        ...


@runtime_checkable
class AuthenticatorProtocol(Protocol):
    def verify(self, password: str) -> bool: ...


@runtime_checkable
class CredentialCacheProtocol(Protocol):
    """Remembered password/session. No confidentiality guarantee."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def clear(self, key: str | None = None) -> None: ...
