"""Domain models for the keyword vault."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class ItemType(StrEnum):
    """Kind of record stored in the vault."""

    TEXT = "text"
    IMAGE = "image"
    DOCUMENT = "document"


@dataclass(frozen=True)
class Item:
    """A single vault record."""

    id: str
    title: str | None
    content: str | None
    type: ItemType = ItemType.TEXT
    keywords: tuple[str, ...] = ()
    files: tuple[str, ...] = ()
    created_at: int = 0
    updated_at: int = 0


@dataclass(frozen=True)
class CreateItemInput:
    """Fields accepted when creating an item."""

    type: ItemType = ItemType.TEXT
    title: str | None = None
    content: str | None = None
    keywords: tuple[str, ...] = ()
    files: tuple[str, ...] = ()


@dataclass(frozen=True)
class UpdateItemInput:
    """Partial update. None means "leave unchanged"."""

    title: str | None = None
    content: str | None = None
    keywords: tuple[str, ...] | None = None
    files: tuple[str, ...] | None = None

    def is_empty(self) -> bool:
        return all(
            value is None for value in (self.title, self.content, self.keywords, self.files)
        )


@dataclass(frozen=True)
class ImportStats:
    """Summary of an import operation."""

    items_imported: int
    items_skipped: int
    skipped_reasons: tuple[str, ...] = field(default=())


def _to_millis(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        msg = f"Invalid timestamp: {value!r}"
        raise ValueError(msg)
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return int(dt.timestamp() * 1000)
    msg = f"Invalid timestamp: {value!r}"
    raise ValueError(msg)


def item_from_json(data: dict[str, Any]) -> Item:
    """Build an Item from its JSON wire form.

    Timestamps may be milliseconds since epoch or ISO-8601 strings.
    """
    keywords = data.get("keywords") or []
    if isinstance(keywords, str):
        msg = f"keywords must be a list, got a string: {keywords!r}"
        raise ValueError(msg)
    return Item(
        id=str(data["id"]),
        title=data.get("title"),
        content=data.get("content"),
        type=ItemType(data.get("type", ItemType.TEXT)),
        keywords=tuple(str(k) for k in keywords),
        files=tuple(str(f) for f in data.get("files") or []),
        created_at=_to_millis(data.get("createdAt")),
        updated_at=_to_millis(data.get("updatedAt")),
    )


def item_to_json(item: Item) -> dict[str, Any]:
    """Serialize an Item to its JSON wire form."""
    return {
        "id": item.id,
        "title": item.title,
        "content": item.content,
        "type": str(item.type),
        "keywords": list(item.keywords),
        "files": list(item.files),
        "createdAt": item.created_at,
        "updatedAt": item.updated_at,
    }


def create_input_from_json(data: dict[str, Any]) -> CreateItemInput:
    """Build a CreateItemInput from a seed or request record."""
    keywords = data.get("keywords") or []
    if isinstance(keywords, str):
        msg = f"keywords must be a list, got a string: {keywords!r}"
        raise ValueError(msg)
    return CreateItemInput(
        type=ItemType(data.get("type", ItemType.TEXT)),
        title=data.get("title"),
        content=data.get("content"),
        keywords=tuple(str(k) for k in keywords),
        files=tuple(str(f) for f in data.get("files") or []),
    )
