"""SQLite-backed item store."""

import json
import sqlite3
import time
import uuid

from loguru import logger

from keyword_vault.core.search.item_filter import search_items
from keyword_vault.models.item import CreateItemInput, Item, ItemType, UpdateItemInput


class ItemNotFoundError(LookupError):
    """No item with the given id."""


_COLUMNS = "id, title, content, type, keywords, files, created_at, updated_at"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _row_to_item(row: tuple) -> Item:
    return Item(
        id=row[0],
        title=row[1],
        content=row[2],
        type=ItemType(row[3]),
        keywords=tuple(json.loads(row[4] or "[]")),
        files=tuple(json.loads(row[5] or "[]")),
        created_at=row[6],
        updated_at=row[7],
    )


class SqliteItemStore:
    """Item store on a SQLite connection (schema must already exist).

    Keywords and files are stored as JSON arrays, like the web vault does.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def get(self, item_id: str) -> Item | None:
        row = self.conn.execute(
            f"SELECT {_COLUMNS} FROM items WHERE id = ?", (item_id,)
        ).fetchone()
        return _row_to_item(row) if row else None

    def search(self, query: str) -> list[Item]:
        """Items whose title, content or keywords contain query (case-insensitive)."""
        return search_items(self.list(), query)

    def list(self) -> list[Item]:
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM items ORDER BY updated_at DESC, rowid DESC"
        ).fetchall()
        return [_row_to_item(r) for r in rows]

    def create(self, data: CreateItemInput) -> Item:
        now = _now_ms()
        item = Item(
            id=uuid.uuid4().hex,
            title=data.title,
            content=data.content,
            type=data.type,
            keywords=tuple(data.keywords),
            files=tuple(data.files),
            created_at=now,
            updated_at=now,
        )
        self.conn.execute(
            f"INSERT INTO items ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                item.id, item.title, item.content, str(item.type),
                json.dumps(list(item.keywords)), json.dumps(list(item.files)),
                item.created_at, item.updated_at,
            ),
        )
        self.conn.commit()
        logger.debug("Created item {} ({} keywords)", item.id, len(item.keywords))
        return item

    def update(self, item_id: str, data: UpdateItemInput) -> Item:
        assignments: dict[str, str | None] = {}
        if data.title is not None:
            assignments["title"] = data.title
        if data.content is not None:
            assignments["content"] = data.content
        if data.keywords is not None:
            assignments["keywords"] = json.dumps(list(data.keywords))
        if data.files is not None:
            assignments["files"] = json.dumps(list(data.files))

        set_sql = ", ".join(f"{column} = ?" for column in [*assignments, "updated_at"])
        cursor = self.conn.execute(
            f"UPDATE items SET {set_sql} WHERE id = ?",
            [*assignments.values(), _now_ms(), item_id],
        )
        if cursor.rowcount == 0:
            self.conn.rollback()
            msg = f"Item {item_id!r} not found"
            raise ItemNotFoundError(msg)
        self.conn.commit()

        item = self.get(item_id)
        if item is None:
            msg = f"Item {item_id!r} not found"
            raise ItemNotFoundError(msg)
        return item

    def delete(self, item_id: str) -> None:
        cursor = self.conn.execute("DELETE FROM items WHERE id = ?", (item_id,))
        if cursor.rowcount == 0:
            msg = f"Item {item_id!r} not found"
            raise ItemNotFoundError(msg)
        self.conn.commit()
        logger.debug("Deleted item {}", item_id)
