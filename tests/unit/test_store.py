"""Tests for the SQLite item store, schema and JSON import."""

import json
import sqlite3
from pathlib import Path

import pytest

from keyword_vault.core.database.schema import (
    SCHEMA_VERSION,
    get_schema_version,
    migrate_schema,
    set_metadata,
)
from keyword_vault.core.store.importer import import_items_file
from keyword_vault.core.store.sqlite_store import ItemNotFoundError, SqliteItemStore
from keyword_vault.models.item import CreateItemInput, ItemType, UpdateItemInput
from keyword_vault.protocols import ItemStoreProtocol


def test_migrate_schema_on_empty_db_creates_schema_and_sets_version() -> None:
    conn = sqlite3.connect(":memory:")
    assert get_schema_version(conn) is None
    migrate_schema(conn)
    assert get_schema_version(conn) == SCHEMA_VERSION
    tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"items", "metadata"} <= tables


def test_migrate_schema_refuses_newer_version(vault_db: sqlite3.Connection) -> None:
    set_metadata(vault_db, "schema_version", str(SCHEMA_VERSION + 1))
    with pytest.raises(RuntimeError, match="newer than supported"):
        migrate_schema(vault_db)


def test_store_satisfies_protocol(sqlite_store: SqliteItemStore) -> None:
    assert isinstance(sqlite_store, ItemStoreProtocol)


def test_create_and_get_roundtrip_keywords(sqlite_store: SqliteItemStore) -> None:
    created = sqlite_store.create(
        CreateItemInput(
            type=ItemType.IMAGE,
            title="Scan",
            keywords=("admin/id", "admin/id"),
            files=("/uploads/a.png",),
        )
    )
    fetched = sqlite_store.get(created.id)
    assert fetched == created
    assert fetched is not None
    assert fetched.keywords == ("admin/id", "admin/id")
    assert fetched.type is ItemType.IMAGE
    assert fetched.created_at == fetched.updated_at > 0


def test_get_unknown_returns_none(sqlite_store: SqliteItemStore) -> None:
    assert sqlite_store.get("missing") is None


def test_list_orders_most_recently_updated_first(sqlite_store: SqliteItemStore) -> None:
    first = sqlite_store.create(CreateItemInput(title="first"))
    second = sqlite_store.create(CreateItemInput(title="second"))
    sqlite_store.conn.execute("UPDATE items SET updated_at = 1 WHERE id = ?", (second.id,))
    assert [i.id for i in sqlite_store.list()] == [first.id, second.id]

    sqlite_store.update(second.id, UpdateItemInput(title="second, edited"))
    assert [i.id for i in sqlite_store.list()] == [second.id, first.id]


def test_update_changes_only_given_fields(sqlite_store: SqliteItemStore) -> None:
    item = sqlite_store.create(
        CreateItemInput(title="RIB", content="IBAN", keywords=("admin/bank",))
    )
    updated = sqlite_store.update(item.id, UpdateItemInput(keywords=("admin/banque",)))
    assert updated.title == "RIB"
    assert updated.content == "IBAN"
    assert updated.keywords == ("admin/banque",)


def test_update_and_delete_unknown_raise(sqlite_store: SqliteItemStore) -> None:
    with pytest.raises(ItemNotFoundError):
        sqlite_store.update("missing", UpdateItemInput(title="x"))
    with pytest.raises(ItemNotFoundError):
        sqlite_store.delete("missing")


def test_delete_removes_item(sqlite_store: SqliteItemStore) -> None:
    item = sqlite_store.create(CreateItemInput(title="gone"))
    sqlite_store.delete(item.id)
    assert sqlite_store.get(item.id) is None


def test_search_matches_title_content_and_keywords(sqlite_store: SqliteItemStore) -> None:
    sqlite_store.create(CreateItemInput(title="Passeport", keywords=("admin/papier",)))
    sqlite_store.create(CreateItemInput(title="Wifi", content="mot de passe"))
    sqlite_store.create(CreateItemInput(title="RIB"))
    assert sorted(i.title or "" for i in sqlite_store.search("PASS")) == ["Passeport", "Wifi"]
    assert [i.title for i in sqlite_store.search("papier")] == ["Passeport"]


def test_import_items_file(sqlite_store: SqliteItemStore, seed_file: Path) -> None:
    stats = import_items_file(sqlite_store, seed_file)
    assert stats.items_imported == 3
    assert stats.items_skipped == 0
    titles = {i.title for i in sqlite_store.list()}
    assert titles == {"Passeport", "Contrat de travail", "Seed phrase"}


def test_import_skips_invalid_records(sqlite_store: SqliteItemStore, tmp_path: Path) -> None:
    path = tmp_path / "items.json"
    path.write_text(
        json.dumps(
            [
                {"title": "ok", "keywords": ["a"]},
                {"title": "bad type", "type": "video"},
                {"title": "bad keywords", "keywords": "a/b"},
                "not an object",
            ]
        )
    )
    stats = import_items_file(sqlite_store, path)
    assert stats.items_imported == 1
    assert stats.items_skipped == 3


def test_import_rejects_non_array(sqlite_store: SqliteItemStore, tmp_path: Path) -> None:
    path = tmp_path / "items.json"
    path.write_text(json.dumps({"title": "x"}))
    with pytest.raises(ValueError, match="JSON array"):
        import_items_file(sqlite_store, path)


def test_import_missing_file(sqlite_store: SqliteItemStore, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        import_items_file(sqlite_store, tmp_path / "nope.json")
