"""Shared test fixtures."""

import json
import sqlite3
from pathlib import Path

import pytest

from keyword_vault.core.database.schema import create_schema
from keyword_vault.core.store.sqlite_store import SqliteItemStore
from keyword_vault.models.item import Item, ItemType
from tests.unit.fakes import FakeItemStore

VAULT_ITEMS = [
    Item(
        id="passport",
        title="Passeport",
        content="Numéro: XX123456\nExpire le: 15/03/2028",
        keywords=("administratif/papier/passport", "identité"),
    ),
    Item(
        id="cni",
        title="Carte d'identité",
        content="Numéro: 123456789",
        keywords=("administratif/papier/cni", "identité"),
    ),
    Item(
        id="rib",
        title="RIB",
        content="IBAN: FR76 1234 5678",
        keywords=("administratif/banque",),
    ),
    Item(
        id="payslip",
        title="Fiche de paie",
        content="Salaire net: 4200€",
        type=ItemType.DOCUMENT,
        keywords=("work/salaire", "work/paie"),
    ),
    Item(
        id="scan",
        title=None,
        content="/uploads/scan.png",
        type=ItemType.IMAGE,
        keywords=(),
    ),
]

SEED_RECORDS = [
    {
        "title": "Passeport",
        "content": "Numéro: XX123456",
        "type": "text",
        "keywords": ["administratif/papier/passport"],
    },
    {
        "title": "Contrat de travail",
        "content": "Poste: Développeur",
        "type": "text",
        "keywords": ["work/contrat", "work/salaire"],
    },
    {
        "title": "Seed phrase",
        "content": "12 mots",
        "type": "text",
        "keywords": ["crypto/wallet"],
    },
]


@pytest.fixture
def vault_items() -> list[Item]:
    return list(VAULT_ITEMS)


@pytest.fixture
def fake_store() -> FakeItemStore:
    return FakeItemStore(list(VAULT_ITEMS))


@pytest.fixture
def vault_db() -> sqlite3.Connection:
    """Return an in-memory DB with the schema created."""
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    return conn


@pytest.fixture
def sqlite_store(vault_db: sqlite3.Connection) -> SqliteItemStore:
    return SqliteItemStore(vault_db)


@pytest.fixture
def seed_file(tmp_path: Path) -> Path:
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(SEED_RECORDS, ensure_ascii=False), encoding="utf-8")
    return path
