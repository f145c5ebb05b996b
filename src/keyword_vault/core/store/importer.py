"""Load item records from a JSON seed file into a store."""

import json
from pathlib import Path

from loguru import logger

from keyword_vault.models.item import ImportStats, create_input_from_json
from keyword_vault.protocols import ItemStoreProtocol


def import_items_file(store: ItemStoreProtocol, path: Path) -> ImportStats:
    """Create one item per record of a JSON array.

    Records follow the seed format: `title`, `content`, `type`, `keywords`
    (and optionally `files`). Invalid records are skipped and logged.

    Raises:
        FileNotFoundError: If path does not exist.
        ValueError: If the file is not a JSON array.
    """
    if not path.exists():
        msg = f"Item file not found: {path}"
        raise FileNotFoundError(msg)

    records = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        msg = f"Expected a JSON array of items in {path}, got {type(records).__name__}"
        raise ValueError(msg)

    imported = 0
    reasons: list[str] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            reasons.append(f"#{index}: not an object")
            continue
        try:
            data = create_input_from_json(record)
        except ValueError as e:
            reasons.append(f"#{index}: {e}")
            continue
        store.create(data)
        imported += 1

    for reason in reasons:
        logger.warning("Skipped record {}", reason)
    logger.info("Import complete: {} imported, {} skipped", imported, len(reasons))
    return ImportStats(
        items_imported=imported,
        items_skipped=len(reasons),
        skipped_reasons=tuple(reasons),
    )
