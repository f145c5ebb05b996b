"""Combined free-text and keyword filtering of vault items."""

from collections.abc import Iterable
from dataclasses import dataclass

from keyword_vault.core.keywords.path import is_prefix, normalize
from keyword_vault.models.item import Item


@dataclass(frozen=True)
class FilterQuery:
    """Free-text query plus an optional selected keyword path."""

    text: str = ""
    selected_path: str | None = None


def matches_text(item: Item, text: str) -> bool:
    """Case-insensitive substring match on title, content or any raw keyword."""
    needle = text.lower()
    if item.title is not None and needle in item.title.lower():
        return True
    if item.content is not None and needle in item.content.lower():
        return True
    return any(needle in keyword.lower() for keyword in item.keywords)


def matches_keyword(item: Item, segments: tuple[str, ...]) -> bool:
    """True if some keyword path of the item is, or lies below, the given path."""
    return any(
        is_prefix(segments, path)
        for path in (normalize(raw) for raw in item.keywords)
        if path
    )


def apply_filter(items: Iterable[Item], query: FilterQuery) -> list[Item]:
    """Return the items passing every active constraint, in input order.

    An empty text query and an unset path are both inactive; with neither
    active every item passes. A path absent from the tree yields nothing.
    """
    segments = normalize(query.selected_path)
    result = []
    for item in items:
        if query.text and not matches_text(item, query.text):
            continue
        if segments and not matches_keyword(item, segments):
            continue
        result.append(item)
    return result


def search_items(items: Iterable[Item], text: str) -> list[Item]:
    """Free-text search only, as served by the item store's `?q=` listing."""
    return apply_filter(items, FilterQuery(text=text))
