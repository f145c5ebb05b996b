"""Render the keyword panel and item rows as plain text."""

import io
from collections.abc import Iterable

from keyword_vault.core.keywords.navigator import VisibleNode
from keyword_vault.models.item import Item


def render_keyword_tree(
    rows: Iterable[VisibleNode],
    *,
    total_count: int,
    all_selected: bool = False,
) -> str:
    """Render visible keyword rows as an indented panel.

    The first line is the "All Items" row. Nodes with children get a `+`
    (collapsed) or `-` (expanded) marker; the selected node is suffixed `*`.
    """
    out = io.StringIO()
    out.write(f"All Items ({total_count}){' *' if all_selected else ''}\n")
    for row in rows:
        indent = "    " * (row.depth + 1)
        if row.node.has_children:
            marker = "- " if row.is_expanded else "+ "
        else:
            marker = "  "
        suffix = " *" if row.is_selected else ""
        out.write(f"{indent}{marker}{row.node.segment} ({row.node.count}){suffix}\n")
    return out.getvalue()


def render_item_line(item: Item, *, width: int = 60) -> str:
    """One-line summary: type, title (or content excerpt) and keywords."""
    label = item.title or (item.content or "").split("\n", 1)[0] or "(untitled)"
    if len(label) > width:
        label = label[: width - 3] + "..."
    tags = " ".join(f"#{k}" for k in item.keywords)
    line = f"[{item.type}] {label}"
    return f"{line}  {tags}" if tags else line
