"""Keyword prefix tree: fold items into nodes aggregated by keyword path."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from loguru import logger

from keyword_vault.core.keywords.path import SEPARATOR, normalize
from keyword_vault.models.item import Item


@dataclass
class KeywordTreeNode:
    """One keyword prefix and every item carrying it (or a deeper path).

    `items` is keyed by item id so an item is counted once per node no matter
    how many of its keywords pass through here.
    """

    segment: str
    full_path: str
    children: dict[str, "KeywordTreeNode"] = field(default_factory=dict)
    items: dict[str, Item] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def sorted_children(self) -> list["KeywordTreeNode"]:
        """Children in lexicographic segment order."""
        return [self.children[key] for key in sorted(self.children)]

    def find(self, path: str | None) -> "KeywordTreeNode | None":
        """Return the node for a keyword path, or None if it is not in the tree."""
        node = self
        for segment in normalize(path):
            child = node.children.get(segment)
            if child is None:
                return None
            node = child
        return node

    def _add(self, item: Item) -> None:
        self.items.setdefault(item.id, item)

    def _child(self, segment: str) -> "KeywordTreeNode":
        child = self.children.get(segment)
        if child is None:
            full_path = f"{self.full_path}{SEPARATOR}{segment}" if self.full_path else segment
            child = KeywordTreeNode(segment=segment, full_path=full_path)
            self.children[segment] = child
        return child


def build_keyword_tree(items: Iterable[Item]) -> KeywordTreeNode:
    """Build the keyword tree for a collection of items.

    The root aggregates every item with at least one non-empty keyword path.
    Items whose keywords all normalize to nothing appear nowhere.
    """
    root = KeywordTreeNode(segment="", full_path="")
    item_count = 0
    for item in items:
        item_count += 1
        for raw in item.keywords:
            segments = normalize(raw)
            if not segments:
                continue
            root._add(item)
            node = root
            for segment in segments:
                node = node._child(segment)
                node._add(item)

    logger.opt(lazy=True).debug(
        "Built keyword tree: {} items in, {} tagged, {} nodes",
        lambda: item_count,
        lambda: root.count,
        lambda: sum(1 for _ in iter_nodes(root)),
    )
    return root


def iter_nodes(root: KeywordTreeNode) -> Iterator[tuple[KeywordTreeNode, int]]:
    """Yield (node, depth) for every non-root node, pre-order, lexicographic."""
    stack: list[tuple[KeywordTreeNode, int]] = [
        (child, 0) for child in reversed(root.sorted_children())
    ]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.sorted_children()))
