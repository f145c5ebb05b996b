"""Expand/select state over a keyword tree and the rows it makes visible."""

from dataclasses import dataclass, replace

from keyword_vault.core.keywords.path import ancestors, canonical
from keyword_vault.core.keywords.tree import KeywordTreeNode


@dataclass(frozen=True)
class NavigatorState:
    """Which keyword nodes are expanded, and which one (if any) is selected."""

    expanded_paths: frozenset[str] = frozenset()
    selected_path: str | None = None


@dataclass(frozen=True)
class VisibleNode:
    """A row of the keyword panel."""

    node: KeywordTreeNode
    depth: int
    is_expanded: bool
    is_selected: bool


def toggle_expand(state: NavigatorState, path: str) -> NavigatorState:
    """Expand a collapsed node or collapse an expanded one. Selection is untouched."""
    key = canonical(path)
    if key in state.expanded_paths:
        return replace(state, expanded_paths=state.expanded_paths - {key})
    return replace(state, expanded_paths=state.expanded_paths | {key})


def expand(state: NavigatorState, path: str) -> NavigatorState:
    """Expand a node, leaving it expanded if it already is."""
    return replace(state, expanded_paths=state.expanded_paths | {canonical(path)})


def select(state: NavigatorState, path: str | None) -> NavigatorState:
    """Select a node, or None/"" for "All Items". Expansion is untouched."""
    key = canonical(path)
    return replace(state, selected_path=key or None)


def expand_to(state: NavigatorState, path: str) -> NavigatorState:
    """Expand every proper ancestor of path so that its row becomes visible."""
    return replace(state, expanded_paths=state.expanded_paths | set(ancestors(path)))


def prune_orphans(tree: KeywordTreeNode, state: NavigatorState) -> NavigatorState:
    """Drop expanded paths and a selection that no longer exist in the tree."""
    expanded = frozenset(p for p in state.expanded_paths if tree.find(p) is not None)
    selected = state.selected_path
    if selected is not None and tree.find(selected) is None:
        selected = None
    return NavigatorState(expanded_paths=expanded, selected_path=selected)


def visible_nodes(tree: KeywordTreeNode, state: NavigatorState) -> list[VisibleNode]:
    """List the rows of the keyword panel, depth-first pre-order.

    The root is never a row; its children start at depth 0. A node's children
    are listed only while the node is expanded.
    """
    rows: list[VisibleNode] = []

    def _walk(node: KeywordTreeNode, depth: int) -> None:
        for child in node.sorted_children():
            expanded = child.full_path in state.expanded_paths
            rows.append(
                VisibleNode(
                    node=child,
                    depth=depth,
                    is_expanded=expanded,
                    is_selected=child.full_path == state.selected_path,
                )
            )
            if expanded:
                _walk(child, depth + 1)

    _walk(tree, 0)
    return rows
