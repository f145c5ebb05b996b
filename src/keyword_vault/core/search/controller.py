"""Recompute the keyword panel and item list whenever inputs change."""

from collections.abc import Iterable
from dataclasses import dataclass, replace

from keyword_vault.core.keywords import navigator
from keyword_vault.core.keywords.navigator import NavigatorState, VisibleNode
from keyword_vault.core.keywords.tree import KeywordTreeNode, build_keyword_tree
from keyword_vault.core.search.item_filter import FilterQuery, apply_filter
from keyword_vault.models.item import Item


@dataclass(frozen=True)
class VaultView:
    """Everything the presentation layer needs to draw the vault."""

    tree: KeywordTreeNode
    visible_nodes: tuple[VisibleNode, ...]
    visible_items: tuple[Item, ...]
    query: FilterQuery
    nav_state: NavigatorState

    @property
    def total_count(self) -> int:
        """Item count of the "All Items" row."""
        return self.tree.count


class SearchController:
    """Holds items, query and navigator state; rebuilds views on demand.

    With `clear_selection_on_empty_text`, clearing the text query also clears
    the keyword selection (the vault web UI behaves this way). Clearing the
    selection never touches the text.
    """

    def __init__(
        self,
        items: Iterable[Item] = (),
        *,
        clear_selection_on_empty_text: bool = False,
    ) -> None:
        self.items: tuple[Item, ...] = tuple(items)
        self.query = FilterQuery()
        self.nav_state = NavigatorState()
        self.clear_selection_on_empty_text = clear_selection_on_empty_text

    def set_items(self, items: Iterable[Item]) -> None:
        self.items = tuple(items)

    def set_text(self, text: str) -> None:
        self.query = replace(self.query, text=text)
        if not text and self.clear_selection_on_empty_text:
            self.select(None)

    def select(self, path: str | None) -> None:
        self.nav_state = navigator.select(self.nav_state, path)
        self.query = replace(self.query, selected_path=self.nav_state.selected_path)

    def toggle_expand(self, path: str) -> None:
        self.nav_state = navigator.toggle_expand(self.nav_state, path)

    def expand(self, path: str) -> None:
        self.nav_state = navigator.expand(self.nav_state, path)

    def expand_to(self, path: str) -> None:
        self.nav_state = navigator.expand_to(self.nav_state, path)

    def view(self) -> VaultView:
        """Rebuild tree, visible rows and visible items from current inputs."""
        tree = build_keyword_tree(self.items)
        return VaultView(
            tree=tree,
            visible_nodes=tuple(navigator.visible_nodes(tree, self.nav_state)),
            visible_items=tuple(apply_filter(self.items, self.query)),
            query=self.query,
            nav_state=self.nav_state,
        )
