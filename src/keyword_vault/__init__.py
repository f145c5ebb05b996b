"""Personal keyword vault: hierarchical keyword tree and search over tagged records."""

from keyword_vault.core.keywords.navigator import NavigatorState, VisibleNode
from keyword_vault.core.keywords.tree import KeywordTreeNode, build_keyword_tree
from keyword_vault.core.search.controller import SearchController, VaultView
from keyword_vault.core.search.item_filter import FilterQuery, apply_filter
from keyword_vault.models.item import Item, ItemType
from keyword_vault.protocols import ItemStoreProtocol

__all__ = [
    "FilterQuery",
    "Item",
    "ItemStoreProtocol",
    "ItemType",
    "KeywordTreeNode",
    "NavigatorState",
    "SearchController",
    "VaultView",
    "VisibleNode",
    "apply_filter",
    "build_keyword_tree",
]
