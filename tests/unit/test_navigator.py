"""Tests for keyword tree navigation state."""

from keyword_vault.core.keywords.navigator import (
    NavigatorState,
    expand,
    expand_to,
    prune_orphans,
    select,
    toggle_expand,
    visible_nodes,
)
from keyword_vault.core.keywords.tree import build_keyword_tree
from keyword_vault.models.item import Item


def _rows(items: list[Item], state: NavigatorState) -> list[tuple[str, int]]:
    return [(r.node.full_path, r.depth) for r in visible_nodes(build_keyword_tree(items), state)]


def test_toggle_twice_restores_state() -> None:
    state = NavigatorState(expanded_paths=frozenset({"work"}))
    once = toggle_expand(state, "administratif")
    assert "administratif" in once.expanded_paths
    assert toggle_expand(once, "administratif") == state


def test_expand_is_idempotent() -> None:
    state = NavigatorState(selected_path="work")
    once = expand(state, " work/ ")
    assert once.expanded_paths == frozenset({"work"})
    assert expand(once, "work") == once
    assert once.selected_path == "work"


def test_toggle_does_not_touch_selection() -> None:
    state = NavigatorState(selected_path="work")
    assert toggle_expand(state, "work").selected_path == "work"


def test_select_does_not_expand() -> None:
    state = select(NavigatorState(), "administratif/papier")
    assert state.selected_path == "administratif/papier"
    assert state.expanded_paths == frozenset()


def test_select_empty_means_all_items() -> None:
    state = select(NavigatorState(selected_path="work"), "")
    assert state.selected_path is None
    assert select(state, None).selected_path is None


def test_collapsed_tree_lists_top_level_only(vault_items: list[Item]) -> None:
    assert _rows(vault_items, NavigatorState()) == [
        ("administratif", 0),
        ("identité", 0),
        ("work", 0),
    ]


def test_expanded_nodes_show_children_in_preorder(vault_items: list[Item]) -> None:
    state = NavigatorState(expanded_paths=frozenset({"administratif", "administratif/papier"}))
    assert _rows(vault_items, state) == [
        ("administratif", 0),
        ("administratif/banque", 1),
        ("administratif/papier", 1),
        ("administratif/papier/cni", 2),
        ("administratif/papier/passport", 2),
        ("identité", 0),
        ("work", 0),
    ]


def test_expanded_child_of_collapsed_parent_is_hidden(vault_items: list[Item]) -> None:
    state = NavigatorState(expanded_paths=frozenset({"administratif/papier"}))
    assert ("administratif/papier/cni", 2) not in _rows(vault_items, state)


def test_visible_rows_flag_selection(vault_items: list[Item]) -> None:
    tree = build_keyword_tree(vault_items)
    rows = visible_nodes(tree, NavigatorState(selected_path="work"))
    selected = [r.node.full_path for r in rows if r.is_selected]
    assert selected == ["work"]


def test_expand_to_opens_ancestors(vault_items: list[Item]) -> None:
    state = expand_to(NavigatorState(), "administratif/papier/cni")
    assert state.expanded_paths == {"administratif", "administratif/papier"}
    assert ("administratif/papier/cni", 2) in _rows(vault_items, state)


def test_prune_orphans_drops_missing_paths(vault_items: list[Item]) -> None:
    tree = build_keyword_tree(vault_items)
    state = NavigatorState(
        expanded_paths=frozenset({"work", "gone"}), selected_path="gone/deeper"
    )
    pruned = prune_orphans(tree, state)
    assert pruned.expanded_paths == {"work"}
    assert pruned.selected_path is None
