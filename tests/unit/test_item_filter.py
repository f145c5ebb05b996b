"""Tests for combined text and keyword filtering."""

from keyword_vault.core.search.item_filter import (
    FilterQuery,
    apply_filter,
    matches_keyword,
    matches_text,
    search_items,
)
from keyword_vault.models.item import Item


def _ids(items: list[Item]) -> list[str]:
    return [item.id for item in items]


def test_no_constraints_returns_everything_in_order(vault_items: list[Item]) -> None:
    result = apply_filter(vault_items, FilterQuery(text="", selected_path=None))
    assert result == vault_items


def test_text_match_is_case_insensitive_on_title(vault_items: list[Item]) -> None:
    assert _ids(apply_filter(vault_items, FilterQuery(text="PASS"))) == ["passport"]


def test_text_matches_content_and_keywords(vault_items: list[Item]) -> None:
    assert _ids(apply_filter(vault_items, FilterQuery(text="iban"))) == ["rib"]
    # "identité" only appears as a keyword on passport and cni
    assert _ids(apply_filter(vault_items, FilterQuery(text="IDENTITÉ"))) == ["passport", "cni"]


def test_text_matches_raw_keyword_string_across_slashes(vault_items: list[Item]) -> None:
    assert _ids(apply_filter(vault_items, FilterQuery(text="papier/cni"))) == ["cni"]


def test_missing_title_and_content_never_match() -> None:
    item = Item(id="1", title=None, content=None, keywords=())
    assert not matches_text(item, "none")


def test_selected_path_includes_deeper_matches() -> None:
    a = Item(id="A", title=None, content=None, keywords=("work/contract",))
    b = Item(id="B", title=None, content=None, keywords=("work/invoice",))
    assert _ids(apply_filter([a, b], FilterQuery(selected_path="work"))) == ["A", "B"]
    assert _ids(apply_filter([a, b], FilterQuery(selected_path="work/contract"))) == ["A"]


def test_selected_path_is_segment_exact() -> None:
    item = Item(id="1", title=None, content=None, keywords=("workshop/notes",))
    assert not matches_keyword(item, ("work",))


def test_selected_path_is_normalized() -> None:
    item = Item(id="1", title=None, content=None, keywords=(" admin / id ",))
    assert _ids(apply_filter([item], FilterQuery(selected_path="admin/id"))) == ["1"]


def test_orphaned_selection_yields_nothing(vault_items: list[Item]) -> None:
    assert apply_filter(vault_items, FilterQuery(selected_path="no/such/path")) == []


def test_text_and_keyword_are_combined_with_and(vault_items: list[Item]) -> None:
    query = FilterQuery(text="carte", selected_path="administratif")
    assert _ids(apply_filter(vault_items, query)) == ["cni"]
    query = FilterQuery(text="carte", selected_path="work")
    assert apply_filter(vault_items, query) == []


def test_empty_collection() -> None:
    assert apply_filter([], FilterQuery(text="x", selected_path="y")) == []


def test_search_items_is_text_only(vault_items: list[Item]) -> None:
    assert _ids(search_items(vault_items, "salaire")) == ["payslip"]
