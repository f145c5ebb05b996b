"""MCP server exposing keyword vault search and keyword-tree tools."""

import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from keyword_vault.config import DB_FILENAME, resolve_data_directory
from keyword_vault.core.database.schema import migrate_schema
from keyword_vault.core.keywords.navigator import NavigatorState, visible_nodes
from keyword_vault.core.keywords.path import canonical
from keyword_vault.core.keywords.tree import KeywordTreeNode, build_keyword_tree, iter_nodes
from keyword_vault.core.search.item_filter import FilterQuery, apply_filter
from keyword_vault.core.store.sqlite_store import SqliteItemStore
from keyword_vault.models.item import Item, item_to_json
from keyword_vault.protocols import ItemStoreProtocol


def _summarize(item: Item, *, detailed: bool = False) -> dict[str, Any]:
    if detailed:
        return item_to_json(item)
    content = item.content or ""
    return {
        "id": item.id,
        "title": item.title,
        "type": str(item.type),
        "keywords": list(item.keywords),
        "content": content[:120],
    }


# --- Core functions (testable without MCP context) ---


def vault_search(
    store: ItemStoreProtocol,
    *,
    text: str = "",
    keyword: str | None = None,
    limit: int = 20,
    offset: int = 0,
    response_format: str = "concise",
) -> dict[str, Any]:
    """Search vault items by free text and/or keyword path.

    Text matches case-insensitively against title, content and keywords.
    A keyword path matches items tagged with it or with any path below it.

    Args:
        text: Free-text query ("" = no text filter).
        keyword: Keyword path such as "admin/papers" (None = all items).
        limit: Max results (1-50, default 20).
        offset: Pagination offset.
        response_format: "concise" or "detailed".
    """
    limit = max(1, min(limit, 50))
    offset = max(0, offset)

    query = FilterQuery(text=text, selected_path=canonical(keyword) or None)
    matched = apply_filter(store.list(), query)
    page = matched[offset : offset + limit]
    output: dict[str, Any] = {
        "results": [_summarize(i, detailed=response_format == "detailed") for i in page],
        "count": len(page),
        "total": len(matched),
        "has_more": offset + len(page) < len(matched),
    }
    if output["has_more"]:
        output["next_offset"] = offset + limit
    return output


def _node_to_dict(node: KeywordTreeNode, remaining_depth: int | None) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "path": node.full_path,
        "name": node.segment,
        "count": node.count,
        "child_count": len(node.children),
    }
    if node.children and (remaining_depth is None or remaining_depth > 1):
        next_depth = None if remaining_depth is None else remaining_depth - 1
        entry["children"] = [
            _node_to_dict(child, next_depth) for child in node.sorted_children()
        ]
    return entry


def vault_keyword_tree(
    store: ItemStoreProtocol,
    *,
    below: str | None = None,
    max_depth: int | None = 2,
    expand: list[str] | None = None,
) -> dict[str, Any]:
    """Return the keyword tree with per-node item counts.

    Args:
        below: Start at this keyword path instead of the root.
        max_depth: Levels to include below the start (None = unlimited).
            Values below 1 are treated as 1; the start's children are always listed.
        expand: Instead of max_depth, list only rows visible with these
            paths expanded (same view as the keyword panel). Depths count
            from the start, so its children are at depth 0.
    """
    root = build_keyword_tree(store.list())
    start = root.find(below) if below else root
    if start is None:
        return {"error": f"Keyword path '{below}' not found."}

    if expand is not None:
        state = NavigatorState(expanded_paths=frozenset(canonical(p) for p in expand))
        return {
            "path": start.full_path,
            "count": start.count,
            "total": root.count,
            "rows": [
                {
                    "path": row.node.full_path,
                    "depth": row.depth,
                    "count": row.node.count,
                    "expanded": row.is_expanded,
                    "has_children": row.node.has_children,
                }
                for row in visible_nodes(start, state)
            ],
        }

    if max_depth is not None:
        max_depth = max(1, max_depth)
    return {
        "path": start.full_path,
        "count": start.count,
        "total": root.count,
        "children": [
            _node_to_dict(child, max_depth) for child in start.sorted_children()
        ],
    }


def vault_list_keywords(store: ItemStoreProtocol) -> dict[str, Any]:
    """Flat list of every keyword path with its item count."""
    root = build_keyword_tree(store.list())
    paths = [{"path": node.full_path, "count": node.count} for node, _depth in iter_nodes(root)]
    return {"keywords": paths, "count": len(paths), "total_items": root.count}


def vault_get_item(store: ItemStoreProtocol, *, item_id: str) -> dict[str, Any]:
    """Return one item in full."""
    item = store.get(item_id)
    if item is None:
        return {"error": f"Item '{item_id}' not found."}
    return {"item": item_to_json(item)}


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    conn: sqlite3.Connection
    data_dir: Path

    @property
    def store(self) -> SqliteItemStore:
        return SqliteItemStore(self.conn)


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Open database on startup, close on shutdown."""
    data_dir = resolve_data_directory()
    data_dir.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(data_dir / DB_FILENAME))
    migrate_schema(conn)
    logger.info("Serving vault from {}", data_dir)
    try:
        yield ServerContext(conn=conn, data_dir=data_dir)
    finally:
        conn.close()


mcp_server = FastMCP(
    "keyword-vault",
    instructions="""\
The keyword vault stores small personal records (notes, images, documents).
Each record carries slash-delimited keyword paths such as "admin/papers/passport".

## Finding records
1. Call vault_keyword_tree_tool to see the keyword hierarchy and counts.
2. Call vault_search_tool with keyword="admin/papers" to list everything
   filed under that path (deeper paths included), and/or text="passport"
   for a case-insensitive match on title, content and keywords.
3. Call vault_get_item_tool for the full record.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def vault_search_tool(
    ctx: Context,
    text: str = "",
    keyword: str | None = None,
    limit: int = 20,
    offset: int = 0,
    response_format: str = "concise",
) -> dict[str, Any]:
    """Search vault records by free text and/or keyword path.

    Pagination: When has_more is true, use next_offset in a follow-up call.

    Args:
        text: Case-insensitive substring of title, content or a keyword.
        keyword: Keyword path; records under deeper paths are included.
        limit: Max results (1-50, default 20).
        offset: Pagination offset.
        response_format: "concise" or "detailed".
    """
    return vault_search(
        _ctx(ctx).store,
        text=text,
        keyword=keyword,
        limit=limit,
        offset=offset,
        response_format=response_format,
    )


@mcp_server.tool()
async def vault_keyword_tree_tool(
    ctx: Context,
    below: str | None = None,
    max_depth: int | None = 2,
    expand: list[str] | None = None,
) -> dict[str, Any]:
    """Show the keyword hierarchy with the number of records under each path.

    Args:
        below: Start from this keyword path instead of the top.
        max_depth: Levels to include, at least 1 (None = unlimited).
        expand: Return flat panel rows instead, opening only these paths.
    """
    return vault_keyword_tree(
        _ctx(ctx).store, below=below, max_depth=max_depth, expand=expand
    )


@mcp_server.tool()
async def vault_list_keywords_tool(ctx: Context) -> dict[str, Any]:
    """List every keyword path in the vault with its record count."""
    return vault_list_keywords(_ctx(ctx).store)


@mcp_server.tool()
async def vault_get_item_tool(ctx: Context, item_id: str) -> dict[str, Any]:
    """Read one vault record in full.

    Args:
        item_id: Record ID from search results.
    """
    return vault_get_item(_ctx(ctx).store, item_id=item_id)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from keyword_vault.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
