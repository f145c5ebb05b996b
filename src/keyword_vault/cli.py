"""CLI for the keyword vault (import, browse, search, edit, MCP server)."""

import json
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from loguru import logger

from keyword_vault.api import RemoteItemStore, VaultApi, VaultApiError
from keyword_vault.auth import AuthenticationError, MasterPasswordAuthenticator
from keyword_vault.config import CREDENTIAL_FILE, DB_FILENAME, resolve_data_directory
from keyword_vault.core.database.schema import migrate_schema
from keyword_vault.core.documents import mergeable_files, validate_merge
from keyword_vault.core.keywords.path import normalize
from keyword_vault.core.keywords.tree import iter_nodes
from keyword_vault.core.search.controller import SearchController
from keyword_vault.core.store.importer import import_items_file
from keyword_vault.core.store.sqlite_store import ItemNotFoundError, SqliteItemStore
from keyword_vault.core.tree.render import render_item_line, render_keyword_tree
from keyword_vault.credentials import PASSWORD_KEY, SESSION_KEY, CredentialCache
from keyword_vault.logging_config import configure_logging
from keyword_vault.models.item import CreateItemInput, ItemType, UpdateItemInput, item_to_json

app = typer.Typer(help="Keyword vault: tag records with keyword paths, browse and search them.")

T = TypeVar("T")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Vault database directory"),
]
PasswordOption = Annotated[
    str | None,
    typer.Option("--password", "-p", help="Master password (default: cached login)"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _credential_cache() -> CredentialCache:
    return CredentialCache(CREDENTIAL_FILE)


def _authorize(password: str | None) -> None:
    """Exit unless the password (given or cached) matches the master password.

    Without a configured master password the vault is open.
    """
    try:
        authenticator = MasterPasswordAuthenticator.from_env()
    except AuthenticationError:
        logger.debug("No master password configured, vault is open")
        return
    candidate = password or _credential_cache().get(PASSWORD_KEY) or ""
    if not authenticator.verify(candidate):
        logger.error("Invalid password. Use --password or run 'login' first.")
        raise typer.Exit(1)


def _open_db(data_dir: Path | None, *, create: bool = False) -> sqlite3.Connection:
    """Open the vault database, raising if it doesn't exist (unless create)."""
    dst = data_dir or resolve_data_directory()
    db_path = dst / DB_FILENAME
    if not db_path.exists():
        if not create:
            logger.error("Vault database not found: {}. Run 'import' or 'add' first.", db_path)
            raise typer.Exit(1)
        dst.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    migrate_schema(conn)
    return conn


@app.command(name="import")
def import_cmd(
    items_file: Path = typer.Argument(..., help="JSON array of item records"),
    data_dir: DataDirOption = None,
    password: PasswordOption = None,
) -> None:
    """Import item records from a JSON file into the vault."""
    _authorize(password)
    if not items_file.exists():
        logger.error("Item file not found: {}", items_file)
        raise typer.Exit(1)

    conn = _open_db(data_dir, create=True)
    try:
        stats = import_items_file(SqliteItemStore(conn), items_file)
    except ValueError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    finally:
        conn.close()
    typer.echo(f"Imported {stats.items_imported} items, skipped {stats.items_skipped}")


@app.command(name="list")
def list_cmd(
    text: Annotated[
        str,
        typer.Option("--text", "-t", help="Free-text filter on title, content and keywords"),
    ] = "",
    keyword: Annotated[
        str | None,
        typer.Option("--keyword", "-k", help="Keyword path, e.g. admin/papers"),
    ] = None,
    clear_selection_on_empty: bool = typer.Option(
        False,
        "--clear-selection-on-empty",
        help="An empty --text also drops --keyword (web vault behaviour)",
    ),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    data_dir: DataDirOption = None,
    password: PasswordOption = None,
) -> None:
    """List items matching a text query and/or keyword path."""
    _authorize(password)
    conn = _open_db(data_dir)
    try:
        items = SqliteItemStore(conn).list()
    finally:
        conn.close()

    controller = SearchController(items, clear_selection_on_empty_text=clear_selection_on_empty)
    controller.select(keyword)
    controller.set_text(text)
    view = controller.view()

    if output_json:
        data = {
            "items": [item_to_json(item) for item in view.visible_items],
            "count": len(view.visible_items),
            "total": len(items),
            "selected_path": view.query.selected_path,
        }
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    typer.echo(f"Showing {len(view.visible_items)} of {len(items)} items:\n")
    for item in view.visible_items:
        typer.echo(f"  {render_item_line(item)}")
        typer.echo(f"    id={item.id}")


@app.command()
def tree(
    expand: Annotated[
        list[str] | None,
        typer.Option("--expand", "-e", help="Keyword path to expand (repeatable)"),
    ] = None,
    expand_all: bool = typer.Option(False, "--expand-all", "-a", help="Expand every node"),
    select: Annotated[
        str | None,
        typer.Option("--select", "-k", help="Keyword path to mark as selected"),
    ] = None,
    reveal: bool = typer.Option(
        False, "--reveal", "-r", help="Expand the ancestors of the selected path"
    ),
    data_dir: DataDirOption = None,
    password: PasswordOption = None,
) -> None:
    """Show the keyword tree with item counts."""
    _authorize(password)
    conn = _open_db(data_dir)
    try:
        items = SqliteItemStore(conn).list()
    finally:
        conn.close()

    controller = SearchController(items)
    for path in expand or []:
        controller.expand(path)
    if expand_all:
        for node, _depth in iter_nodes(controller.view().tree):
            if node.has_children:
                controller.expand(node.full_path)
    controller.select(select)
    if reveal and select:
        controller.expand_to(select)

    view = controller.view()
    typer.echo(
        render_keyword_tree(
            view.visible_nodes,
            total_count=view.total_count,
            all_selected=view.nav_state.selected_path is None,
        ),
        nl=False,
    )


@app.command()
def add(
    title: Annotated[str | None, typer.Option("--title", "-T", help="Item title")] = None,
    content: Annotated[str | None, typer.Option("--content", "-c", help="Item body")] = None,
    item_type: Annotated[
        ItemType, typer.Option("--type", help="Item type")
    ] = ItemType.TEXT,
    keyword: Annotated[
        list[str] | None,
        typer.Option("--keyword", "-k", help="Keyword path (repeatable)"),
    ] = None,
    data_dir: DataDirOption = None,
    password: PasswordOption = None,
) -> None:
    """Add an item to the vault."""
    _authorize(password)
    if not title and not content:
        logger.error("An item needs a --title or --content")
        raise typer.Exit(1)

    keywords = tuple(k for k in keyword or [] if normalize(k))
    conn = _open_db(data_dir, create=True)
    try:
        item = SqliteItemStore(conn).create(
            CreateItemInput(type=item_type, title=title, content=content, keywords=keywords)
        )
    finally:
        conn.close()
    typer.echo(f"Added item {item.id}")


@app.command()
def edit(
    item_id: str = typer.Argument(..., help="Item ID to edit"),
    title: Annotated[str | None, typer.Option("--title", "-T", help="New title")] = None,
    content: Annotated[str | None, typer.Option("--content", "-c", help="New body")] = None,
    keyword: Annotated[
        list[str] | None,
        typer.Option("--keyword", "-k", help="Replacement keyword path (repeatable)"),
    ] = None,
    data_dir: DataDirOption = None,
    password: PasswordOption = None,
) -> None:
    """Change an item's title, content or keywords. Unset options are left as they are."""
    _authorize(password)
    keywords = None
    if keyword is not None:
        keywords = tuple(k for k in keyword if normalize(k))
    changes = UpdateItemInput(title=title, content=content, keywords=keywords)
    if changes.is_empty():
        logger.error("Nothing to change: pass --title, --content or --keyword")
        raise typer.Exit(1)

    conn = _open_db(data_dir)
    try:
        SqliteItemStore(conn).update(item_id, changes)
    except ItemNotFoundError:
        typer.echo(f"Item '{item_id}' not found.")
        raise typer.Exit(1) from None
    finally:
        conn.close()
    typer.echo(f"Updated item {item_id}")


@app.command()
def delete(
    item_id: str = typer.Argument(..., help="Item ID to delete"),
    data_dir: DataDirOption = None,
    password: PasswordOption = None,
) -> None:
    """Delete an item from the vault."""
    _authorize(password)
    conn = _open_db(data_dir)
    try:
        SqliteItemStore(conn).delete(item_id)
    except ItemNotFoundError:
        typer.echo(f"Item '{item_id}' not found.")
        raise typer.Exit(1) from None
    finally:
        conn.close()
    typer.echo(f"Deleted item {item_id}")


@app.command()
def login(
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Master password"),
) -> None:
    """Check the master password and remember it for later commands.

    The password is cached in plain text in the credential file.
    """
    try:
        authenticator = MasterPasswordAuthenticator.from_env()
    except AuthenticationError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    if not authenticator.verify(password):
        logger.error("Invalid password")
        raise typer.Exit(1)
    _credential_cache().set(PASSWORD_KEY, password)
    typer.echo("Logged in.")


@app.command()
def logout() -> None:
    """Forget the cached password and session token."""
    _credential_cache().clear()
    typer.echo("Logged out.")


def _session_login(api: VaultApi, password: str | None) -> None:
    cache = _credential_cache()
    candidate = password or cache.get(PASSWORD_KEY)
    if not candidate:
        logger.error("No session for the vault server. Use --password or run 'login' first.")
        raise typer.Exit(1)
    cache.set(SESSION_KEY, api.login(candidate))


def _remote_api(api_url: str | None, password: str | None) -> VaultApi:
    api = VaultApi(api_url, token=_credential_cache().get(SESSION_KEY))
    if api.token is None:
        _session_login(api, password)
    return api


def _remote_call(
    api_url: str | None, password: str | None, call: Callable[[VaultApi], T]
) -> T:
    """Run call against the vault server, logging in again once if the session was rejected."""
    api = _remote_api(api_url, password)
    try:
        return call(api)
    except VaultApiError as e:
        if e.status != 401:
            raise
        logger.info("Vault session rejected, logging in again")
        _credential_cache().clear(SESSION_KEY)
        api.token = None
        _session_login(api, password)
        return call(api)


ApiUrlOption = Annotated[
    str | None,
    typer.Option("--api-url", help="Vault server base URL (default: $VAULT_API_URL)"),
]


@app.command()
def upload(
    item_id: str = typer.Argument(..., help="Item to attach the file to"),
    file: Path = typer.Argument(..., help="File to upload"),
    api_url: ApiUrlOption = None,
    password: PasswordOption = None,
) -> None:
    """Upload a file to the vault server and attach it to an item."""
    if not file.is_file():
        logger.error("File not found: {}", file)
        raise typer.Exit(1)

    def _attach(api: VaultApi) -> str:
        store = RemoteItemStore(api)
        item = store.get(item_id)
        if item is None:
            typer.echo(f"Item '{item_id}' not found.")
            raise typer.Exit(1)
        stored = api.upload(file)
        store.update(item_id, UpdateItemInput(files=(*item.files, stored)))
        return stored

    try:
        stored_path = _remote_call(api_url, password, _attach)
    except (ItemNotFoundError, VaultApiError) as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    typer.echo(f"Uploaded {file.name} -> {stored_path}")


@app.command()
def merge(
    item_id: str = typer.Argument(..., help="Item whose files to merge into one PDF"),
    api_url: ApiUrlOption = None,
    password: PasswordOption = None,
) -> None:
    """Merge an item's PDF and image files into a single PDF on the vault server."""

    def _merge(api: VaultApi) -> str:
        item = api.get_item(item_id)
        if item is None:
            typer.echo(f"Item '{item_id}' not found.")
            raise typer.Exit(1)
        validate_merge(mergeable_files(item))
        return api.merge_to_pdf(item_id)

    try:
        path = _remote_call(api_url, password, _merge)
    except (ValueError, VaultApiError) as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    typer.echo(f"Merged into {path}")


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from keyword_vault.mcp.server import run_mcp_server

    run_mcp_server()
