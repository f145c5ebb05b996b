"""HTTP client for a remote vault server (items, uploads, merges)."""

from pathlib import Path
from typing import Any

import requests
from loguru import logger

from keyword_vault.config import API_TIMEOUT, resolve_api_url
from keyword_vault.core.store.sqlite_store import ItemNotFoundError
from keyword_vault.models.item import (
    CreateItemInput,
    Item,
    UpdateItemInput,
    item_from_json,
)


class VaultApiError(RuntimeError):
    """The vault server rejected a request or answered with an error."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


def _create_payload(data: CreateItemInput) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": str(data.type), "keywords": list(data.keywords)}
    if data.title is not None:
        payload["title"] = data.title
    if data.content is not None:
        payload["content"] = data.content
    if data.files:
        payload["files"] = list(data.files)
    return payload


def _update_payload(data: UpdateItemInput) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if data.title is not None:
        payload["title"] = data.title
    if data.content is not None:
        payload["content"] = data.content
    if data.keywords is not None:
        payload["keywords"] = list(data.keywords)
    if data.files is not None:
        payload["files"] = list(data.files)
    return payload


class VaultApi:
    """Encapsulated vault server API.

    Every request carries the session token in the Authorization header.
    """

    def __init__(self, base_url: str | None = None, *, token: str | None = None) -> None:
        self.base_url = (base_url or resolve_api_url()).rstrip("/")
        self.token = token
        self.sess = requests.Session()
        logger.debug("API ready: base_url {!r}, token set {!r}", self.base_url, token is not None)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        logger.debug("Making request: {} {}", method, path)

        r = self.sess.request(
            method, f"{self.base_url}{path}", headers=headers, timeout=API_TIMEOUT, **kwargs
        )
        if not r.ok:
            try:
                detail = r.json().get("error", r.text)
            except ValueError:
                detail = r.text
            msg = f"API call failed: ({method} {path!r}) -> ({r.status_code}, {detail!r})"
            raise VaultApiError(msg, status=r.status_code)
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    def login(self, password: str) -> str:
        """Exchange the master password for a session token and keep it."""
        rv = self._request("POST", "/api/auth", json={"password": password})
        token = rv.get("token") if isinstance(rv, dict) else None
        if not token:
            msg = f"API login returned no token: {rv!r}"
            raise VaultApiError(msg)
        self.token = token
        return token

    def list_items(self, query: str | None = None) -> list[Item]:
        params = {"q": query} if query else None
        rv = self._request("GET", "/api/items", params=params)
        return [item_from_json(record) for record in rv]

    def get_item(self, item_id: str) -> Item | None:
        try:
            rv = self._request("GET", f"/api/items/{item_id}")
        except VaultApiError as e:
            if e.status == 404:
                return None
            raise
        return item_from_json(rv)

    def create_item(self, data: CreateItemInput) -> Item:
        rv = self._request("POST", "/api/items", json=_create_payload(data))
        return item_from_json(rv)

    def update_item(self, item_id: str, data: UpdateItemInput) -> Item:
        rv = self._request("PUT", f"/api/items/{item_id}", json=_update_payload(data))
        return item_from_json(rv)

    def delete_item(self, item_id: str) -> None:
        self._request("DELETE", f"/api/items/{item_id}")

    def upload(self, path: Path) -> str:
        """Upload a file; returns the storage path the server assigned."""
        with open(path, "rb") as f:
            rv = self._request("POST", "/api/upload", files={"file": (path.name, f)})
        return str(rv["path"])

    def merge_to_pdf(self, item_id: str) -> str:
        """Ask the server to merge an item's files into one PDF; returns its path."""
        rv = self._request("POST", f"/api/items/{item_id}/merge")
        return str(rv["path"])


class RemoteItemStore:
    """ItemStoreProtocol adapter over VaultApi."""

    def __init__(self, api: VaultApi) -> None:
        self.api = api

    def get(self, item_id: str) -> Item | None:
        return self.api.get_item(item_id)

    def create(self, data: CreateItemInput) -> Item:
        return self.api.create_item(data)

    def update(self, item_id: str, data: UpdateItemInput) -> Item:
        try:
            return self.api.update_item(item_id, data)
        except VaultApiError as e:
            if e.status == 404:
                msg = f"Item {item_id!r} not found"
                raise ItemNotFoundError(msg) from e
            raise

    def delete(self, item_id: str) -> None:
        try:
            self.api.delete_item(item_id)
        except VaultApiError as e:
            if e.status == 404:
                msg = f"Item {item_id!r} not found"
                raise ItemNotFoundError(msg) from e
            raise

    def list(self) -> list[Item]:
        return self.api.list_items()
