"""File-backed cache for the vault password and session token.

Values are stored in plain text. The file is created with 0600 permissions,
which is the only protection it gets.
"""

import json
import os
from pathlib import Path

from loguru import logger

PASSWORD_KEY = "password"
SESSION_KEY = "session"


class CredentialCache:
    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable credential cache {}", self.path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, sort_keys=True, indent=2)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def clear(self, key: str | None = None) -> None:
        """Forget one key, or everything when key is None."""
        if key is None:
            self.path.unlink(missing_ok=True)
            return
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
