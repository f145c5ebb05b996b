"""Master-password check for the vault.

The password is compared in plain text against the configured master
password; nothing is hashed. This gate keeps casual users out, not attackers.
"""

import secrets

from loguru import logger

from keyword_vault.config import MASTERPASS_ENV, resolve_master_password


class AuthenticationError(RuntimeError):
    """Authentication is not possible (e.g. no master password configured)."""


class MasterPasswordAuthenticator:
    def __init__(self, master_password: str) -> None:
        if not master_password:
            msg = "Master password must not be empty"
            raise AuthenticationError(msg)
        self._master_password = master_password

    @classmethod
    def from_env(cls) -> "MasterPasswordAuthenticator":
        password = resolve_master_password()
        if password is None:
            msg = f"No master password configured, set {MASTERPASS_ENV}"
            raise AuthenticationError(msg)
        return cls(password)

    def verify(self, password: str) -> bool:
        if not password:
            return False
        ok = password == self._master_password
        if not ok:
            logger.warning("Rejected vault password")
        return ok

    def issue_token(self) -> str:
        """Opaque session token; it carries no part of the password."""
        return secrets.token_urlsafe(32)
