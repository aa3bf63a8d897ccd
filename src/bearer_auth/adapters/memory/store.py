from __future__ import annotations

from typing import Dict, Mapping

from ...domain.entities import Credential
from ...domain.ports import CredentialStore, PasswordEncoder


class InMemoryCredentialStore(CredentialStore):
    """
    Read-only, dict-backed credential store for demos and tests.

    Secrets are kept in whatever form the configured password encoder
    expects; use `from_plaintext` to encode raw passwords up front.
    """

    def __init__(self, secrets_by_username: Mapping[str, str] | None = None) -> None:
        self._secrets: Dict[str, str] = dict(secrets_by_username or {})

    @classmethod
    def from_plaintext(
        cls,
        passwords_by_username: Mapping[str, str],
        encoder: PasswordEncoder,
    ) -> "InMemoryCredentialStore":
        return cls(
            {
                username: encoder.encode(password)
                for username, password in passwords_by_username.items()
            }
        )

    def lookup(self, username: str) -> Credential | None:
        secret = self._secrets.get(username)
        if secret is None:
            return None
        return Credential(username=username, secret=secret)
