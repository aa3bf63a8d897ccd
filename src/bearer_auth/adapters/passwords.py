from __future__ import annotations

import hmac
import logging

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

from ..domain.exceptions import ConfigError
from ..domain.ports import PasswordEncoder

logger = logging.getLogger(__name__)

PLAINTEXT = "plaintext"
ARGON2 = "argon2"


class PlaintextPasswordEncoder(PasswordEncoder):
    """
    Stores secrets as-is and compares them in constant time.

    Demo use only: never select this encoder for a production deployment.
    """

    def __init__(self) -> None:
        logger.warning(
            "Plaintext password encoder in use; stored secrets are not hashed"
        )

    def encode(self, raw_secret: str) -> str:
        return raw_secret

    def matches(self, raw_secret: str, stored_secret: str) -> bool:
        return hmac.compare_digest(
            raw_secret.encode("utf-8"), stored_secret.encode("utf-8")
        )


class Argon2PasswordEncoder(PasswordEncoder):
    """
    Salted argon2id hashing via argon2-cffi.
    """

    def __init__(self, hasher: PasswordHasher | None = None) -> None:
        self._hasher = hasher or PasswordHasher(type=Type.ID)

    def encode(self, raw_secret: str) -> str:
        return self._hasher.hash(raw_secret)

    def matches(self, raw_secret: str, stored_secret: str) -> bool:
        try:
            return self._hasher.verify(stored_secret, raw_secret)
        except (VerificationError, InvalidHashError):
            return False


def build_password_encoder(name: str) -> PasswordEncoder:
    """Map a configured encoder name to an implementation."""
    normalized = (name or "").strip().lower()
    if normalized == ARGON2:
        return Argon2PasswordEncoder()
    if normalized == PLAINTEXT:
        return PlaintextPasswordEncoder()
    raise ConfigError(
        f"Unknown password encoder {name!r}; expected one of: {ARGON2}, {PLAINTEXT}"
    )
