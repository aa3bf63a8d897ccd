# src/bearer_auth/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .exceptions import InvalidSubjectError, MissingSigningKeyError

KeyMaterial = Union[str, bytes]


# --- Identity value objects ----------------------------------------------


@dataclass(frozen=True, slots=True)
class Subject:
    """
    Represents the token subject (`sub` claim), i.e. the username the
    token was issued for.
    """
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise InvalidSubjectError("Token subject must be a non-empty string")

    def __str__(self) -> str:
        return self.value


# --- Key material ----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SigningKey:
    """
    Process-wide key material used to sign and verify tokens.

    For HMAC algorithms (the default) `secret` is used both ways. For
    asymmetric algorithms pass the private key as `secret` and the public
    key as `public_key`.

    `key_id` ends up in the token header (`kid`) so that a verifier holding
    several keys can pick the right one.
    """
    secret: KeyMaterial = field(repr=False)
    algorithm: str = "HS256"
    key_id: str | None = None
    public_key: KeyMaterial | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.secret:
            raise MissingSigningKeyError("Signing key must not be empty")
        if not self.algorithm:
            raise MissingSigningKeyError("Signing algorithm must not be empty")

    @property
    def verification_key(self) -> KeyMaterial:
        return self.public_key if self.public_key is not None else self.secret
