from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .value_objects import Subject


@dataclass(frozen=True, slots=True)
class Credential:
    """
    A username with its stored secret, as returned by a credential store.

    `secret` is opaque to this package: its format depends on the configured
    password encoder (plain text for demos, an argon2 hash otherwise).
    """
    username: str
    secret: str

    def __repr__(self) -> str:
        return f"Credential(username={self.username!r}, secret='***')"


@dataclass(frozen=True, slots=True)
class Claims:
    """
    The payload embedded in a token.

    Timestamps are timezone-aware UTC datetimes with microsecond precision,
    matching the JWT NumericDate encoding.
    """
    subject: Subject
    issued_at: datetime
    expires_at: datetime

    def __post_init__(self) -> None:
        if self.expires_at <= self.issued_at:
            raise ValueError("Token expiry must be later than its issue time")


@dataclass(frozen=True, slots=True)
class Identity:
    """
    The authenticated principal attached to a request after its bearer
    token has been verified.
    """
    subject: Subject
    expires_at: datetime

    @property
    def username(self) -> str:
        return str(self.subject)
