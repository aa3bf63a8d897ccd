from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .entities import Claims, Credential
from .results import VerificationResult


class Clock(Protocol):
    """Supplies the current time (timezone-aware, UTC)."""

    def now(self) -> datetime:
        ...


class CredentialStore(Protocol):
    """
    Port for looking up stored credentials by username.

    Implementations live outside the core (database, directory service,
    the in-memory adapter used by demos and tests). Lookups must be
    read-only.
    """

    def lookup(self, username: str) -> Credential | None:
        """Return the stored credential, or None when the user is unknown."""
        ...


class PasswordEncoder(Protocol):
    """
    Comparison policy between a presented secret and a stored one.
    """

    def encode(self, raw_secret: str) -> str:
        """Turn a raw secret into the stored representation."""
        ...

    def matches(self, raw_secret: str, stored_secret: str) -> bool:
        """Return True if `raw_secret` corresponds to `stored_secret`."""
        ...


class TokenCodec(Protocol):
    """
    Port for minting and verifying signed bearer tokens.

    Implementations live in the adapters layer (e.g. the PyJWT codec).
    """

    def issue(self, subject: str, now: datetime, ttl: timedelta) -> str:
        """
        Mint a token for `subject`, valid from `now` for `ttl`.

        Raises:
          - InvalidSubjectError for an empty subject
          - ValueError when ttl is not positive
        """
        ...

    def verify(self, token: str, now: datetime) -> VerificationResult:
        """
        Check integrity first, then expiry. Never raises for bad input;
        returns Valid, Expired, Malformed or SignatureMismatch.
        """
        ...

    def decode(self, token: str, now: datetime) -> Claims:
        """
        Same checks as `verify`, but returns the claims or raises:
          - TokenExpiredError
          - MalformedTokenError
          - SignatureMismatchError
        """
        ...
