from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import FrozenSet, Iterable, Optional, Tuple

from ..domain.exceptions import ConfigError, MissingSigningKeyError
from ..domain.value_objects import SigningKey

DEFAULT_LOGIN_ROUTE = "/authenticate"
DEFAULT_TOKEN_TTL = timedelta(hours=1)


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable auth configuration, built once at startup and passed to the
    codec, the authenticator and the request filter.

    Host code decides how to construct this (env, config file, etc.).
    """
    signing_key: str = field(repr=False)
    algorithm: str = "HS256"
    key_id: Optional[str] = None
    public_key: Optional[str] = field(default=None, repr=False)

    token_ttl: timedelta = DEFAULT_TOKEN_TTL
    allowed_clock_skew: timedelta = timedelta(0)

    # Routing
    login_route: str = DEFAULT_LOGIN_ROUTE
    public_routes: Tuple[str, ...] = ()

    # Credential comparison policy: "argon2" or "plaintext" (demo only)
    password_encoder: str = "argon2"

    # When False every token rejection gets the same 401 detail
    expose_failure_reasons: bool = False

    def __post_init__(self) -> None:
        if not self.signing_key:
            raise MissingSigningKeyError("A signing key is required to start")
        if self.token_ttl <= timedelta(0):
            raise ConfigError(f"Token TTL must be positive, got {self.token_ttl}")
        if self.allowed_clock_skew < timedelta(0):
            raise ConfigError("Allowed clock skew must not be negative")
        if not self.login_route.startswith("/"):
            raise ConfigError(f"Login route must start with '/': {self.login_route!r}")

        object.__setattr__(self, "public_routes", _normalize_routes(self.public_routes))

    @property
    def allowed_routes(self) -> FrozenSet[str]:
        return frozenset((self.login_route, *self.public_routes))

    def build_signing_key(self) -> SigningKey:
        return SigningKey(
            secret=self.signing_key,
            algorithm=self.algorithm,
            key_id=self.key_id,
            public_key=self.public_key,
        )


def _normalize_routes(routes: Iterable[str]) -> Tuple[str, ...]:
    """
    Normalize an iterable of routes into a tuple.
    If a plain string is passed, treat it as a single-element collection.
    """
    if isinstance(routes, str):
        routes = (routes,)
    normalized = tuple(r.strip() for r in routes if r and r.strip())
    for route in normalized:
        if not route.startswith("/"):
            raise ConfigError(f"Public route must start with '/': {route!r}")
    return normalized
