from __future__ import annotations

import os
from datetime import timedelta
from typing import Mapping, Optional

from ..domain.exceptions import ConfigError, MissingSigningKeyError
from .settings import DEFAULT_LOGIN_ROUTE, DEFAULT_TOKEN_TTL, AuthSettings


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> AuthSettings:
    """
    Build AuthSettings from AUTH_* environment variables.

    Raises:
        MissingSigningKeyError if AUTH_SIGNING_KEY is unset or empty
        ConfigError for any other invalid value
    """
    env = os.environ if environ is None else environ

    def _bool(key: str, default: bool = False) -> bool:
        raw = env.get(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _split_csv(key: str) -> list[str]:
        raw = env.get(key)
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x and x.strip()]

    def _seconds(key: str, default: timedelta) -> timedelta:
        raw = env.get(key)
        if raw is None or not raw.strip():
            return default
        try:
            return timedelta(seconds=float(raw.strip()))
        except (ValueError, OverflowError) as exc:
            raise ConfigError(f"{key} must be a number of seconds, got {raw!r}") from exc

    signing_key = env.get("AUTH_SIGNING_KEY")
    if not signing_key:
        raise MissingSigningKeyError("Missing auth settings: AUTH_SIGNING_KEY")

    return AuthSettings(
        signing_key=signing_key,
        algorithm=env.get("AUTH_ALGORITHM") or "HS256",
        key_id=env.get("AUTH_KEY_ID") or None,
        public_key=env.get("AUTH_PUBLIC_KEY") or None,
        token_ttl=_seconds("AUTH_TOKEN_TTL_SECONDS", DEFAULT_TOKEN_TTL),
        allowed_clock_skew=_seconds("AUTH_ALLOWED_CLOCK_SKEW_SECONDS", timedelta(0)),
        login_route=env.get("AUTH_LOGIN_ROUTE") or DEFAULT_LOGIN_ROUTE,
        public_routes=tuple(_split_csv("AUTH_PUBLIC_ROUTES")),
        password_encoder=env.get("AUTH_PASSWORD_ENCODER") or "argon2",
        expose_failure_reasons=_bool("AUTH_EXPOSE_FAILURE_REASONS", False),
    )
