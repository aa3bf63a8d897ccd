"""
bearer_auth.config

- AuthSettings: immutable auth configuration (key, TTL, routes, policies).
- settings_from_env: build AuthSettings from AUTH_* environment variables.
"""

from __future__ import annotations

from .env import settings_from_env
from .settings import AuthSettings

__all__ = [
    "AuthSettings",
    "settings_from_env",
]
