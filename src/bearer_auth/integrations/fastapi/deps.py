from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials

from .security import bearer_scheme, extract_token_from_request, unauthorized
from ..common.auth_factory import AuthDependencies
from ...domain.entities import Identity
from ...domain.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    TokenExpiredError,
)


@dataclass(slots=True)
class FastAPIAuthorization:
    """
    FastAPI integration for bearer_auth, built on top of the
    framework-agnostic AuthDependencies facade.

    When BearerTokenMiddleware is installed the identity is already on
    `request.state`; otherwise the dependencies verify the token themselves.
    """

    auth: AuthDependencies

    # ------------------------------------------------------------------ #
    # Base dependencies
    # ------------------------------------------------------------------ #

    async def get_current_identity(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> Identity:
        """Dependency: Require authentication."""
        identity = getattr(request.state, "identity", None)
        if isinstance(identity, Identity):
            return identity

        expose = self.auth.settings.expose_failure_reasons
        token = extract_token_from_request(request, credentials)
        try:
            return self.auth.authenticate(token)
        except TokenExpiredError as exc:
            raise unauthorized("Token expired" if expose else None) from exc
        except (InvalidTokenError, AuthenticationError) as exc:
            raise unauthorized("Invalid token" if expose else None) from exc

    async def get_optional_identity(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> Identity | None:
        """Dependency: Optional authentication."""
        identity = getattr(request.state, "identity", None)
        if isinstance(identity, Identity):
            return identity

        try:
            token = extract_token_from_request(request, credentials)
        except HTTPException:
            # no token anywhere -> anonymous
            return None

        try:
            return self.auth.authenticate(token)
        except AuthenticationError:
            # bad token -> treat as anonymous
            return None
