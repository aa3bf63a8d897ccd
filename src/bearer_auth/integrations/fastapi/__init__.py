from __future__ import annotations

from typing import Mapping, Optional

from fastapi import FastAPI

from .deps import FastAPIAuthorization
from .middleware import BearerTokenMiddleware
from .routes import create_demo_router, create_login_router
from ..common.auth_factory import AuthDependencies, create_auth_dependencies
from ...config.settings import AuthSettings
from ...domain.ports import Clock, CredentialStore, PasswordEncoder
from ...domain.value_objects import SigningKey


def create_fastapi_auth(
    *,
    settings: AuthSettings,
    credential_store: CredentialStore,
    clock: Optional[Clock] = None,
    password_encoder: Optional[PasswordEncoder] = None,
    verification_keys: Optional[Mapping[str, SigningKey]] = None,
) -> FastAPIAuthorization:
    """
    High-level helper for FastAPI apps:

    - Creates AuthDependencies from AuthSettings and a credential store
    - Wraps them in FastAPIAuthorization, exposing dependencies like:

        fastapi_auth.get_current_identity
        fastapi_auth.get_optional_identity
    """
    auth: AuthDependencies = create_auth_dependencies(
        settings=settings,
        credential_store=credential_store,
        clock=clock,
        password_encoder=password_encoder,
        verification_keys=verification_keys,
    )
    return FastAPIAuthorization(auth=auth)


def create_app(
    fastapi_auth: FastAPIAuthorization,
    *,
    title: str = "bearer-auth",
    include_demo_routes: bool = True,
) -> FastAPI:
    """
    Build a FastAPI app with the request filter registered as middleware,
    the login route mounted and (optionally) the demo protected routes.
    """
    app = FastAPI(title=title)
    app.add_middleware(BearerTokenMiddleware, auth=fastapi_auth.auth)
    app.include_router(create_login_router(fastapi_auth.auth))
    if include_demo_routes:
        app.include_router(create_demo_router(fastapi_auth))
    return app


__all__ = [
    "BearerTokenMiddleware",
    "FastAPIAuthorization",
    "create_app",
    "create_fastapi_auth",
    "create_login_router",
]
