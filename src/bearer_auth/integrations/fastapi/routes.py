from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from .deps import FastAPIAuthorization
from .security import WWW_AUTHENTICATE_HEADERS
from ..common.auth_factory import AuthDependencies
from ...domain.entities import Identity
from ...domain.exceptions import IncorrectCredentialsError


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str


def create_login_router(auth: AuthDependencies) -> APIRouter:
    """
    Router exposing `POST {settings.login_route}`.

    - 200 {"token": ...} on success
    - 400 when the body is not a JSON object with string username/password
    - 401 with a uniform message for unknown user or wrong password
    """
    router = APIRouter()

    @router.post(auth.settings.login_route, response_model=LoginResponse)
    async def authenticate(request: Request) -> LoginResponse:
        try:
            body = LoginRequest.model_validate(await request.json())
        except (ValueError, ValidationError) as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid request body",
            ) from exc

        # Credential lookup and hashing are blocking; keep them off the loop.
        try:
            token = await run_in_threadpool(auth.login, body.username, body.password)
        except IncorrectCredentialsError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
                headers=WWW_AUTHENTICATE_HEADERS,
            ) from exc

        return LoginResponse(token=token)

    return router


def create_demo_router(fastapi_auth: FastAPIAuthorization) -> APIRouter:
    """Protected sample routes: a greeting and the caller's identity."""
    router = APIRouter()

    @router.get("/hello", response_class=PlainTextResponse)
    async def hello() -> str:
        return "Hello, World!"

    @router.get("/me")
    async def me(
            identity: Identity = Depends(fastapi_auth.get_current_identity),
    ) -> dict[str, str]:
        return {
            "subject": identity.username,
            "expires_at": identity.expires_at.isoformat(),
        }

    return router
