from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from ...domain.results import Authenticated, Rejected
from ..common.auth_factory import AuthDependencies
from .security import WWW_AUTHENTICATE_HEADERS, rejection_detail


class BearerTokenMiddleware(BaseHTTPMiddleware):
    """
    Runs the RequestFilter in front of every route.

    - PassThrough: the request continues untouched
    - Authenticated: `request.state.identity` is set, then the request continues
    - Rejected: 401 is returned and the route handler never runs

    Register it explicitly:

        app.add_middleware(BearerTokenMiddleware, auth=auth)
    """

    def __init__(self, app: ASGIApp, auth: AuthDependencies) -> None:
        super().__init__(app)
        self.auth = auth

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        outcome = self.auth.filter(request.url.path, request.headers)

        if isinstance(outcome, Rejected):
            return JSONResponse(
                status_code=401,
                content={
                    "detail": rejection_detail(
                        outcome.reason, self.auth.settings.expose_failure_reasons
                    )
                },
                headers=WWW_AUTHENTICATE_HEADERS,
            )

        if isinstance(outcome, Authenticated):
            request.state.identity = outcome.identity

        return await call_next(request)
