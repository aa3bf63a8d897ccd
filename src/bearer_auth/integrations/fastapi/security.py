from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.use_cases.filter_request import extract_bearer_token
from ...domain.constants import BEARER_SCHEME, NOT_AUTHENTICATED_MESSAGE, RejectionReason

# Expose this so apps can plug it into dependencies if they want OpenAPI security
bearer_scheme = HTTPBearer(auto_error=False)

WWW_AUTHENTICATE_HEADERS = {"WWW-Authenticate": BEARER_SCHEME}

_REJECTION_DETAILS = {
    RejectionReason.MISSING_TOKEN: NOT_AUTHENTICATED_MESSAGE,
    RejectionReason.TOKEN_EXPIRED: "Token expired",
    RejectionReason.INVALID_TOKEN: "Invalid token",
}


def rejection_detail(reason: RejectionReason, expose_failure_reasons: bool) -> str:
    """
    401 detail for a rejected request. Uniform unless the host app opted
    into exposing the reason.
    """
    if not expose_failure_reasons:
        return NOT_AUTHENTICATED_MESSAGE
    return _REJECTION_DETAILS.get(reason, NOT_AUTHENTICATED_MESSAGE)


def unauthorized(detail: Optional[str] = None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail or NOT_AUTHENTICATED_MESSAGE,
        headers=WWW_AUTHENTICATE_HEADERS,
    )


def extract_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> str:
    """
    Extract an access token from either:

      1. HTTPBearer credentials resolved by FastAPI (preferred)
      2. The raw `Authorization: Bearer <token>` header

    Raises HTTPException(401) if no token is found.
    """
    # 1) Prefer the HTTPBearer credentials if provided
    if credentials is not None:
        token = (credentials.credentials or "").strip()
        if token:
            return token

    # 2) Fallback to raw Authorization header (in case user didn't use bearer_scheme)
    token = extract_bearer_token(request.headers)
    if token:
        return token

    # 3) Nothing found
    raise unauthorized()
