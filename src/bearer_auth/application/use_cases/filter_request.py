from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional

from ...domain.constants import AUTHORIZATION_HEADER, BEARER_SCHEME, RejectionReason
from ...domain.entities import Identity
from ...domain.ports import Clock, TokenCodec
from ...domain.results import (
    Authenticated,
    Expired,
    FilterOutcome,
    PassThrough,
    Rejected,
    Valid,
)
from ...domain.value_objects import Subject

logger = logging.getLogger(__name__)


def extract_bearer_token(headers: Mapping[str, str]) -> Optional[str]:
    """
    Return the token from an `Authorization: Bearer <token>` header, or None.

    Header name and scheme are matched case-insensitively. Plain dicts and
    case-insensitive header mappings (e.g. Starlette's) are both accepted.
    """
    value = headers.get(AUTHORIZATION_HEADER)
    if value is None:
        wanted = AUTHORIZATION_HEADER.lower()
        value = next(
            (v for k, v in headers.items() if k.lower() == wanted),
            None,
        )
    if not value:
        return None

    scheme, _, token = value.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME.lower():
        return None

    token = token.strip()
    return token or None


@dataclass(slots=True)
class RequestFilter:
    """
    Gatekeeper invoked once per inbound request, before protected handlers.

    Outcome per request is terminal in one step:
      - PassThrough        route is in the allow-list, token not inspected
      - Authenticated      bearer token verified, identity attached
      - Rejected(reason)   caller must answer 401 without running the handler
    """

    token_codec: TokenCodec
    clock: Clock
    allowed_routes: FrozenSet[str]

    def handle(self, path: str, headers: Mapping[str, str]) -> FilterOutcome:
        if path in self.allowed_routes:
            return PassThrough()

        token = extract_bearer_token(headers)
        if token is None:
            logger.debug("Rejected request to %s: no bearer token", path)
            return Rejected(RejectionReason.MISSING_TOKEN)

        result = self.token_codec.verify(token, self.clock.now())

        if isinstance(result, Valid):
            return Authenticated(
                Identity(subject=Subject(result.subject), expires_at=result.expires_at)
            )

        if isinstance(result, Expired):
            logger.debug("Rejected request to %s: token expired", path)
            return Rejected(RejectionReason.TOKEN_EXPIRED)

        logger.debug("Rejected request to %s: %s", path, result.status.value)
        return Rejected(RejectionReason.INVALID_TOKEN)
