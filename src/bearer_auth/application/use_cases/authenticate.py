from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from ...domain.entities import Identity
from ...domain.exceptions import (
    AuthenticationError,
    IncorrectCredentialsError,
    InvalidSubjectError,
    InvalidTokenError,
)
from ...domain.ports import Clock, CredentialStore, PasswordEncoder, TokenCodec

logger = logging.getLogger(__name__)

# Compared against when the username is unknown, so both failure paths
# cost one encoder comparison.
_DUMMY_SECRET = "bearer-auth-dummy-secret"


@dataclass(slots=True)
class AuthenticateCredentialsUseCase:
    """
    Application use case:
    - Look up the credential for a username via the CredentialStore port
    - Compare the presented secret under the configured PasswordEncoder
    - Mint a token via the TokenCodec port

    Stateless: the only side effect is the read against the store.
    """

    credential_store: CredentialStore
    password_encoder: PasswordEncoder
    token_codec: TokenCodec
    clock: Clock
    token_ttl: timedelta

    _dummy_stored_secret: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._dummy_stored_secret = self.password_encoder.encode(_DUMMY_SECRET)

    def execute(self, username: str, presented_secret: str) -> str:
        """
        Authenticate a username/password pair and return a signed token.

        Raises:
            IncorrectCredentialsError (same message for unknown user and
            wrong secret)
        """
        credential = self.credential_store.lookup(username) if username else None

        if credential is None:
            self.password_encoder.matches(presented_secret or "", self._dummy_stored_secret)
            logger.info("Rejected login attempt")
            raise IncorrectCredentialsError()

        if not self.password_encoder.matches(presented_secret or "", credential.secret):
            logger.info("Rejected login attempt")
            raise IncorrectCredentialsError()

        try:
            return self.token_codec.issue(
                credential.username, self.clock.now(), self.token_ttl
            )
        except InvalidSubjectError as exc:
            logger.warning("Credential store returned an unusable username")
            raise IncorrectCredentialsError() from exc


@dataclass(slots=True)
class AuthenticateTokenUseCase:
    """
    Application use case:
    - Decode a bearer token via the TokenCodec port
    - Map its claims -> Identity

    Raises domain exceptions instead of returning result variants, for
    callers that work with try/except (framework dependencies, decorators).
    """

    token_codec: TokenCodec
    clock: Clock

    def execute(self, token: str) -> Identity:
        """
        Authenticate a token and return the Identity it asserts.

        Raises:
            TokenExpiredError
            MalformedTokenError
            SignatureMismatchError
            AuthenticationError
        """
        try:
            claims = self.token_codec.decode(token, self.clock.now())
        except InvalidTokenError:
            # let callers distinguish these explicitly
            raise
        except Exception as exc:
            # Wrap unexpected errors in a generic AuthenticationError
            raise AuthenticationError(f"Token validation failed: {exc}") from exc

        return Identity(subject=claims.subject, expires_at=claims.expires_at)
