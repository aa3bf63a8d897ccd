from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ...adapters.clock import SystemClock
from ...adapters.passwords import build_password_encoder
from ...adapters.tokens.jwt_codec import JWTTokenCodec
from ...application.use_cases.authenticate import (
    AuthenticateCredentialsUseCase,
    AuthenticateTokenUseCase,
)
from ...application.use_cases.filter_request import RequestFilter
from ...config.settings import AuthSettings
from ...domain.entities import Identity
from ...domain.ports import Clock, CredentialStore, PasswordEncoder, TokenCodec
from ...domain.results import FilterOutcome
from ...domain.value_objects import SigningKey


@dataclass(slots=True)
class AuthDependencies:
    """
    Framework-agnostic auth facade.

    Integrations (FastAPI/Starlette, CLI) adapt this to their own
    dependency / middleware systems.
    """

    settings: AuthSettings
    token_codec: TokenCodec
    login_use_case: AuthenticateCredentialsUseCase
    token_use_case: AuthenticateTokenUseCase
    request_filter: RequestFilter

    # --- Core operations --------------------------------------------------

    def login(self, username: str, password: str) -> str:
        """Username + password -> token (or raise IncorrectCredentialsError)."""
        return self.login_use_case.execute(username, password)

    def authenticate(self, token: str) -> Identity:
        """Token -> Identity (or raise auth exceptions)."""
        return self.token_use_case.execute(token)

    def filter(self, path: str, headers: Mapping[str, str]) -> FilterOutcome:
        """Run the request filter for one inbound request."""
        return self.request_filter.handle(path, headers)


def create_auth_dependencies(
        *,
        settings: AuthSettings,
        credential_store: CredentialStore,
        clock: Optional[Clock] = None,
        password_encoder: Optional[PasswordEncoder] = None,
        verification_keys: Optional[Mapping[str, SigningKey]] = None,
) -> AuthDependencies:
    """
    High-level factory: AuthSettings + collaborators -> AuthDependencies.

    - builds the JWTTokenCodec from the settings' key material
    - wires the login use case, the token use case and the request filter
      with the same codec and clock
    - returns an AuthDependencies facade.
    """
    clock = clock or SystemClock()
    encoder = password_encoder or build_password_encoder(settings.password_encoder)

    codec = JWTTokenCodec(
        signing_key=settings.build_signing_key(),
        verification_keys=verification_keys,
        allowed_clock_skew=settings.allowed_clock_skew,
    )

    login_uc = AuthenticateCredentialsUseCase(
        credential_store=credential_store,
        password_encoder=encoder,
        token_codec=codec,
        clock=clock,
        token_ttl=settings.token_ttl,
    )
    token_uc = AuthenticateTokenUseCase(token_codec=codec, clock=clock)
    request_filter = RequestFilter(
        token_codec=codec,
        clock=clock,
        allowed_routes=settings.allowed_routes,
    )

    return AuthDependencies(
        settings=settings,
        token_codec=codec,
        login_use_case=login_uc,
        token_use_case=token_uc,
        request_filter=request_filter,
    )
