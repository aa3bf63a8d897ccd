"""
bearer_auth

Stateless bearer-token authentication core: username/password login that
issues a signed JWT, and a request filter that verifies it on every
subsequent request. Framework-agnostic, with a FastAPI/Starlette
integration.
"""

__version__ = "0.1.0"

from .domain.entities import Claims, Credential, Identity
from .domain.constants import RejectionReason, VerificationStatus
from .domain.exceptions import (
    AuthenticationError,
    IncorrectCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    MalformedTokenError,
    SignatureMismatchError,
    InvalidSubjectError,
    ConfigError,
    MissingSigningKeyError,
)
from .domain.results import (
    Valid,
    Expired,
    Malformed,
    SignatureMismatch,
    VerificationResult,
    PassThrough,
    Authenticated,
    Rejected,
    FilterOutcome,
)
from .domain.value_objects import Subject, SigningKey
from .domain.ports import Clock, CredentialStore, PasswordEncoder, TokenCodec

from .application.use_cases.authenticate import (
    AuthenticateCredentialsUseCase,
    AuthenticateTokenUseCase,
)
from .application.use_cases.filter_request import RequestFilter, extract_bearer_token

from .adapters.clock import SystemClock, FixedClock
from .adapters.memory.store import InMemoryCredentialStore
from .adapters.passwords import Argon2PasswordEncoder, PlaintextPasswordEncoder
from .adapters.tokens.jwt_codec import JWTTokenCodec

from .config import AuthSettings, settings_from_env

__all__ = [
    "__version__",
    # domain core
    "Claims",
    "Credential",
    "Identity",
    "Subject",
    "SigningKey",
    "RejectionReason",
    "VerificationStatus",
    "Valid",
    "Expired",
    "Malformed",
    "SignatureMismatch",
    "VerificationResult",
    "PassThrough",
    "Authenticated",
    "Rejected",
    "FilterOutcome",
    # ports
    "Clock",
    "CredentialStore",
    "PasswordEncoder",
    "TokenCodec",
    # exceptions
    "AuthenticationError",
    "IncorrectCredentialsError",
    "InvalidTokenError",
    "TokenExpiredError",
    "MalformedTokenError",
    "SignatureMismatchError",
    "InvalidSubjectError",
    "ConfigError",
    "MissingSigningKeyError",
    # use cases
    "AuthenticateCredentialsUseCase",
    "AuthenticateTokenUseCase",
    "RequestFilter",
    "extract_bearer_token",
    # adapters
    "SystemClock",
    "FixedClock",
    "InMemoryCredentialStore",
    "Argon2PasswordEncoder",
    "PlaintextPasswordEncoder",
    "JWTTokenCodec",
    # config
    "AuthSettings",
    "settings_from_env",
]
