from .constants import INCORRECT_CREDENTIALS_MESSAGE


class AuthenticationError(Exception):
    """Raised when authentication fails."""
    pass


class IncorrectCredentialsError(AuthenticationError):
    """
    Raised when a username/password pair is rejected.

    The message is the same whether the user is unknown or the secret is
    wrong, so callers cannot use it to enumerate usernames.
    """

    def __init__(self, message: str = INCORRECT_CREDENTIALS_MESSAGE) -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when token is malformed or invalid."""
    pass


class TokenExpiredError(InvalidTokenError):
    """Raised when token has expired."""
    pass


class MalformedTokenError(InvalidTokenError):
    """Raised when token segments or claims cannot be decoded."""
    pass


class SignatureMismatchError(InvalidTokenError):
    """Raised when the token signature does not match the signing key."""
    pass


class InvalidSubjectError(ValueError):
    """Raised when a token is requested for an empty subject."""
    pass


class ConfigError(Exception):
    """Raised when auth settings are missing or inconsistent."""
    pass


class MissingSigningKeyError(ConfigError):
    """Raised at startup when no signing key is configured."""
    pass
