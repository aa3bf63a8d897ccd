from enum import Enum


class VerificationStatus(Enum):
    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"
    SIGNATURE_MISMATCH = "signature_mismatch"


class RejectionReason(Enum):
    MISSING_TOKEN = "missing_token"
    TOKEN_EXPIRED = "token_expired"
    INVALID_TOKEN = "invalid_token"


BEARER_SCHEME = "Bearer"
AUTHORIZATION_HEADER = "Authorization"

INCORRECT_CREDENTIALS_MESSAGE = "Incorrect username or password"
NOT_AUTHENTICATED_MESSAGE = "Not authenticated"
