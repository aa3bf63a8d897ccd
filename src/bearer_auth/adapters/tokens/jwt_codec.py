import base64
import binascii
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import jwt
from jwt.exceptions import (
    DecodeError,
    InvalidAlgorithmError,
    InvalidSignatureError,
    InvalidTokenError as JWTInvalidTokenError,
)

from ...domain.entities import Claims
from ...domain.exceptions import (
    MalformedTokenError,
    SignatureMismatchError,
    TokenExpiredError,
)
from ...domain.ports import TokenCodec
from ...domain.results import (
    Expired,
    Malformed,
    SignatureMismatch,
    Valid,
    VerificationResult,
)
from ...domain.value_objects import SigningKey, Subject

logger = logging.getLogger(__name__)

_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]+")

# Expiry is checked against the injected clock, not PyJWT's wall clock.
_DECODE_OPTIONS: Dict[str, Any] = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "verify_aud": False,
    "verify_iss": False,
    "require": ["sub", "iat", "exp"],
}


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _to_numeric_date(moment: datetime) -> Union[int, float]:
    # NumericDate may carry a fractional part; whole seconds stay integers.
    seconds = moment.timestamp()
    return int(seconds) if seconds.is_integer() else seconds


def _from_numeric_date(value: Any, claim: str) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedTokenError(f"Claim {claim!r} must be a NumericDate")
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _b64url_decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


class JWTTokenCodec(TokenCodec):
    """
    Adapter implementing the TokenCodec port using PyJWT (compact JWS).

    Wire format: base64url(header).base64url(claims).base64url(signature),
    where the header carries `alg`, `typ` and an optional `kid`, and the
    claims carry `sub`, `iat` and `exp` in that order.

    The signature is always verified before any claim is trusted, and only
    the algorithm bound to the selected key is accepted.
    """

    def __init__(
        self,
        signing_key: SigningKey,
        verification_keys: Optional[Mapping[str, SigningKey]] = None,
        allowed_clock_skew: timedelta = timedelta(0),
    ) -> None:
        if allowed_clock_skew < timedelta(0):
            raise ValueError("Allowed clock skew must not be negative")

        self._signing_key = signing_key
        self._allowed_clock_skew = allowed_clock_skew

        # Retired keys stay verifiable by kid until their tokens run out.
        self._keys_by_id: Dict[str, SigningKey] = dict(verification_keys or {})
        if signing_key.key_id is not None:
            self._keys_by_id[signing_key.key_id] = signing_key

    @property
    def signing_key(self) -> SigningKey:
        return self._signing_key

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def issue(self, subject: str, now: datetime, ttl: timedelta) -> str:
        """
        Mint a signed token for `subject`.

        Raises:
            InvalidSubjectError
            ValueError (non-positive ttl)
        """
        subject_vo = Subject(subject)

        if ttl <= timedelta(0):
            raise ValueError(f"Token TTL must be positive, got {ttl!r}")

        issued_at = _as_utc(now)
        claims = Claims(
            subject=subject_vo,
            issued_at=issued_at,
            expires_at=issued_at + ttl,
        )

        payload = {
            "sub": str(claims.subject),
            "iat": _to_numeric_date(claims.issued_at),
            "exp": _to_numeric_date(claims.expires_at),
        }
        headers = {"kid": self._signing_key.key_id} if self._signing_key.key_id else None

        token = jwt.encode(
            payload,
            self._signing_key.secret,
            algorithm=self._signing_key.algorithm,
            headers=headers,
        )
        logger.debug(
            "Issued token for %s expiring at %s", claims.subject, claims.expires_at.isoformat()
        )
        return token

    def verify(self, token: str, now: datetime) -> VerificationResult:
        try:
            claims = self.decode(token, now)
        except TokenExpiredError:
            return Expired()
        except SignatureMismatchError:
            return SignatureMismatch()
        except MalformedTokenError:
            return Malformed()

        return Valid(subject=str(claims.subject), expires_at=claims.expires_at)

    def decode(self, token: str, now: datetime) -> Claims:
        """
        Verify the token and return its claims.

        Raises:
            MalformedTokenError
            SignatureMismatchError
            TokenExpiredError
        """
        _, _, signature_segment = self._split(token)
        key = self._select_key(token)

        # Several encodings can decode to the same signature bytes; only the
        # one the codec produces is accepted.
        if _b64url_encode(_b64url_decode(signature_segment)) != signature_segment:
            raise SignatureMismatchError("Signature verification failed")

        try:
            payload = jwt.decode(
                token,
                key.verification_key,
                algorithms=[key.algorithm],
                options=_DECODE_OPTIONS,
            )
        except (InvalidSignatureError, InvalidAlgorithmError) as exc:
            raise SignatureMismatchError("Signature verification failed") from exc
        except (DecodeError, JWTInvalidTokenError) as exc:
            raise MalformedTokenError(f"Invalid token: {exc}") from exc

        claims = self._claims_from_payload(payload)

        if _as_utc(now) >= claims.expires_at + self._allowed_clock_skew:
            raise TokenExpiredError("Token has expired")

        return claims

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _split(token: str) -> Tuple[str, str, str]:
        if not isinstance(token, str):
            raise MalformedTokenError("Token must be a string")

        segments: List[str] = token.split(".")
        if len(segments) != 3:
            raise MalformedTokenError(
                f"Token must have 3 segments, got {len(segments)}"
            )

        for segment in segments:
            if not _SEGMENT_RE.fullmatch(segment) or len(segment) % 4 == 1:
                raise MalformedTokenError("Token segment is not valid base64url")
            try:
                _b64url_decode(segment)
            except (binascii.Error, ValueError) as exc:
                raise MalformedTokenError("Token segment is not valid base64url") from exc

        header, claims, signature = segments
        return header, claims, signature

    def _select_key(self, token: str) -> SigningKey:
        try:
            header = jwt.get_unverified_header(token)
        except (DecodeError, JWTInvalidTokenError) as exc:
            raise MalformedTokenError(f"Invalid token header: {exc}") from exc

        kid = header.get("kid")
        if kid is None:
            return self._signing_key

        key = self._keys_by_id.get(kid)
        if key is None:
            raise SignatureMismatchError("No matching key found for token")
        return key

    @staticmethod
    def _claims_from_payload(payload: Mapping[str, Any]) -> Claims:
        sub = payload.get("sub")
        if not isinstance(sub, str):
            raise MalformedTokenError("Claim 'sub' must be a string")

        try:
            return Claims(
                subject=Subject(sub),
                issued_at=_from_numeric_date(payload.get("iat"), "iat"),
                expires_at=_from_numeric_date(payload.get("exp"), "exp"),
            )
        except (ValueError, OverflowError, OSError) as exc:
            raise MalformedTokenError(f"Invalid token claims: {exc}") from exc
