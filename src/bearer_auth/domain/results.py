"""
Result variants returned by token verification and by the request filter.

These are plain values: produced fresh for every call and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Union

from .constants import RejectionReason, VerificationStatus
from .entities import Identity


# --- Token verification ----------------------------------------------------


@dataclass(frozen=True, slots=True)
class Valid:
    subject: str
    expires_at: datetime

    status: ClassVar[VerificationStatus] = VerificationStatus.VALID


@dataclass(frozen=True, slots=True)
class Expired:
    status: ClassVar[VerificationStatus] = VerificationStatus.EXPIRED


@dataclass(frozen=True, slots=True)
class Malformed:
    status: ClassVar[VerificationStatus] = VerificationStatus.MALFORMED


@dataclass(frozen=True, slots=True)
class SignatureMismatch:
    status: ClassVar[VerificationStatus] = VerificationStatus.SIGNATURE_MISMATCH


VerificationResult = Union[Valid, Expired, Malformed, SignatureMismatch]


# --- Request filtering -----------------------------------------------------


@dataclass(frozen=True, slots=True)
class PassThrough:
    """The route is public; no token was inspected."""


@dataclass(frozen=True, slots=True)
class Authenticated:
    identity: Identity


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: RejectionReason


FilterOutcome = Union[PassThrough, Authenticated, Rejected]
