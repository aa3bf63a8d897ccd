# tests/test_domain.py
from datetime import timedelta

import pytest

from bearer_auth.domain.constants import VerificationStatus
from bearer_auth.domain.entities import Claims, Credential, Identity
from bearer_auth.domain.exceptions import (
    AuthenticationError,
    IncorrectCredentialsError,
    InvalidSubjectError,
    InvalidTokenError,
    MissingSigningKeyError,
    TokenExpiredError,
)
from bearer_auth.domain.results import Expired, Malformed, SignatureMismatch, Valid
from bearer_auth.domain.value_objects import SigningKey, Subject

from conftest import SECRET, T


def test_subject_value_object():
    subject = Subject("alice")
    assert str(subject) == "alice"

    with pytest.raises(InvalidSubjectError):
        Subject("")

    # only the empty string is rejected
    assert str(Subject("   ")) == "   "

    # InvalidSubjectError is a ValueError
    with pytest.raises(ValueError):
        Subject("")


def test_signing_key():
    key = SigningKey(secret=SECRET, key_id="k1")
    assert key.algorithm == "HS256"
    assert key.verification_key == SECRET
    assert SECRET not in repr(key)

    asymmetric = SigningKey(secret="private-pem", algorithm="RS256", public_key="public-pem")
    assert asymmetric.verification_key == "public-pem"

    with pytest.raises(MissingSigningKeyError):
        SigningKey(secret="")


def test_claims_invariant():
    claims = Claims(Subject("alice"), issued_at=T, expires_at=T + timedelta(seconds=1))
    assert claims.expires_at > claims.issued_at

    with pytest.raises(ValueError):
        Claims(Subject("alice"), issued_at=T, expires_at=T)

    with pytest.raises(ValueError):
        Claims(Subject("alice"), issued_at=T, expires_at=T - timedelta(seconds=1))


def test_credential_repr_hides_secret():
    credential = Credential(username="alice", secret="wonderland")
    assert "wonderland" not in repr(credential)
    assert "alice" in repr(credential)


def test_identity():
    identity = Identity(subject=Subject("alice"), expires_at=T)
    assert identity.username == "alice"


def test_verification_statuses():
    assert Valid("alice", T).status is VerificationStatus.VALID
    assert Expired().status is VerificationStatus.EXPIRED
    assert Malformed().status is VerificationStatus.MALFORMED
    assert SignatureMismatch().status is VerificationStatus.SIGNATURE_MISMATCH

    assert Expired() == Expired()
    assert Valid("alice", T) == Valid("alice", T)
    assert Valid("alice", T) != Valid("bob", T)


def test_exception_hierarchy():
    assert issubclass(IncorrectCredentialsError, AuthenticationError)
    assert issubclass(TokenExpiredError, InvalidTokenError)
    assert issubclass(InvalidTokenError, AuthenticationError)

    assert str(IncorrectCredentialsError()) == "Incorrect username or password"
