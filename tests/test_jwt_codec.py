# tests/test_jwt_codec.py
import base64
import json
from datetime import timedelta

import jwt as pyjwt
import pytest

from bearer_auth.adapters.tokens.jwt_codec import JWTTokenCodec
from bearer_auth.domain.exceptions import (
    InvalidSubjectError,
    MalformedTokenError,
    SignatureMismatchError,
    TokenExpiredError,
)
from bearer_auth.domain.results import Expired, Malformed, SignatureMismatch, Valid
from bearer_auth.domain.value_objects import SigningKey, Subject

from conftest import OTHER_SECRET, SECRET, T

HOUR = timedelta(seconds=3600)


def _segments(token: str) -> list[str]:
    return token.split(".")


def _b64_json(segment: str) -> dict:
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


def _flip(char: str) -> str:
    return "A" if char != "A" else "B"


# --- issue -------------------------------------------------------------------


def test_issue_wire_format(codec):
    token = codec.issue("alice", T, HOUR)

    header, claims, signature = _segments(token)
    assert "=" not in token

    assert _b64_json(header) == {"alg": "HS256", "typ": "JWT"}

    payload = _b64_json(claims)
    assert list(payload) == ["sub", "iat", "exp"]
    assert payload["sub"] == "alice"
    assert payload["exp"] - payload["iat"] == 3600
    assert signature


def test_issue_is_deterministic(codec):
    assert codec.issue("alice", T, HOUR) == codec.issue("alice", T, HOUR)


def test_issue_includes_key_id():
    codec = JWTTokenCodec(SigningKey(secret=SECRET, key_id="2024-01"))
    header = _b64_json(_segments(codec.issue("alice", T, HOUR))[0])
    assert header["kid"] == "2024-01"


def test_issue_rejects_empty_subject(codec):
    with pytest.raises(InvalidSubjectError):
        codec.issue("", T, HOUR)


def test_issue_rejects_non_positive_ttl(codec):
    with pytest.raises(ValueError):
        codec.issue("alice", T, timedelta(0))

    with pytest.raises(ValueError):
        codec.issue("alice", T, timedelta(seconds=-5))


def test_sub_second_issue_time_round_trips(codec):
    now = T + timedelta(milliseconds=900)
    token = codec.issue("alice", now, HOUR)

    assert codec.verify(token, now) == Valid("alice", now + HOUR)
    assert codec.verify(token, now + HOUR - timedelta(milliseconds=500)) == Valid("alice", now + HOUR)
    assert codec.verify(token, now + HOUR) == Expired()


def test_microsecond_issue_time_round_trips(codec):
    now = T + timedelta(microseconds=123457)
    token = codec.issue("alice", now, HOUR)

    assert codec.verify(token, now + HOUR - timedelta(microseconds=1)) == Valid("alice", now + HOUR)
    assert codec.verify(token, now + HOUR) == Expired()


def test_fractional_ttl_is_kept(codec):
    ttl = timedelta(seconds=1.9)
    token = codec.issue("alice", T, ttl)

    assert codec.verify(token, T + timedelta(seconds=1.5)) == Valid("alice", T + ttl)
    assert codec.verify(token, T + ttl) == Expired()


def test_fractional_numeric_dates_on_the_wire(codec):
    payload = _b64_json(_segments(codec.issue("alice", T + timedelta(milliseconds=250), HOUR))[1])

    assert payload["iat"] == 1704110400.25
    assert payload["exp"] == 1704114000.25


# --- verify: round trip and expiry --------------------------------------------


@pytest.mark.parametrize("subject", ["alice", "bob@example.com", "ünïcødé"])
@pytest.mark.parametrize("ttl", [timedelta(seconds=1), HOUR, timedelta(days=30)])
def test_verify_issued_token_is_valid(codec, subject, ttl):
    token = codec.issue(subject, T, ttl)
    assert codec.verify(token, T) == Valid(subject, T + ttl)


def test_expiry_boundary_is_inclusive(codec):
    token = codec.issue("alice", T, HOUR)

    assert codec.verify(token, T + HOUR) == Expired()
    assert codec.verify(token, T + HOUR - timedelta(microseconds=1)) == Valid("alice", T + HOUR)


def test_allowed_clock_skew_extends_expiry():
    codec = JWTTokenCodec(SigningKey(secret=SECRET), allowed_clock_skew=timedelta(seconds=30))
    token = codec.issue("alice", T, HOUR)

    assert codec.verify(token, T + HOUR + timedelta(seconds=10)) == Valid("alice", T + HOUR)
    assert codec.verify(token, T + HOUR + timedelta(seconds=30)) == Expired()


def test_negative_clock_skew_is_rejected():
    with pytest.raises(ValueError):
        JWTTokenCodec(SigningKey(secret=SECRET), allowed_clock_skew=timedelta(seconds=-1))


def test_end_to_end_scenario(codec):
    token = codec.issue("alice", T, HOUR)

    assert codec.verify(token, T + timedelta(seconds=1800)) == Valid("alice", T + HOUR)
    assert codec.verify(token, T + timedelta(seconds=3601)) == Expired()

    flipped = token[:-1] + _flip(token[-1])
    assert codec.verify(flipped, T + timedelta(seconds=1800)) == SignatureMismatch()


# --- verify: integrity --------------------------------------------------------


def test_tampering_any_claims_byte_is_detected(codec):
    token = codec.issue("alice", T, HOUR)
    header, claims, signature = _segments(token)

    for i, char in enumerate(claims):
        tampered_claims = claims[:i] + _flip(char) + claims[i + 1:]
        tampered = ".".join([header, tampered_claims, signature])
        assert codec.verify(tampered, T) == SignatureMismatch(), i


def test_forged_claims_are_not_trusted(codec):
    token = codec.issue("alice", T, HOUR)
    header, _, signature = _segments(token)

    forged_payload = base64.urlsafe_b64encode(
        json.dumps({"sub": "admin", "iat": 0, "exp": 9999999999}).encode()
    ).rstrip(b"=").decode()

    assert codec.verify(".".join([header, forged_payload, signature]), T) == SignatureMismatch()


def test_token_signed_with_other_key_is_rejected(codec):
    other = JWTTokenCodec(SigningKey(secret=OTHER_SECRET))
    assert codec.verify(other.issue("alice", T, HOUR), T) == SignatureMismatch()


def test_algorithm_must_match_key(codec):
    token = pyjwt.encode(
        {"sub": "alice", "iat": 1704110400, "exp": 1704114000},
        SECRET,
        algorithm="HS512",
    )
    assert codec.verify(token, T) == SignatureMismatch()


def test_unsigned_token_is_rejected(codec):
    header = base64.urlsafe_b64encode(b'{"alg":"none","typ":"JWT"}').rstrip(b"=").decode()
    _, claims, _ = _segments(codec.issue("alice", T, HOUR))

    assert codec.verify(f"{header}.{claims}.", T) == Malformed()


# --- verify: malformed input ---------------------------------------------------


@pytest.mark.parametrize(
    "token",
    [
        "",
        "abc",
        "a.b",
        "a.b.c.d",
        "a.b.!!",
        "a..c",
        "a b.c.d",
        "eyJhbGciOiJIUzI1NiJ9.e30.x\n",
    ],
)
def test_malformed_tokens(codec, token):
    assert codec.verify(token, T) == Malformed()


def test_header_that_is_not_json_is_malformed(codec):
    _, claims, signature = _segments(codec.issue("alice", T, HOUR))
    header = base64.urlsafe_b64encode(b"not json").rstrip(b"=").decode()

    assert codec.verify(".".join([header, claims, signature]), T) == Malformed()


def test_missing_required_claim_is_malformed(codec):
    token = pyjwt.encode({"sub": "alice", "iat": 1704110400}, SECRET, algorithm="HS256")
    assert codec.verify(token, T) == Malformed()


def test_non_numeric_expiry_is_malformed(codec):
    token = pyjwt.encode(
        {"sub": "alice", "iat": 1704110400, "exp": "tomorrow"},
        SECRET,
        algorithm="HS256",
    )
    assert codec.verify(token, T) == Malformed()


def test_expiry_before_issue_is_malformed(codec):
    token = pyjwt.encode(
        {"sub": "alice", "iat": 1704114000, "exp": 1704110400},
        SECRET,
        algorithm="HS256",
    )
    assert codec.verify(token, T) == Malformed()


# --- key rotation ----------------------------------------------------------------


def test_retired_key_still_verifies_by_key_id():
    old_key = SigningKey(secret=SECRET, key_id="old")
    new_key = SigningKey(secret=OTHER_SECRET, key_id="new")

    old_token = JWTTokenCodec(old_key).issue("alice", T, HOUR)

    rotated = JWTTokenCodec(new_key, verification_keys={"old": old_key})
    assert rotated.verify(old_token, T) == Valid("alice", T + HOUR)
    assert rotated.verify(rotated.issue("bob", T, HOUR), T) == Valid("bob", T + HOUR)

    # without the retired key the old token no longer verifies
    assert JWTTokenCodec(new_key).verify(old_token, T) == SignatureMismatch()


def test_unknown_key_id_is_signature_mismatch():
    token = JWTTokenCodec(SigningKey(secret=SECRET, key_id="unknown")).issue("alice", T, HOUR)
    assert JWTTokenCodec(SigningKey(secret=SECRET, key_id="current")).verify(token, T) == SignatureMismatch()


# --- decode ------------------------------------------------------------------------


def test_decode_returns_claims(codec):
    claims = codec.decode(codec.issue("alice", T, HOUR), T)
    assert claims.subject == Subject("alice")
    assert claims.issued_at == T
    assert claims.expires_at == T + HOUR


def test_decode_raises_domain_errors(codec):
    token = codec.issue("alice", T, HOUR)

    with pytest.raises(TokenExpiredError):
        codec.decode(token, T + HOUR)

    with pytest.raises(SignatureMismatchError):
        codec.decode(token[:-1] + _flip(token[-1]), T)

    with pytest.raises(MalformedTokenError):
        codec.decode("not-a-token", T)
