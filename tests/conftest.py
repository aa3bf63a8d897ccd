# tests/conftest.py
from datetime import datetime, timezone

import pytest

from bearer_auth.adapters.clock import FixedClock
from bearer_auth.adapters.tokens.jwt_codec import JWTTokenCodec
from bearer_auth.domain.value_objects import SigningKey

SECRET = "test-signing-secret-that-is-comfortably-longer-than-sixty-four-bytes-for-hs512"
OTHER_SECRET = "another-signing-secret-that-is-also-longer-than-sixty-four-bytes-for-hs512"

T = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def signing_key() -> SigningKey:
    return SigningKey(secret=SECRET)


@pytest.fixture
def codec(signing_key: SigningKey) -> JWTTokenCodec:
    return JWTTokenCodec(signing_key=signing_key)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T)
