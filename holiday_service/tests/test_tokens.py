"""Tests for issuing and verifying bearer tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from conftest import SECRET_KEY
from tokens import Rejected, TokenService, Verified


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 7, 4, 12, 0, tzinfo=timezone.utc))


def test_verify_returns_issued_user_id(token_service):
    token = token_service.issue(42, "admin")

    assert token_service.verify(f"Bearer {token}") == Verified(user_id=42)


def test_token_carries_id_role_and_expiry(clock):
    service = TokenService(SECRET_KEY, clock=clock)
    token = service.issue(7, "user")

    payload = jwt.decode(
        token, SECRET_KEY, algorithms=["HS256"], options={"verify_exp": False}
    )
    assert payload["id"] == 7
    assert payload["role"] == "user"
    assert payload["exp"] - payload["iat"] == 3600


def test_token_valid_until_expiry(clock):
    service = TokenService(SECRET_KEY, clock=clock)
    header = f"Bearer {service.issue(1, 'user')}"

    clock.now += timedelta(minutes=59)
    assert service.verify(header) == Verified(user_id=1)

    clock.now += timedelta(minutes=1)
    assert service.verify(header) == Rejected()


def test_zero_validity_window_is_rejected(clock):
    service = TokenService(SECRET_KEY, expires_delta=timedelta(0), clock=clock)

    assert service.verify(f"Bearer {service.issue(1, 'user')}") == Rejected()


@pytest.mark.parametrize("header", [None, "", "Bearer", "   ", "Bearer not-a-jwt"])
def test_malformed_headers_are_rejected(token_service, header):
    assert token_service.verify(header) == Rejected()


def test_token_signed_with_other_secret_is_rejected(token_service):
    other = TokenService("another-secret-key-with-enough-bytes-for-hs256")
    token = other.issue(1, "user")

    assert token_service.verify(f"Bearer {token}") == Rejected()


def test_scheme_is_not_inspected(token_service):
    token = token_service.issue(3, "user")

    assert token_service.verify(f"Token {token}") == Verified(user_id=3)


def test_token_without_id_claim_is_rejected(token_service):
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = jwt.encode({"role": "user", "exp": exp}, SECRET_KEY, algorithm="HS256")

    assert token_service.verify(f"Bearer {token}") == Rejected()


def test_token_without_expiry_is_rejected(token_service):
    token = jwt.encode({"id": 1, "role": "user"}, SECRET_KEY, algorithm="HS256")

    assert token_service.verify(f"Bearer {token}") == Rejected()


def test_missing_secret_is_refused():
    with pytest.raises(ValueError):
        TokenService("")
