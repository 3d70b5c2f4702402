"""Unit tests for local session tokens."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import JWTError

from maintenance_tracker.auth.jwt import create_access_token, decode_token

SECRET = "unit-test-secret"


class TestCreateAccessToken:
    def test_claims(self):
        token, _ = create_access_token({"sub": "user-123"}, SECRET, expires_delta=timedelta(minutes=5))
        payload = decode_token(token, SECRET)
        assert payload["sub"] == "user-123"
        assert payload["type"] == "access"
        assert "iat" in payload
        assert "exp" in payload

    def test_returns_expiry_instant(self):
        before = datetime.now(timezone.utc)
        _, expires_at = create_access_token({"sub": "u"}, SECRET, expires_delta=timedelta(hours=1))
        assert before + timedelta(minutes=59) < expires_at <= before + timedelta(hours=1, seconds=5)

    def test_does_not_mutate_input(self):
        data = {"sub": "u"}
        create_access_token(data, SECRET, expires_delta=timedelta(minutes=5))
        assert data == {"sub": "u"}


class TestDecodeToken:
    def test_expired_token_rejected(self):
        token, _ = create_access_token({"sub": "u"}, SECRET, expires_delta=timedelta(seconds=-10))
        with pytest.raises(JWTError):
            decode_token(token, SECRET)

    def test_wrong_secret_rejected(self):
        token, _ = create_access_token({"sub": "u"}, SECRET, expires_delta=timedelta(minutes=5))
        with pytest.raises(JWTError):
            decode_token(token, "another-secret")

    def test_garbage_rejected(self):
        with pytest.raises(JWTError):
            decode_token("not.a.token", SECRET)
