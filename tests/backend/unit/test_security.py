"""
Unit tests for core.security module.
Tests password hashing, JWT token creation/validation and reset tokens.
"""
import datetime as dt

import jwt
import pytest

from aspas.core.security import (
    ACCESS_TOKEN_EXPIRE_DAYS,
    PASSWORD_RESET_TTL,
    as_utc,
    create_access_token,
    decode_access_token,
    generate_reset_token,
    hash_password,
    iso_utc,
    reset_token_expiry,
    verify_password,
)


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        """Password hashing should produce different hashes (salt included)."""
        password = "TestPassword123"
        assert hash_password(password) != hash_password(password)

    def test_hash_is_not_plain_text(self):
        hashed = hash_password("TestPassword123")
        assert isinstance(hashed, str)
        assert hashed != "TestPassword123"
        assert hashed.startswith("$argon2")

    def test_verify_password_correct_and_incorrect(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("TestPassword123", hashed) is True
        assert verify_password("WrongPassword456", hashed) is False

    def test_verify_password_without_hash_is_false(self):
        """A missing account still runs a verification and always fails."""
        assert verify_password("anything", None) is False
        assert verify_password("anything", "") is False


class TestJWTTokens:
    """Tests for JWT token creation and validation."""

    def test_token_carries_identity_claims(self):
        token = create_access_token("user-1", "a@example.com", "FREE")
        payload = decode_access_token(token)
        assert payload["userId"] == "user-1"
        assert payload["email"] == "a@example.com"
        assert payload["role"] == "FREE"
        assert "iat" in payload and "exp" in payload

    def test_token_expiration_time(self):
        """Token expiration should match configured number of days."""
        payload = decode_access_token(create_access_token("user-2", "b@example.com", "PRO"))
        diff_days = (payload["exp"] - payload["iat"]) / 86400
        assert abs(diff_days - ACCESS_TOKEN_EXPIRE_DAYS) < 0.01

    def test_decode_invalid_token(self):
        with pytest.raises(jwt.InvalidTokenError):
            decode_access_token("invalid.token.here")

    def test_decode_wrong_secret(self):
        token = create_access_token("user-3", "c@example.com", "FREE")
        with pytest.raises(jwt.InvalidSignatureError):
            jwt.decode(token, "wrong-secret", algorithms=["HS256"])

    def test_decode_expired_token(self):
        from aspas.core.security import JWT_ALG, JWT_SECRET

        past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(days=1)
        token = jwt.encode({"userId": "u", "iat": past, "exp": past}, JWT_SECRET, algorithm=JWT_ALG)
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_access_token(token)


class TestResetTokens:
    def test_reset_token_is_64_hex_chars(self):
        token = generate_reset_token()
        assert len(token) == 64
        int(token, 16)

    def test_reset_tokens_are_unique(self):
        assert len({generate_reset_token() for _ in range(50)}) == 50

    def test_reset_token_expiry_is_one_hour(self):
        now = dt.datetime(2024, 1, 1, 12, 0, tzinfo=dt.timezone.utc)
        assert PASSWORD_RESET_TTL == dt.timedelta(hours=1)
        assert reset_token_expiry(now) == now + dt.timedelta(hours=1)


class TestDatetimeHelpers:
    def test_as_utc_marks_naive_values(self):
        naive = dt.datetime(2024, 5, 1, 8, 30)
        assert as_utc(naive).tzinfo == dt.timezone.utc

    def test_iso_utc_formats_with_z(self):
        value = dt.datetime(2024, 5, 1, 10, 30, tzinfo=dt.timezone(dt.timedelta(hours=2)))
        assert iso_utc(value) == "2024-05-01T08:30:00Z"
        assert iso_utc(None) is None
