"""
Unit Tests for Security Module
Tests for: password hashing, JWT access tokens
"""
import pytest
from datetime import datetime, timedelta
from types import SimpleNamespace
from jose import jwt

from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_user_token,
    decode_token,
)
from app.core.config import settings
from app.core.exceptions import AuthenticationError


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Salted, so the same password hashes differently"""
        assert get_password_hash("testpassword123") != get_password_hash("testpassword123")

    def test_verify_correct_password(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("testpassword123", hashed) is True

    def test_verify_wrong_password(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("wrongpassword", hashed) is False

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_long_password_truncated_at_72_bytes(self):
        password = "a" * 100
        hashed = get_password_hash(password)

        assert verify_password("a" * 72, hashed) is True


class TestAccessTokens:
    """Test JWT creation and decoding"""

    def test_user_token_carries_identity_fields(self):
        user = SimpleNamespace(
            id="user-1",
            roll_number="CS2023/014",
            name="Priya",
            email=None,
            is_verified=True,
            is_admin=False,
        )

        payload = decode_token(create_user_token(user))

        assert payload["sub"] == "user-1"
        assert payload["roll_number"] == "CS2023/014"
        assert payload["is_verified"] is True
        assert payload["is_admin"] is False
        assert payload["type"] == "access"

    def test_expiry_uses_configured_lifetime(self):
        token = create_access_token({"sub": "user-1"})
        payload = jwt.get_unverified_claims(token)

        expires = datetime.utcfromtimestamp(payload["exp"])
        expected = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        assert abs((expires - expected).total_seconds()) < 60

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-10))

        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_wrong_secret_rejected(self):
        token = jwt.encode(
            {"sub": "user-1", "type": "access", "exp": datetime.utcnow() + timedelta(minutes=5)},
            "some-other-secret",
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_non_access_token_rejected(self):
        token = jwt.encode(
            {"sub": "user-1", "type": "refresh", "exp": datetime.utcnow() + timedelta(minutes=5)},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(AuthenticationError) as exc_info:
            decode_token(token)

        assert exc_info.value.message == "Invalid token type"

    def test_garbage_token_rejected(self):
        with pytest.raises(AuthenticationError):
            decode_token("not.a.token")
