"""
Cursebreakers Backend - Password and Token Tests
=================================================

What we test:
    ✅ bcrypt hashes verify only against the original password
    ✅ Tokens carry userId/username and expire one hour after issue
    ✅ Expired, foreign-signed, malformed and incomplete tokens are rejected
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from cursebreakers.config import settings
from cursebreakers.exceptions import UnauthorizedError
from cursebreakers.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_is_not_plain_text(self):
        hashed = hash_password("correct-horse-battery")
        assert hashed != "correct-horse-battery"
        assert hashed.startswith("$2")

    def test_verify_accepts_original_password(self):
        hashed = hash_password("correct-horse-battery")
        assert verify_password("correct-horse-battery", hashed) is True

    def test_verify_rejects_other_password(self):
        hashed = hash_password("correct-horse-battery")
        assert verify_password("wrong-horse-battery", hashed) is False

    def test_same_password_hashes_differently(self):
        """Each hash gets its own salt."""
        assert hash_password("same-password") != hash_password("same-password")


class TestAccessTokens:

    def test_round_trip_claims(self):
        user_id = uuid.uuid4()
        token = create_access_token(user_id, "alice")

        claims = decode_access_token(token)

        assert claims.user_id == user_id
        assert claims.username == "alice"

    def test_default_lifetime_is_configured_minutes(self):
        claims = decode_access_token(create_access_token(uuid.uuid4(), "alice"))
        lifetime = claims.expires_at - claims.issued_at
        assert lifetime == timedelta(minutes=settings.access_token_expire_minutes)

    def test_wire_claim_names(self):
        user_id = uuid.uuid4()
        token = create_access_token(user_id, "alice")
        payload = jwt.decode(token, options={"verify_signature": False})
        assert payload["userId"] == str(user_id)
        assert payload["username"] == "alice"
        assert {"iat", "exp"} <= payload.keys()

    def test_expired_token_rejected(self):
        token = create_access_token(uuid.uuid4(), "alice", expires_delta=timedelta(seconds=-30))
        with pytest.raises(UnauthorizedError) as exc_info:
            decode_access_token(token)
        assert exc_info.value.message == "Token has expired"

    def test_token_signed_with_other_secret_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "userId": str(uuid.uuid4()),
                "username": "mallory",
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(hours=1)).timestamp()),
            },
            "some-other-secret-that-is-long-enough",
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError) as exc_info:
            decode_access_token(token)
        assert exc_info.value.message == "Invalid token"

    def test_garbage_rejected(self):
        with pytest.raises(UnauthorizedError):
            decode_access_token("not.a.token")

    def test_missing_user_id_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "username": "alice",
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(hours=1)).timestamp()),
            },
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(UnauthorizedError):
            decode_access_token(token)

    def test_missing_expiry_rejected(self):
        token = jwt.encode(
            {"userId": str(uuid.uuid4()), "username": "alice"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(UnauthorizedError):
            decode_access_token(token)
