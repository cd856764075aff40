"""
Cursebreakers Backend - Password Hashing and Bearer Tokens
===========================================================

What:  bcrypt password hashing (passlib) and signed access tokens (PyJWT).
Who:   Identity service (register/login/check) and the auth dependency.

Token Format:
    HS256 JWT signed with settings.jwt_secret, claims:
        {
            "userId":   "<uuid>",
            "username": "<username>",
            "iat":      <issued-at, epoch seconds>,
            "exp":      <iat + ACCESS_TOKEN_EXPIRE_MINUTES>
        }
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from cursebreakers.config import settings
from cursebreakers.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


@dataclass(frozen=True)
class TokenClaims:
    """Decoded and verified contents of a bearer token."""

    user_id: uuid.UUID
    username: str
    issued_at: datetime
    expires_at: datetime


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: uuid.UUID,
    username: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token for `user_id`/`username`, valid for one hour unless overridden."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload: Dict[str, Any] = {
        "userId": str(user_id),
        "username": username,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify signature and expiry and return the claims.

    Raises:
        UnauthorizedError: expired, tampered, malformed, or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError(message="Token has expired")
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected bearer token: %s", e)
        raise UnauthorizedError(message="Invalid token")

    try:
        return TokenClaims(
            user_id=uuid.UUID(str(payload["userId"])),
            username=str(payload["username"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, ValueError, TypeError):
        raise UnauthorizedError(message="Invalid token")
