"""
Cursebreakers Backend - Identity Service
=========================================

What:  Registration, login and token checks.
How:   Validates business rules, hashes passwords, writes the user together
       with their blog and default post, and issues bearer tokens.
Who:   Called by the /auth route handlers and the auth dependency.

Registration Flow (POST /auth/new):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │ Validate │───▶│ Pre-check   │───▶│ User + Blog  │───▶│  Token   │
    │  input   │    │ email/name  │    │ + first post │    │  (JWT)   │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘

    The blog is titled after the username; if another blog already holds
    that title it gets the first free `username-N` instead.

    The three rows are flushed together inside the request transaction. A
    unique-constraint violation at flush (a concurrent registration that
    passed the pre-check) is reported as the same 400 as the pre-check.
"""

import logging
import re
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cursebreakers.exceptions import (
    DatabaseError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from cursebreakers.models import Blog, Post, User
from cursebreakers.models.user import USERNAME_MAX_LENGTH
from cursebreakers.schemas.auth import (
    CheckResponse,
    LoginResponse,
    RegisterResponse,
    UserPublic,
)
from cursebreakers.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")
PASSWORD_MIN_LENGTH = 8

DEFAULT_POST_TITLE = "Hello, World!"
DEFAULT_POST_CONTENT = "This is the default post for new users."


def validate_username(username: str, field: str = "username") -> None:
    """Raise ValidationError unless `username` is 1-24 letters, digits or hyphens."""
    if not username or not USERNAME_PATTERN.match(username):
        raise ValidationError(
            message="Username may only contain letters, numbers and hyphens",
            field=field,
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            message=f"Username must be at most {USERNAME_MAX_LENGTH} characters",
            field=field,
        )


class AuthService:
    """
    Business logic for accounts and bearer tokens.

    Responsibilities:
        - register(): create user, blog and default post; issue token
        - login(): verify credentials; issue token
        - check(): verify a token and return its identity
        - authenticate(): resolve a token to a live User row
    """

    async def register(
        self,
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> RegisterResponse:
        """
        Create an account.

        Raises:
            ValidationError: password mismatch or shorter than 8 characters,
                malformed username, email or username already registered
            DatabaseError: unexpected store failure
        """
        if password != confirm_password:
            raise ValidationError(message="Passwords do not match", field="confirmPassword")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError(
                message=f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
                field="password",
            )
        validate_username(username)

        try:
            existing = await db.execute(select(User.id).where(User.email == email))
            if existing.first() is not None:
                raise ValidationError(message="User already exists with this email", field="email")

            existing = await db.execute(select(User.id).where(User.username == username))
            if existing.first() is not None:
                raise ValidationError(message="Username is already taken", field="username")

            title = await self._free_blog_title(db, username)

            now = datetime.now(timezone.utc)
            user = User(
                id=uuid.uuid4(),
                username=username,
                email=email,
                password_hash=hash_password(password),
                join_date=now,
            )
            blog = Blog(
                id=uuid.uuid4(),
                title=title,
                category=None,
                links=[],
                author=user,
                posts=[
                    Post(
                        id=uuid.uuid4(),
                        title=DEFAULT_POST_TITLE,
                        content=DEFAULT_POST_CONTENT,
                        hashtags=[],
                        public=False,
                        timestamp=now,
                        comments=[],
                    )
                ],
            )
            db.add(user)
            db.add(blog)
            await db.flush()

        except ValidationError:
            raise
        except IntegrityError as e:
            logger.info("Registration rejected by unique constraint: %s", e.orig)
            raise ValidationError(
                message="A user with this email or username already exists",
                context={"constraint": "unique"},
            )
        except SQLAlchemyError as e:
            logger.error("Database error registering %s: %s", username, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "register"})

        logger.info("User registered: %s (%s)", user.username, user.id)
        return RegisterResponse(
            message="User created successfully",
            token=create_access_token(user.id, user.username),
        )

    async def _free_blog_title(self, db: AsyncSession, username: str) -> str:
        """
        The username, or `username-2`, `username-3`, ... when another blog
        already holds it (a renamed user's old title, or a chosen one).
        """
        title = username
        suffix = 1
        while True:
            taken = await db.execute(select(Blog.id).where(Blog.title == title))
            if taken.first() is None:
                return title
            suffix += 1
            title = f"{username}-{suffix}"

    async def login(self, db: AsyncSession, email: str, password: str) -> LoginResponse:
        """
        Exchange credentials for a token.

        Raises:
            NotFoundError: no user with that email (→ 404)
            UnauthorizedError: wrong password (→ 401)
        """
        try:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "login"})

        if user is None:
            raise NotFoundError(resource="user", message="User not found")
        if not verify_password(password, user.password_hash):
            raise UnauthorizedError(message="Invalid credentials")

        logger.info("User logged in: %s", user.username)
        return LoginResponse(
            message="Login successful",
            user=UserPublic.model_validate(user),
            token=create_access_token(user.id, user.username),
        )

    async def authenticate(self, db: AsyncSession, token: str) -> User:
        """
        Resolve a bearer token to its User.

        Raises:
            UnauthorizedError: invalid/expired token, or the user is gone
        """
        claims = decode_access_token(token)
        try:
            user = await db.get(User, claims.user_id)
        except SQLAlchemyError as e:
            logger.error("Database error authenticating token: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "authenticate"})
        if user is None:
            raise UnauthorizedError(message="Unauthorized")
        return user

    async def check(self, db: AsyncSession, token: str) -> CheckResponse:
        """Verify `token` and echo it back with the identity it carries."""
        user = await self.authenticate(db, token)
        return CheckResponse(
            message="Token is valid",
            token=token,
            user_id=user.id,
            username=user.username,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
