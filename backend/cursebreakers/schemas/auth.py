"""
Cursebreakers Backend - Identity Request/Response Schemas
==========================================================

What:  API contracts for /auth/new, /auth/in and /auth/check.

Field rules enforced here are structural only (types, presence, email
syntax). Business rules (password length, username pattern, uniqueness)
live in AuthService so they report as 400 validation errors with a
specific message.
"""

import uuid
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from cursebreakers.sanitize import sanitize_text
from cursebreakers.schemas.common import CamelModel, as_utc


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(CamelModel):
    """Body of POST /auth/new."""
    username: str = Field(description="Letters, digits and hyphens, max 24 characters")
    email: EmailStr
    password: str
    confirm_password: str

    @field_validator("username")
    @classmethod
    def clean_username(cls, v: str) -> str:
        return sanitize_text(v)


class LoginRequest(CamelModel):
    """Body of POST /auth/in."""
    email: EmailStr
    password: str


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserPublic(CamelModel):
    """A user as other clients may see it; never includes the password hash."""
    id: uuid.UUID
    username: str
    email: str
    join_date: datetime

    @field_validator("join_date")
    @classmethod
    def utc_join_date(cls, v: datetime) -> datetime:
        return as_utc(v)


class RegisterResponse(CamelModel):
    message: str = "User created successfully"
    token: str


class LoginResponse(CamelModel):
    message: str = "Login successful"
    user: UserPublic
    token: str


class CheckResponse(CamelModel):
    message: str = "Token is valid"
    token: str
    user_id: uuid.UUID
    username: str
