"""
Cursebreakers Backend - User SQLAlchemy Model
==============================================

What:  ORM model representing the `users` table.
Who:   Used by the identity and blog services; read by Alembic.

Table Design:
    - UUID primary key, generated in Python so the id is known before flush
    - username: unique, letters/digits/hyphens, at most 24 characters
    - email: unique
    - password: bcrypt hash, never the plain text
    - join_date: UTC with timezone
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cursebreakers.database import Base

USERNAME_MAX_LENGTH = 24


class User(Base):
    """
    A registered account.

    Lifecycle:
        1. Created at registration together with its blog
        2. Username may change via profile update (must stay unique)
        3. Never deleted
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Unique constraints are the authoritative duplicate check; services
    # only pre-check to produce a friendlier message
    username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH),
        nullable=False,
        unique=True,
    )

    email: Mapped[str] = mapped_column(
        String(254),
        nullable=False,
        unique=True,
    )

    password_hash: Mapped[str] = mapped_column(
        "password",
        String(255),
        nullable=False,
    )

    join_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
