"""
Cursebreakers Backend - Blog, Post and Comment Models
======================================================

What:  ORM models for the blog aggregate.
How:   A Blog owns an ordered collection of Posts; a Post owns an ordered
       collection of Comments. Children reference their parent by foreign
       key and are deleted with it.

Aggregate Shape:
    users 1 ──── 1 blogs 1 ──── * posts 1 ──── * comments
                                                   │
    users 1 ───────────────────────────────────────┘ (comment author)

Loading Strategy:
    Async sessions cannot lazy-load on attribute access, so every
    relationship is eager: collections and authors via `selectin`, and a
    post's owning blog via an inner join. Loading a blog therefore returns
    the whole aggregate with author usernames resolved.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cursebreakers.database import Base
from cursebreakers.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Blog(Base):
    """
    Per-user aggregate root: metadata plus the user's posts.

    Invariants:
        - exactly one blog per user (author_id is unique)
        - title is globally unique
    """

    __tablename__ = "blogs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Initialized to the username at registration
    title: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    category: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # URLs to the author's other web profiles
    links: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    author_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    author: Mapped[User] = relationship(lazy="selectin")

    posts: Mapped[List["Post"]] = relationship(
        back_populates="blog",
        cascade="all, delete-orphan",
        order_by="Post.timestamp",
        lazy="selectin",
    )

    @property
    def url(self) -> str:
        return f"/profile/{self.author.username}"

    def __repr__(self) -> str:
        return f"<Blog(id={self.id}, title='{self.title}')>"


class Post(Base):
    """A blog entry. Always belongs to exactly one blog."""

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    blog_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("blogs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    hashtags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    blog: Mapped[Blog] = relationship(
        back_populates="posts",
        lazy="joined",
        innerjoin=True,
    )

    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.timestamp",
        lazy="selectin",
    )

    @property
    def url(self) -> str:
        return f"/posts/{self.id}"

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}')>"


class Comment(Base):
    """Append-only remark on a post, attributed to the signed-in user who wrote it."""

    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    post_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    post: Mapped[Post] = relationship(back_populates="comments")

    author: Mapped[User] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id})>"
