"""
Cursebreakers Backend - Post and Comment Schemas
=================================================

What:  API contracts for the /posts endpoints.
How:   Request models sanitize every free-text field in their validators.
       Response models are built from ORM objects with `from_model()`,
       which resolves author usernames through the eager-loaded
       relationships.
"""

import re
import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from cursebreakers.models import Comment, Post
from cursebreakers.sanitize import sanitize_list, sanitize_optional, sanitize_text
from cursebreakers.schemas.common import CamelModel, as_utc

_HASHTAG_SPLIT = re.compile(r"[,\s]+")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostWriteRequest(CamelModel):
    """
    Body of POST /posts/new and POST /posts/edit/{id}.

    Edits are a full overwrite, so both endpoints take the same fields.
    `hashtags` accepts a list or a comma/space separated string; a leading
    `#` is kept as typed.
    """
    title: str
    content: str
    hashtags: List[str] = Field(default_factory=list)
    public: bool = True

    @field_validator("hashtags", mode="before")
    @classmethod
    def split_hashtags(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [tag for tag in _HASHTAG_SPLIT.split(v) if tag]
        return v

    @field_validator("hashtags")
    @classmethod
    def clean_hashtags(cls, v: List[str]) -> List[str]:
        return sanitize_list(v)

    @field_validator("public", mode="before")
    @classmethod
    def default_public(cls, v: Any) -> Any:
        # An explicit null means "not specified"
        return True if v is None else v

    @field_validator("title", "content")
    @classmethod
    def clean_required_text(cls, v: str) -> str:
        cleaned = sanitize_text(v)
        if not cleaned:
            raise ValueError("must not be empty")
        return cleaned


class CommentRequest(CamelModel):
    """Body of POST /posts/{id}/comments."""
    username: Optional[str] = Field(
        default=None,
        description="Optional; when given it must be the signed-in user's name",
    )
    text: str

    @field_validator("username")
    @classmethod
    def clean_username(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_optional(v) or None

    @field_validator("text")
    @classmethod
    def clean_text(cls, v: str) -> str:
        cleaned = sanitize_text(v)
        if not cleaned:
            raise ValueError("must not be empty")
        return cleaned


class PostDeleteRequest(CamelModel):
    """Optional confirmation body of POST /posts/delete/{id}."""
    username: Optional[str] = None
    title: Optional[str] = None

    @field_validator("username", "title")
    @classmethod
    def clean(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_optional(v) or None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CommentResponse(CamelModel):
    id: uuid.UUID
    username: str
    text: str
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def utc_timestamp(cls, v: datetime) -> datetime:
        return as_utc(v)

    @classmethod
    def from_model(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            username=comment.author.username,
            text=comment.text,
            timestamp=comment.timestamp,
        )


class PostResponse(CamelModel):
    """A post annotated with the username of the blog's author."""
    id: uuid.UUID
    blog_id: uuid.UUID
    author: str = Field(description="Username of the owning blog's author")
    title: str
    timestamp: datetime
    hashtags: List[str]
    content: str
    public: bool
    comments: List[CommentResponse]
    url: str

    @field_validator("timestamp")
    @classmethod
    def utc_timestamp(cls, v: datetime) -> datetime:
        return as_utc(v)

    @classmethod
    def from_model(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            blog_id=post.blog_id,
            author=post.blog.author.username,
            title=post.title,
            timestamp=post.timestamp,
            hashtags=list(post.hashtags or []),
            content=post.content,
            public=post.public,
            comments=[CommentResponse.from_model(c) for c in post.comments],
            url=post.url,
        )


class PostListResponse(CamelModel):
    posts: List[PostResponse]


class PostEnvelope(CamelModel):
    post: PostResponse


class PostMutationResponse(CamelModel):
    message: str
    post: PostResponse


class PostDeleteResponse(CamelModel):
    message: str = "Post deleted successfully"
    id: uuid.UUID
