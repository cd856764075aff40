"""
Cursebreakers Backend - Blog / Profile Schemas
===============================================

What:  API contracts for the /profile endpoints.
"""

import uuid
from typing import List, Optional

from pydantic import field_validator

from cursebreakers.models import Blog
from cursebreakers.sanitize import sanitize_list, sanitize_optional
from cursebreakers.schemas.common import CamelModel
from cursebreakers.schemas.post import PostResponse


class ProfileUpdateRequest(CamelModel):
    """
    Body of POST /profile/{username}.

    Every field is optional: `user_before` defaults to the path username,
    `new_username` to the current username, `new_title` to the current
    title. `category` and `links` are always overwritten.
    """
    new_title: Optional[str] = None
    user_before: Optional[str] = None
    new_username: Optional[str] = None
    category: Optional[str] = None
    links: List[str] = []

    @field_validator("new_title", "user_before", "new_username", "category")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_optional(v) or None

    @field_validator("links", mode="before")
    @classmethod
    def none_links(cls, v):
        return [] if v is None else v

    @field_validator("links")
    @classmethod
    def clean_links(cls, v: List[str]) -> List[str]:
        return sanitize_list(v)


class AuthorSummary(CamelModel):
    id: uuid.UUID
    username: str
    email: str


class BlogResponse(CamelModel):
    id: uuid.UUID
    title: str
    category: Optional[str] = None
    links: List[str]
    author: AuthorSummary
    posts: List[PostResponse]
    url: str

    @classmethod
    def from_model(cls, blog: Blog) -> "BlogResponse":
        return cls(
            id=blog.id,
            title=blog.title,
            category=blog.category,
            links=list(blog.links or []),
            author=AuthorSummary.model_validate(blog.author),
            posts=[PostResponse.from_model(p) for p in blog.posts],
            url=blog.url,
        )


class BlogListResponse(CamelModel):
    blogs: List[BlogResponse]


class ProfileUpdateResponse(CamelModel):
    message: str = "Blog updated successfully"
    blog: BlogResponse
    token: str
