"""
Cursebreakers Backend - Blog / Profile Service
===============================================

What:  Lists blogs, looks a blog up by its owner, and applies profile edits.
Who:   Called by the /profile route handlers and by PostService.

Profile Update Rules (POST /profile/{username}):
    1. The caller must be the user being edited (path and `userBefore`)
    2. The new username must be 1-24 letters, digits or hyphens
    3. A changed username must not belong to anyone else
    4. A changed title must not belong to another blog
    5. Title (when given), category and links are overwritten
    6. A rename without a new title carries a title that still equals the
       old username along to the new username, when that title is free

    Username and blog changes share the request transaction, so a failure
    in either leaves both untouched.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cursebreakers.database import store_errors
from cursebreakers.exceptions import NotFoundError, UnauthorizedError, ValidationError
from cursebreakers.models import Blog, User
from cursebreakers.schemas.blog import (
    BlogListResponse,
    BlogResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
)
from cursebreakers.security import create_access_token
from cursebreakers.services.auth_service import validate_username

logger = logging.getLogger(__name__)


class BlogService:
    """Business logic for blogs and user profiles."""

    async def list_blogs(self, db: AsyncSession) -> BlogListResponse:
        """Every blog with its author (username, email) and posts."""
        async with store_errors("list_blogs"):
            result = await db.execute(select(Blog).order_by(Blog.title))
            blogs = result.scalars().all()
        return BlogListResponse(blogs=[BlogResponse.from_model(b) for b in blogs])

    async def get_user_by_username(self, db: AsyncSession, username: str) -> User:
        async with store_errors("get_user"):
            result = await db.execute(select(User).where(User.username == username))
            user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError(resource="user", resource_id=username, message="User not found")
        return user

    async def get_blog_for_user(self, db: AsyncSession, user: User) -> Blog:
        """The blog owned by `user`; NotFoundError if there is none."""
        async with store_errors("get_blog"):
            result = await db.execute(select(Blog).where(Blog.author_id == user.id))
            blog = result.scalar_one_or_none()
        if blog is None:
            raise NotFoundError(resource="blog", message="Blog not found")
        return blog

    async def get_blog_by_username(self, db: AsyncSession, username: str) -> BlogResponse:
        """
        Raises:
            NotFoundError: no such user, or the user has no blog (→ 404)
        """
        user = await self.get_user_by_username(db, username)
        blog = await self.get_blog_for_user(db, user)
        return BlogResponse.from_model(blog)

    async def _title_following_rename(self, db: AsyncSession, blog: Blog, new_username: str) -> Optional[str]:
        """New username as title, or None when another blog already uses it."""
        taken = await db.execute(
            select(Blog.id).where(Blog.title == new_username, Blog.id != blog.id)
        )
        if taken.first() is not None:
            return None
        return new_username

    async def update_profile(
        self,
        db: AsyncSession,
        current_user: User,
        username: str,
        request: ProfileUpdateRequest,
    ) -> ProfileUpdateResponse:
        """
        Apply a profile edit for `current_user`.

        Args:
            username: the `{username}` path segment
            request: new title/username, category and links

        Returns:
            The updated blog and a fresh token whose `username` claim
            matches the (possibly new) username.

        Raises:
            UnauthorizedError: caller is not the user named in the request
            ValidationError: malformed or taken username, taken title
            NotFoundError: caller has no blog
        """
        user_before = request.user_before or username
        if current_user.username != user_before or current_user.username != username:
            logger.warning(
                "User %s attempted to edit profile of %s",
                current_user.username,
                user_before,
            )
            raise UnauthorizedError(message="Unauthorized")

        new_username = request.new_username or current_user.username
        validate_username(new_username, field="newUsername")

        blog = await self.get_blog_for_user(db, current_user)

        async with store_errors("update_profile", duplicate_message="Username or blog title already exists"):
            if new_username != current_user.username:
                taken = await db.execute(select(User.id).where(User.username == new_username))
                if taken.first() is not None:
                    raise ValidationError(message="Username is already taken", field="newUsername")

            if request.new_title and request.new_title != blog.title:
                taken = await db.execute(
                    select(Blog.id).where(Blog.title == request.new_title, Blog.id != blog.id)
                )
                if taken.first() is not None:
                    raise ValidationError(message="Blog title already exists", field="newTitle")

            old_username = current_user.username
            new_title = request.new_title
            if new_title is None and new_username != old_username and blog.title == old_username:
                new_title = await self._title_following_rename(db, blog, new_username)

            current_user.username = new_username
            if new_title:
                blog.title = new_title
            blog.category = request.category
            blog.links = list(request.links)
            await db.flush()

        if old_username != new_username:
            logger.info("Username changed: %s -> %s", old_username, new_username)
        logger.info("Blog %s updated by %s", blog.id, new_username)

        return ProfileUpdateResponse(
            message="Blog updated successfully",
            blog=BlogResponse.from_model(blog),
            token=create_access_token(current_user.id, current_user.username),
        )


# ── Singleton Instance ────────────────────────────────────────────────────
blog_service = BlogService()
