"""
Cursebreakers Backend - Post Service
=====================================

What:  Post CRUD inside a blog, keyword search, and comments.
How:   Posts are child rows of their blog; every response is annotated with
       the blog author's username.
Who:   Called by the /posts and /profile/{username}/posts route handlers.

Ownership Policy:
    Edits and deletes look the post up *inside the caller's blog*. A post
    owned by somebody else is indistinguishable from a missing one (404),
    so only the authenticated owner can mutate a post. Comments may be
    added to any post by any signed-in user and are attributed to them.

Search:
    Case-insensitive substring match, OR-ed across:
        - post title
        - post content
        - each hashtag (the JSON array is expanded into its elements)
        - the text of any comment on the post
    LIKE wildcards in the keyword are escaped, so `%` and `_` are literal.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, column, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cursebreakers.database import store_errors
from cursebreakers.exceptions import NotFoundError, ValidationError
from cursebreakers.models import Blog, Comment, Post, User
from cursebreakers.schemas.post import (
    CommentRequest,
    PostDeleteRequest,
    PostDeleteResponse,
    PostEnvelope,
    PostListResponse,
    PostMutationResponse,
    PostResponse,
    PostWriteRequest,
)
from cursebreakers.services.blog_service import blog_service

logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"


def _like_pattern(keyword: str) -> str:
    """`%keyword%` with LIKE metacharacters in `keyword` escaped."""
    escaped = (
        keyword.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _hashtag_matches(dialect_name: str, pattern: str):
    """
    EXISTS over the elements of `Post.hashtags` that match `pattern`.

    Each tag is compared on its own, so JSON punctuation never matches and
    a keyword cannot span two tags.
    """
    if dialect_name == "postgresql":
        tags = func.json_array_elements_text(Post.hashtags)
    else:
        tags = func.json_each(Post.hashtags)
    tag_values = tags.table_valued(column("value", String)).alias("tag")
    return (
        select(tag_values.c.value)
        .where(tag_values.c.value.ilike(pattern, escape=_LIKE_ESCAPE))
        .exists()
    )


class PostService:
    """Business logic for posts and comments."""

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_posts(self, db: AsyncSession) -> PostListResponse:
        """All posts across all blogs, newest first."""
        async with store_errors("list_posts"):
            result = await db.execute(select(Post).order_by(Post.timestamp.desc()))
            posts = result.scalars().all()
        return PostListResponse(posts=[PostResponse.from_model(p) for p in posts])

    async def search_posts(self, db: AsyncSession, keyword: str) -> PostListResponse:
        """
        Posts whose title, hashtags, content or comment text contain `keyword`.

        Raises:
            NotFoundError: nothing matched (→ 404)
        """
        keyword = keyword.strip()
        if not keyword:
            raise NotFoundError(resource="post", message="No posts found with the provided keyword")

        pattern = _like_pattern(keyword)
        in_comments = (
            select(Comment.id)
            .where(Comment.post_id == Post.id)
            .where(Comment.text.ilike(pattern, escape=_LIKE_ESCAPE))
            .exists()
        )
        query = (
            select(Post)
            .where(
                or_(
                    Post.title.ilike(pattern, escape=_LIKE_ESCAPE),
                    Post.content.ilike(pattern, escape=_LIKE_ESCAPE),
                    _hashtag_matches(db.get_bind().dialect.name, pattern),
                    in_comments,
                )
            )
            .order_by(Post.timestamp.desc())
        )

        async with store_errors("search_posts"):
            result = await db.execute(query)
            posts = result.scalars().all()

        if not posts:
            raise NotFoundError(resource="post", message="No posts found with the provided keyword")
        logger.debug("Search %r matched %d posts", keyword, len(posts))
        return PostListResponse(posts=[PostResponse.from_model(p) for p in posts])

    async def posts_by_user(self, db: AsyncSession, username: str) -> PostListResponse:
        """
        Raises:
            NotFoundError: unknown user, no blog, or a blog without posts
        """
        user = await blog_service.get_user_by_username(db, username)
        blog = await blog_service.get_blog_for_user(db, user)
        if not blog.posts:
            raise NotFoundError(resource="post", message="No posts found for this user")
        return PostListResponse(posts=[PostResponse.from_model(p) for p in blog.posts])

    async def _get_post(self, db: AsyncSession, post_id: uuid.UUID) -> Post:
        async with store_errors("get_post"):
            post = await db.get(Post, post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id), message="Post not found")
        return post

    async def get_post(self, db: AsyncSession, post_id: uuid.UUID) -> PostEnvelope:
        post = await self._get_post(db, post_id)
        return PostEnvelope(post=PostResponse.from_model(post))

    async def _get_owned_post(self, db: AsyncSession, user: User, post_id: uuid.UUID) -> Post:
        """The post `post_id` if it lives in `user`'s blog; NotFoundError otherwise."""
        async with store_errors("get_owned_post"):
            result = await db.execute(
                select(Post)
                .join(Blog, Post.blog_id == Blog.id)
                .where(Post.id == post_id, Blog.author_id == user.id)
            )
            post = result.scalar_one_or_none()
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id), message="Post not found")
        return post

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_post(
        self,
        db: AsyncSession,
        user: User,
        request: PostWriteRequest,
    ) -> PostMutationResponse:
        """
        Append a new post to `user`'s blog.

        Raises:
            NotFoundError: the user has no blog
        """
        blog = await blog_service.get_blog_for_user(db, user)
        post = Post(
            id=uuid.uuid4(),
            title=request.title,
            content=request.content,
            hashtags=list(request.hashtags),
            public=request.public,
            timestamp=datetime.now(timezone.utc),
            comments=[],
        )
        async with store_errors("create_post"):
            blog.posts.append(post)
            await db.flush()

        logger.info("Post %s created in blog %s by %s", post.id, blog.id, user.username)
        return PostMutationResponse(
            message="Post created successfully",
            post=PostResponse.from_model(post),
        )

    async def update_post(
        self,
        db: AsyncSession,
        user: User,
        post_id: uuid.UUID,
        request: PostWriteRequest,
    ) -> PostMutationResponse:
        """Overwrite title, content, hashtags and the public flag of an owned post."""
        post = await self._get_owned_post(db, user, post_id)
        async with store_errors("update_post"):
            post.title = request.title
            post.content = request.content
            post.hashtags = list(request.hashtags)
            post.public = request.public
            await db.flush()

        logger.info("Post %s updated by %s", post.id, user.username)
        return PostMutationResponse(
            message="Post updated successfully",
            post=PostResponse.from_model(post),
        )

    async def add_comment(
        self,
        db: AsyncSession,
        user: User,
        post_id: uuid.UUID,
        request: CommentRequest,
    ) -> PostMutationResponse:
        """
        Append a comment by `user` with a server-side timestamp.

        Raises:
            ValidationError: body names a different user than the caller
            NotFoundError: no such post
        """
        if request.username and request.username != user.username:
            raise ValidationError(
                message="Comment username does not match the signed-in user",
                field="username",
            )

        post = await self._get_post(db, post_id)
        comment = Comment(
            id=uuid.uuid4(),
            author=user,
            text=request.text,
            timestamp=datetime.now(timezone.utc),
        )
        async with store_errors("add_comment"):
            post.comments.append(comment)
            await db.flush()

        logger.info("Comment %s added to post %s by %s", comment.id, post.id, user.username)
        return PostMutationResponse(
            message="Comment added successfully",
            post=PostResponse.from_model(post),
        )

    async def delete_post(
        self,
        db: AsyncSession,
        user: User,
        post_id: uuid.UUID,
        request: Optional[PostDeleteRequest] = None,
    ) -> PostDeleteResponse:
        """
        Remove an owned post and its comments.

        The optional body confirms what the client thinks it is deleting:
        a `username` other than the caller's, or a `title` other than the
        post's, is rejected before anything is removed.
        """
        post = await self._get_owned_post(db, user, post_id)

        if request is not None:
            if request.username and request.username != user.username:
                raise ValidationError(message="Username does not match the signed-in user", field="username")
            if request.title and request.title != post.title:
                raise ValidationError(message="Title does not match the post", field="title")

        # Comments go with the post via the delete-orphan cascade
        async with store_errors("delete_post"):
            await db.delete(post)
            await db.flush()

        logger.info("Post %s deleted by %s", post_id, user.username)
        return PostDeleteResponse(message="Post deleted successfully", id=post_id)


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
