"""
Cursebreakers Backend - Profile Route Handlers
===============================================

What:  Blog listing, blog lookup by owner, profile edits, and a user's posts.

Route Inventory:
    GET  /profile                    all blogs
    GET  /profile/{username}         one user's blog
    POST /profile/{username}         edit title/username/category/links (bearer)
    GET  /profile/{username}/posts   one user's posts
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cursebreakers.database import get_db_session
from cursebreakers.dependencies import get_current_user
from cursebreakers.models import User
from cursebreakers.schemas.blog import (
    BlogListResponse,
    BlogResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
)
from cursebreakers.schemas.common import ErrorResponse
from cursebreakers.schemas.post import PostListResponse
from cursebreakers.services.blog_service import blog_service
from cursebreakers.services.post_service import post_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=BlogListResponse, summary="List all blogs")
async def list_blogs(db: AsyncSession = Depends(get_db_session)) -> BlogListResponse:
    return await blog_service.list_blogs(db)


@router.get(
    "/{username}/posts",
    response_model=PostListResponse,
    responses={404: {"description": "Unknown user or no posts", "model": ErrorResponse}},
    summary="List a user's posts",
)
async def user_posts(username: str, db: AsyncSession = Depends(get_db_session)) -> PostListResponse:
    return await post_service.posts_by_user(db, username)


@router.get(
    "/{username}",
    response_model=BlogResponse,
    responses={404: {"description": "Unknown user or blog", "model": ErrorResponse}},
    summary="Get a user's blog",
)
async def get_blog(username: str, db: AsyncSession = Depends(get_db_session)) -> BlogResponse:
    return await blog_service.get_blog_by_username(db, username)


@router.post(
    "/{username}",
    response_model=ProfileUpdateResponse,
    responses={
        400: {"description": "Malformed or taken username/title", "model": ErrorResponse},
        401: {"description": "Not signed in as this user", "model": ErrorResponse},
    },
    summary="Update blog metadata and username",
)
async def update_profile(
    username: str,
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileUpdateResponse:
    return await blog_service.update_profile(db, user, username, body)
