"""
Cursebreakers Backend - Post Route Handlers
============================================

What:  Post listing, lookup, search, CRUD and comments.

Route Inventory:
    GET  /posts                      all posts
    GET  /posts/{id_or_keyword}      a UUID → that post; anything else → search
    POST /posts/new                  create (bearer)
    POST /posts/edit/{post_id}       full overwrite, owner only (bearer)
    POST /posts/delete/{post_id}     delete, owner only (bearer)
    POST /posts/{post_id}/comments   add a comment (bearer)

Lookup and search share one path, so the segment's shape decides: post ids
are UUIDs, and a segment that does not parse as one is a search keyword.
"""

import logging
import uuid
from typing import Optional, Union

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cursebreakers.database import get_db_session
from cursebreakers.dependencies import get_current_user
from cursebreakers.models import User
from cursebreakers.schemas.common import ErrorResponse
from cursebreakers.schemas.post import (
    CommentRequest,
    PostDeleteRequest,
    PostDeleteResponse,
    PostEnvelope,
    PostListResponse,
    PostMutationResponse,
    PostWriteRequest,
)
from cursebreakers.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

_AUTH_RESPONSES = {401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}}


def _parse_post_id(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


@router.get("", response_model=PostListResponse, summary="List all posts")
async def list_posts(db: AsyncSession = Depends(get_db_session)) -> PostListResponse:
    return await post_service.list_posts(db)


@router.post(
    "/new",
    status_code=status.HTTP_201_CREATED,
    response_model=PostMutationResponse,
    responses=_AUTH_RESPONSES,
    summary="Create a post in the caller's blog",
)
async def create_post(
    body: PostWriteRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PostMutationResponse:
    return await post_service.create_post(db, user, body)


@router.post(
    "/edit/{post_id}",
    response_model=PostMutationResponse,
    responses={**_AUTH_RESPONSES, 404: {"description": "Not one of the caller's posts", "model": ErrorResponse}},
    summary="Overwrite one of the caller's posts",
)
async def update_post(
    post_id: uuid.UUID,
    body: PostWriteRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PostMutationResponse:
    return await post_service.update_post(db, user, post_id, body)


@router.post(
    "/delete/{post_id}",
    response_model=PostDeleteResponse,
    responses={**_AUTH_RESPONSES, 404: {"description": "Not one of the caller's posts", "model": ErrorResponse}},
    summary="Delete one of the caller's posts",
)
async def delete_post(
    post_id: uuid.UUID,
    body: Optional[PostDeleteRequest] = Body(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PostDeleteResponse:
    return await post_service.delete_post(db, user, post_id, body)


@router.post(
    "/{post_id}/comments",
    response_model=PostMutationResponse,
    responses={**_AUTH_RESPONSES, 404: {"description": "Unknown post", "model": ErrorResponse}},
    summary="Comment on a post",
)
async def add_comment(
    post_id: uuid.UUID,
    body: CommentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PostMutationResponse:
    return await post_service.add_comment(db, user, post_id, body)


@router.get(
    "/{id_or_keyword}",
    response_model=Union[PostEnvelope, PostListResponse],
    responses={404: {"description": "No such post, or nothing matched", "model": ErrorResponse}},
    summary="Get a post by id, or search posts by keyword",
)
async def get_or_search(
    id_or_keyword: str,
    db: AsyncSession = Depends(get_db_session),
) -> Union[PostEnvelope, PostListResponse]:
    post_id = _parse_post_id(id_or_keyword)
    if post_id is not None:
        return await post_service.get_post(db, post_id)
    return await post_service.search_posts(db, id_or_keyword)
