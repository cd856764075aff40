"""
Cursebreakers Backend - Identity Route Handlers
================================================

What:  POST /auth/new (register), POST /auth/in (login), GET /auth/check.
How:   Thin handlers; AuthService does the work and raises app exceptions
       that the global handlers turn into 400/401/404 responses.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cursebreakers.database import get_db_session
from cursebreakers.dependencies import get_bearer_token
from cursebreakers.schemas.auth import (
    CheckResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from cursebreakers.schemas.common import ErrorResponse
from cursebreakers.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/new",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    responses={400: {"description": "Invalid or duplicate registration", "model": ErrorResponse}},
    summary="Register a new user",
    description=(
        "Creates the account, a blog titled after the username and a first "
        "'Hello, World!' post, then returns a one-hour bearer token."
    ),
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    return await auth_service.register(
        db=db,
        username=body.username,
        email=body.email,
        password=body.password,
        confirm_password=body.confirm_password,
    )


@router.post(
    "/in",
    response_model=LoginResponse,
    responses={
        401: {"description": "Wrong password", "model": ErrorResponse},
        404: {"description": "Unknown email", "model": ErrorResponse},
    },
    summary="Log in with email and password",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await auth_service.login(db=db, email=body.email, password=body.password)


@router.get(
    "/check",
    response_model=CheckResponse,
    responses={401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}},
    summary="Verify a bearer token",
)
async def check(
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db_session),
) -> CheckResponse:
    return await auth_service.check(db=db, token=token)
