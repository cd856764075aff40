"""
Cursebreakers Backend - Request Dependencies
=============================================

What:  FastAPI dependencies that authenticate the caller.
How:   `Authorization: Bearer <token>` is extracted by HTTPBearer, verified
       by the identity service, and resolved to the User row it names.
       Anything missing or invalid raises UnauthorizedError (→ 401).

Usage:
    @router.post("/posts/new")
    async def create_post(user: User = Depends(get_current_user), ...):
        ...
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cursebreakers.database import get_db_session
from cursebreakers.exceptions import UnauthorizedError
from cursebreakers.models import User
from cursebreakers.services.auth_service import auth_service

# auto_error=False: a missing header reaches get_bearer_token, which raises
# our own 401 envelope instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(message="Not authenticated")
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """The signed-in user; shares the request's database session."""
    return await auth_service.authenticate(db, token)
