"""
Cursebreakers Backend - Database Session Management
====================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs (tests, local runs) get the dialect's own pool and none of
    the sizing options.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from cursebreakers.config import settings
from cursebreakers.exceptions import DatabaseError, ValidationError

logger = logging.getLogger(__name__)


def _json_serializer(value: Any) -> str:
    # Store non-ASCII hashtags and links as written, not as \u escapes
    return json.dumps(value, ensure_ascii=False)


def build_engine(url: Optional[str] = None) -> AsyncEngine:
    """
    Create an async engine for `url` (defaults to settings.database_url).

    SQLite URLs (tests, local runs) get the dialect's own pool and none of
    the sizing options.
    """
    url = url or settings.database_url
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
        "json_serializer": _json_serializer,
    }
    if not url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(url, **options)


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = build_engine()

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit; async
# sessions cannot lazy-load expired attributes
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    (used by Alembic for migrations and by the test suite's create_all).
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (services flush their changes)
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    A request therefore either persists all of its writes or none of them:
    registering a user and creating their blog happen in one transaction.

    Example usage in a route:
        @router.get("/posts")
        async def list_posts(db: AsyncSession = Depends(get_db_session)):
            return await post_service.list_posts(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise  # Re-raise so the global error handler can respond appropriately
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping_database(db_engine: AsyncEngine = engine) -> bool:
    """
    What:  Runs SELECT 1 against the database.
    When:  Startup readiness check.
    Returns True when the database answered, False otherwise (never raises).
    """
    try:
        async with db_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


async def create_all(db_engine: AsyncEngine = engine) -> None:
    """Create every table registered on Base.metadata (local runs and tests)."""
    # Models must be imported so their tables are registered on the metadata
    from cursebreakers import models  # noqa: F401

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def store_errors(operation: str, duplicate_message: str = "Resource already exists") -> AsyncIterator[None]:
    """
    Translate SQLAlchemy failures raised inside the block into app exceptions.

        IntegrityError  → ValidationError (400): a unique constraint fired
        SQLAlchemyError → DatabaseError (500): details logged, not returned

    Application exceptions raised inside the block pass through untouched.
    """
    try:
        yield
    except IntegrityError as e:
        logger.info("%s rejected by constraint: %s", operation, e.orig)
        raise ValidationError(message=duplicate_message, context={"operation": operation})
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(context={"operation": operation, "error_type": type(e).__name__})


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
