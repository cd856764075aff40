"""
Cursebreakers Backend - Application Package
============================================

What: The blogging platform API (users, blogs, posts, comments, search).
Who:  Imported by uvicorn (`cursebreakers.main:app`), Alembic and pytest.

Architecture Note:
    The backend is split into layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership, uniqueness, validation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes translate HTTP into service calls, services raise the exceptions
    in `cursebreakers.exceptions`, and the handlers registered in
    `cursebreakers.main` turn those into JSON error envelopes.
"""

__version__ = "1.0.0"
