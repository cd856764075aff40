"""
Cursebreakers Backend - Services Layer
=======================================

What:  Business logic between routes (HTTP) and the database.
How:   Services take an AsyncSession plus plain values or request schemas,
       apply the rules, flush, and return response schemas. They raise
       app exceptions; the request's session dependency commits or rolls
       back.

Service Inventory:
    - AuthService:  registration, login, token verification
    - BlogService:  blog listing and lookup, profile updates
    - PostService:  post CRUD, comments, keyword search
"""
