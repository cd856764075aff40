"""
Cursebreakers Backend - Middleware Package
===========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for logs, error envelopes and the
       X-Request-ID response header
    2. Logging: one access line per request, tagged with that id
    3. GZip and CORS: FastAPI's stock middleware

    Responses pass back through the chain in reverse order, so logging
    sees the final status code and duration.
"""
