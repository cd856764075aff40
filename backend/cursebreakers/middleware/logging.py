"""
Cursebreakers Backend - Request Logging Middleware
===================================================

What:  One access-log line for every HTTP request.
How:   Times the downstream call and logs method, path, status, duration,
       request id and client address. A request that escapes every
       exception handler is still logged, as a 500, before it propagates.

Never logged: request bodies (they carry passwords), query strings (they
carry search keywords) and the Authorization header.
"""

import logging
import time
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from cursebreakers.middleware.request_id import request_id_var

logger = logging.getLogger("cursebreakers.access")

# Polled every few seconds by monitors
DEFAULT_QUIET_PATHS = ("/health",)


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, quiet_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.quiet_paths = frozenset(DEFAULT_QUIET_PATHS if quiet_paths is None else quiet_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.quiet_paths:
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, started)
            raise
        self._log(request, response.status_code, started)
        return response

    def _log(self, request: Request, status: int, started: float) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
        )
