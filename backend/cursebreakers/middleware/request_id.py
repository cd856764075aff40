"""
Cursebreakers Backend - Request ID Middleware
==============================================

What:  Tags every request with an id and echoes it in X-Request-ID.
How:   A client-supplied X-Request-ID is reused only when it is a short
       token of letters, digits, dots, dashes and underscores; anything
       else (empty, oversized, header-injection attempts) is replaced by a
       fresh 8-hex-char id. The id lives in a ContextVar for loggers and
       error handlers, and on request.state for route handlers.

Error envelopes carry the same id in `request_id`, so a client can quote it
and the matching log lines can be found.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(client_value: str = None) -> str:
    """The client's id when it is safe to echo and log, else a new one."""
    if client_value and _CLIENT_ID_PATTERN.fullmatch(client_value):
        return client_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        # Not reset afterwards: the outermost 500 handler runs after this
        # returns and still reads it. Each request has its own task context.
        request_id_var.set(rid)
        request.state.request_id = rid
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
