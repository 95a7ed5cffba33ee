# sqlite_editor/middleware.py
from __future__ import annotations

import logging
from typing import Callable, Awaitable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .logging import new_request_id

log = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id to every HTTP request so log lines emitted while handling
    it can be correlated. A well-formed incoming X-Request-ID is reused; the id
    is echoed back in the same header.
    """

    def __init__(self, app, *, header: str = "X-Request-ID"):
        super().__init__(app)
        self._header = header

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        rid = new_request_id(request.headers.get(self._header))
        log.debug("%s %s", request.method, request.url.path)
        response = await call_next(request)
        response.headers[self._header] = rid
        return response
