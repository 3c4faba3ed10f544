"""Per-request context: request id, timing, and one access log line.

The incoming ``X-Request-ID`` is reused when it looks sane, otherwise a new
one is minted. It is bound to ``request_id_var`` for the whole request, so
every log record emitted by services while handling it carries the id.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ..core.logging_config import request_id_var

logger = logging.getLogger(__name__)

_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._\-]{1,64}$")

# Probed by load balancers every few seconds.
_QUIET_PATHS = frozenset({"/health"})


def _request_id_from(request: Request) -> str:
    incoming = request.headers.get("x-request-id", "")
    if _VALID_REQUEST_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex[:16]


class RequestContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = _request_id_from(request)
        token = request_id_var.set(rid)
        started = time.monotonic()
        try:
            response = await call_next(request)
            elapsed_ms = round((time.monotonic() - started) * 1000, 1)

            response.headers["X-Request-ID"] = rid
            response.headers["X-Response-Time"] = f"{elapsed_ms}ms"

            log = logger.debug if request.url.path in _QUIET_PATHS else logger.info
            log(
                "%s %s %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                },
            )
            return response
        finally:
            request_id_var.reset(token)
