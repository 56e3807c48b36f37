from __future__ import annotations

import logging
import traceback
from typing import Callable, Dict, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from blogops.core.errors import BlogOpsError

log = logging.getLogger("blogops.errors")


def _error_body(exc: Exception, request_id: Optional[str]) -> Dict[str, str]:
    # blogops errors carry operator-facing messages (bad config, unreadable site);
    # anything else stays opaque
    if isinstance(exc, BlogOpsError):
        body = {"detail": str(exc), "error": type(exc).__name__}
    else:
        body = {"detail": "Internal Server Error", "error": "internal"}
    if request_id:
        body["request_id"] = request_id
    return body


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Turns uncaught exceptions into a JSON 500.

    Stack traces are logged server-side under blogops.errors and never sent to
    the client; the request id is echoed in the body and the X-Request-Id header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            rid = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
            log.error(
                "Unhandled %s on %s %s rid=%s: %s\n%s",
                type(exc).__name__,
                request.method,
                request.url.path,
                rid,
                exc,
                traceback.format_exc(),
            )
            resp = JSONResponse(status_code=500, content=_error_body(exc, rid))
            if rid:
                resp.headers["X-Request-Id"] = rid
            return resp
