from __future__ import annotations

import hmac
import logging
import os
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

log = logging.getLogger("blogops.auth")

_MUTATING = {"POST", "PUT", "PATCH", "DELETE"}


def configured_token() -> Optional[str]:
    token = (os.getenv("BLOGOPS_DEPLOY_TOKEN") or "").strip()
    return token or None


class DeployTokenMiddleware(BaseHTTPMiddleware):
    """
    Mutating /api/ calls need ``Authorization: Bearer <BLOGOPS_DEPLOY_TOKEN>``
    when that variable is set. Read-only calls are always open.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method.upper() not in _MUTATING or not request.url.path.startswith("/api/"):
            return await call_next(request)

        expected = configured_token()
        if expected is None:
            return await call_next(request)

        header = request.headers.get("authorization") or ""
        scheme, _, supplied = header.partition(" ")
        if scheme.lower() != "bearer" or not hmac.compare_digest(supplied.strip(), expected):
            log.warning("Rejected %s %s: bad or missing deploy token", request.method, request.url.path)
            return JSONResponse(status_code=401, content={"detail": "Unauthorized"})

        return await call_next(request)
