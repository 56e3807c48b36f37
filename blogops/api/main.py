from __future__ import annotations

from fastapi import FastAPI

from blogops.api.endpoints import content, deploy, health, metrics
from blogops.api.middleware.auth import DeployTokenMiddleware
from blogops.api.middleware.error_shaping import SafeErrorMiddleware
from blogops.api.middleware.request_context import RequestContextMiddleware

app = FastAPI(
    title="blogops",
    version="0.1.0",
)

# Starlette reverses add_middleware order: the LAST call is the OUTERMOST wrapper.
# Runtime order: SafeError -> RequestContext -> DeployToken -> handler
app.add_middleware(DeployTokenMiddleware)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(SafeErrorMiddleware)

app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(content.router)
app.include_router(deploy.router)
