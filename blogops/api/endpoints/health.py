from __future__ import annotations

from fastapi import APIRouter
from starlette.responses import JSONResponse

from blogops.api.deps import get_settings
from blogops.core.observability.metrics import inc_named

router = APIRouter()


@router.get("/health/live")
async def live():
    inc_named("health_live")
    return {"status": "ok"}


@router.get("/api/v1/health/live")
def liveness():
    inc_named("health_live")
    return {"status": "alive"}


@router.get("/api/v1/health/ready")
def readiness():
    """Ready when the site root and its content dir exist."""
    inc_named("health_ready")
    settings = get_settings()
    problems: list[str] = []

    if not settings.root.is_dir():
        problems.append(f"missing_site_root:{settings.root}")
    if not settings.content_path.is_dir():
        problems.append(f"missing_content_dir:{settings.content_path}")

    if problems:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "problems": problems},
        )
    return {"status": "ready"}
