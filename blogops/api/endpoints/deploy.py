from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import BaseModel
from starlette.responses import JSONResponse

from blogops.api.deps import get_settings
from blogops.core.deploy.pipeline import deploy_exclusive, site_status
from blogops.core.errors import BlogOpsError, DeployError, DeployInProgressError
from blogops.core.observability.audit import read_audit

router = APIRouter(prefix="/api/v1", tags=["Deploy"])


class DeployRequest(BaseModel):
    message: Optional[str] = None
    push: bool = True


@router.post("/deploy")
def deploy_site(payload: Optional[DeployRequest] = Body(None)):
    payload = payload or DeployRequest()
    settings = get_settings()
    try:
        report = deploy_exclusive(settings, message=payload.message, push=payload.push)
    except DeployInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except DeployError as e:
        body = {"detail": str(e)}
        if e.report is not None:
            body["report"] = e.report.model_dump()
        return JSONResponse(status_code=502, content=body)
    return {"ok": True, "report": report.model_dump()}


@router.get("/deploys")
def deploys_recent(limit: int = Query(20, ge=1, le=500)):
    rows = read_audit(get_settings().audit_path, limit=0)
    deploys = [r for r in rows if r.get("event") == "deploy"]
    return {"deploys": deploys[-limit:]}


@router.get("/status")
def status():
    try:
        return site_status(get_settings())
    except BlogOpsError as e:
        raise HTTPException(status_code=400, detail=str(e))
