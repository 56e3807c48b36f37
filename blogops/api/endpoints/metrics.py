"""Metrics endpoints: JSON snapshot of in-process counters and a Prometheus scrape."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from blogops.core.observability.metrics import snapshot_named, snapshot_requests

router = APIRouter()


@router.get("/api/v1/metrics/snapshot")
def metrics_snapshot():
    req = snapshot_requests()
    body = {"requests": req}
    body.update(snapshot_named())
    if "requests_total" in req:
        body["requests_total"] = req["requests_total"]
    return body


@router.get("/metrics", include_in_schema=False)
def prometheus_metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
