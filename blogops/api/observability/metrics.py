from __future__ import annotations

import re
from prometheus_client import Counter, Histogram


def normalize_path(path: str) -> str:
    """Reduce high-cardinality paths for metrics labels."""
    p = path or "/"
    p = re.sub(r"^(/api/v1/posts)/[^/]+/[^/]+$", r"\1/:section/:slug", p)
    return p


HTTP_REQUESTS_TOTAL = Counter(
    "blogops_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "blogops_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)
