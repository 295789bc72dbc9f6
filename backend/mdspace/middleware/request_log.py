"""Request logging and latency metrics middleware."""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from backend.mdspace.utils.logging import StructuredRequestLogger
from backend.mdspace.utils.metrics import metrics

_request_logger = StructuredRequestLogger()

# Probes are neither logged nor timed
SKIP_PATHS = ("/health", "/healthz", "/metrics")


def route_label(request: Request) -> str:
    """Route template for metric labels, falling back to the raw path."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


async def request_log_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log method, path, status and latency for every request."""
    start = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - start) * 1000

    path = request.url.path
    if path not in SKIP_PATHS:
        _request_logger.log_request(
            request.method,
            path,
            response.status_code,
            latency_ms,
            session_id=getattr(request.state, "session_id", None),
        )
        metrics.record_latency(request.method, route_label(request), response.status_code, latency_ms)

    return response
