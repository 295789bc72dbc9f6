"""FastAPI application - markdown sharing with line comments."""

import logging

import redis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.mdspace.api.routes.comments import router as comments_router
from backend.mdspace.api.routes.health import router as health_router
from backend.mdspace.api.routes.markdown import router as markdown_router
from backend.mdspace.api.routes.metrics import router as metrics_router
from backend.mdspace.api.routes.pages import router as pages_router
from backend.mdspace.api.routes.user import router as user_router
from backend.mdspace.config import get_settings
from backend.mdspace.errors import ErrorKind, MdspaceError, QuotaExceededError
from backend.mdspace.middleware.request_log import request_log_middleware
from backend.mdspace.middleware.session import session_middleware
from backend.mdspace.utils.logging import configure_logging

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="mdspace API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Registered last runs first: request logging wraps the session middleware
app.middleware("http")(session_middleware)
app.middleware("http")(request_log_middleware)


@app.exception_handler(MdspaceError)
async def mdspace_error_handler(request: Request, exc: MdspaceError) -> JSONResponse:
    """Render domain errors as {"error", "kind"} JSON."""
    headers = {}
    if isinstance(exc, QuotaExceededError) and exc.retry_after:
        headers["Retry-After"] = str(exc.retry_after)

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "kind": exc.kind.value},
        headers=headers,
    )


@app.exception_handler(redis.RedisError)
async def storage_error_handler(request: Request, exc: redis.RedisError) -> JSONResponse:
    """Render storage failures as 500 without leaking details."""
    logger.error(f"[{request.method} {request.url.path}] storage failure: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Storage unavailable", "kind": ErrorKind.unknown.value},
    )


# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(markdown_router)
app.include_router(comments_router)
app.include_router(user_router)
app.include_router(pages_router, tags=["pages"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "mdspace API", "version": "0.1.0"}
