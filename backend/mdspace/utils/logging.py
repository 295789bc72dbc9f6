"""Logging setup and structured request logging."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class StructuredRequestLogger:
    """Structured logger for HTTP requests."""

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        latency_ms: float,
        session_id: str | None = None,
    ) -> None:
        """Log one handled request with structured data."""
        log_data: dict[str, Any] = {
            "method": method,
            "path": path,
            "status": status_code,
            "latency_ms": round(latency_ms, 2),
        }

        if session_id:
            log_data["session_id"] = session_id

        log_msg = f"{method} {path} {status_code} {latency_ms:.1f}ms"

        if status_code < 500:
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
