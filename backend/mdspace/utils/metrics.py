"""Prometheus metrics for the HTTP API and document lifecycle."""

from prometheus_client import Counter, Histogram

http_request_latency_ms = Histogram(
    "http_request_latency_ms",
    "HTTP request latency in milliseconds",
    ["method", "route", "status"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000, 2500],
)

markdown_created_total = Counter(
    "markdown_created_total",
    "Total markdown documents shared",
)

markdown_deleted_total = Counter(
    "markdown_deleted_total",
    "Total markdown documents deleted by their owner",
)

comments_created_total = Counter(
    "comments_created_total",
    "Total line comments added",
)

quota_rejections_total = Counter(
    "quota_rejections_total",
    "Total write requests rejected by file quota or rate limit",
    ["reason"],
)


class PrometheusAppMetrics:
    """Prometheus-based application metrics implementation."""

    def record_latency(self, method: str, route: str, status: int, latency_ms: float) -> None:
        """Record request latency."""
        http_request_latency_ms.labels(method=method, route=route, status=str(status)).observe(
            latency_ms
        )

    def inc_markdown_created(self) -> None:
        """Increment shared document counter."""
        markdown_created_total.inc()

    def inc_markdown_deleted(self) -> None:
        """Increment deleted document counter."""
        markdown_deleted_total.inc()

    def inc_comment_created(self) -> None:
        """Increment comment counter."""
        comments_created_total.inc()

    def inc_quota_rejection(self, reason: str) -> None:
        """Increment quota rejection counter."""
        quota_rejections_total.labels(reason=reason).inc()


metrics = PrometheusAppMetrics()
