"""Helper functions for UI - mdspace API client + presentation helpers."""

import re
from datetime import UTC, datetime
from typing import Any

import httpx

from backend.mdspace.errors import ErrorKind
from backend.mdspace.models.markdown import Comment, UserStats

DEFAULT_AUTHOR = "Anonymous"
SESSION_COOKIE_NAME = "mdspace_session"

# HTTP status -> error kind; anything else depends on the response body
STATUS_KINDS = {
    400: ErrorKind.invalid_input,
    422: ErrorKind.invalid_input,
    403: ErrorKind.unauthorized,
    404: ErrorKind.not_found,
    429: ErrorKind.rate_limited,
}


class ApiError(Exception):
    """Failed API call, classified for display to the user."""

    def __init__(self, kind: ErrorKind, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code


def error_from_response(response: httpx.Response) -> ApiError:
    """Classify a non-2xx response.

    Known statuses map directly. Other statuses are ``unknown`` when the
    backend sent a structured ``{"error": ...}`` body and
    ``transport_failure`` otherwise.
    """
    message: str | None = None
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and isinstance(body.get("error"), str):
        message = body["error"]

    kind = STATUS_KINDS.get(response.status_code)
    if kind is None:
        kind = ErrorKind.unknown if message else ErrorKind.transport_failure

    return ApiError(kind, message or f"Request failed ({response.status_code})", response.status_code)


class MdspaceClient:
    """Synchronous client for the mdspace API.

    Every failure surfaces as ApiError. Inputs that can never succeed are
    rejected locally before any request is sent.
    """

    def __init__(
        self,
        backend_url: str,
        session_id: str,
        *,
        cookie_name: str = SESSION_COOKIE_NAME,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            backend_url: Backend base URL (e.g. http://localhost:8000)
            session_id: Session id sent as the session cookie
            cookie_name: Session cookie name
            timeout: Request timeout in seconds
            transport: Optional httpx transport (for testing with mocks)
        """
        self._client = httpx.Client(
            base_url=backend_url,
            cookies={cookie_name: session_id},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(
                ErrorKind.transport_failure, f"Backend unreachable ({type(e).__name__})"
            ) from e

        if response.is_error:
            raise error_from_response(response)

        return response

    def create_markdown(self, content: str) -> dict[str, Any]:
        """Share content and return ``{id, share_url, expires_at}``.

        Raises:
            ApiError: invalid_input for blank content (no request sent), or any API failure
        """
        content = content.strip()
        if not content:
            raise ApiError(ErrorKind.invalid_input, "Please add some markdown content")

        result: dict[str, Any] = self._request("POST", "/api/markdown", json={"content": content}).json()
        return result

    def get_markdown(self, markdown_id: str) -> dict[str, Any]:
        """Fetch a document: ``{id, content, views, is_owner, created_at, expires_at}``."""
        result: dict[str, Any] = self._request("GET", f"/api/markdown/{markdown_id}").json()
        return result

    def delete_markdown(self, markdown_id: str) -> None:
        """Delete a document (owner only)."""
        self._request("DELETE", f"/api/markdown/{markdown_id}")

    def list_comments(self, markdown_id: str) -> list[Comment]:
        """Fetch comments in creation order."""
        data = self._request("GET", f"/api/markdown/{markdown_id}/comments").json()
        return [Comment.model_validate(c) for c in data.get("comments") or []]

    def add_comment(self, markdown_id: str, *, line: int, text: str, author: str = "") -> Comment:
        """Add a comment on a line.

        Raises:
            ApiError: invalid_input for blank text (no request sent), or any API failure
        """
        text = text.strip()
        if not text:
            raise ApiError(ErrorKind.invalid_input, "Please enter a comment")

        payload = {"line": line, "text": text, "author": author.strip() or DEFAULT_AUTHOR}
        data = self._request("POST", f"/api/markdown/{markdown_id}/comments", json=payload).json()
        return Comment.model_validate(data)

    def get_user_stats(self) -> UserStats:
        """Fetch quota usage for the current session."""
        return UserStats.model_validate(self._request("GET", "/api/user/stats").json())


# --- Presentation helpers ---

_HEADING_PREFIX = re.compile(r"^#*\s*")
_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)
_MARKDOWN_NAME = re.compile(r"\.(md|markdown)$", re.IGNORECASE)


def first_line_title(content: str) -> str:
    """First line of content without leading heading marks."""
    return _HEADING_PREFIX.sub("", content.split("\n")[0], count=1)


def page_title(content: str) -> str:
    """Browser title for a document page."""
    return f"{first_line_title(content)[:50]} - mdspace"


def download_filename(content: str) -> str:
    """Filename for downloading a document, derived from its first line."""
    stem = _NON_ALNUM.sub("_", first_line_title(content).strip()[:50])
    return f"{stem or 'markdown'}.md"


def is_markdown_upload(filename: str, content_type: str | None = None) -> bool:
    """Accept .md/.markdown files or the text/markdown media type."""
    return bool(_MARKDOWN_NAME.search(filename)) or content_type == "text/markdown"


def format_relative_time(target: datetime, now: datetime | None = None) -> str:
    """Format time remaining until target, e.g. ``in 3h 12m``.

    Args:
        target: Future timestamp (timezone-aware)
        now: Current time (for testing)

    Returns:
        ``in {h}h {m}m``, ``in {m}m`` or ``expired``
    """
    if now is None:
        now = datetime.now(UTC)

    seconds = (target - now).total_seconds()
    if seconds < 0:
        return "expired"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)

    if hours > 0:
        return f"in {hours}h {minutes}m"
    return f"in {minutes}m"
