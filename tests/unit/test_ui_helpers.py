"""Unit tests for the UI API client and presentation helpers."""

import json
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from backend.mdspace.errors import ErrorKind
from ui.helpers import (
    ApiError,
    MdspaceClient,
    download_filename,
    error_from_response,
    first_line_title,
    format_relative_time,
    is_markdown_upload,
    page_title,
)

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def _client(handler: object) -> MdspaceClient:
    return MdspaceClient(
        "http://backend.test",
        "sess-123",
        transport=httpx.MockTransport(handler),  # type: ignore[arg-type]
    )


@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (400, ErrorKind.invalid_input),
        (422, ErrorKind.invalid_input),
        (403, ErrorKind.unauthorized),
        (404, ErrorKind.not_found),
        (429, ErrorKind.rate_limited),
    ],
)
def test_error_from_response_known_statuses(status: int, kind: ErrorKind) -> None:
    """Test known statuses map to their error kind and keep the server message."""
    response = httpx.Response(status, json={"error": "nope", "kind": kind.value})

    error = error_from_response(response)

    assert error.kind == kind
    assert error.message == "nope"
    assert error.status_code == status


def test_error_from_response_structured_unknown_status() -> None:
    """Test other statuses with a structured body are unknown."""
    error = error_from_response(httpx.Response(500, json={"error": "Storage unavailable"}))

    assert error.kind == ErrorKind.unknown
    assert error.message == "Storage unavailable"


def test_error_from_response_unstructured_body() -> None:
    """Test other statuses without a structured body are transport failures."""
    error = error_from_response(httpx.Response(502, text="<html>Bad Gateway</html>"))

    assert error.kind == ErrorKind.transport_failure
    assert error.message == "Request failed (502)"


def test_client_sends_session_cookie() -> None:
    """Test the session id goes out as the session cookie."""
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["cookie"] = request.headers.get("cookie", "")
        return httpx.Response(200, json={"files_count": 2, "files_limit": 10})

    stats = _client(handler).get_user_stats()

    assert "mdspace_session=sess-123" in seen["cookie"]
    assert stats.files_count == 2
    assert stats.files_limit == 10


def test_create_markdown_trims_content() -> None:
    """Test shared content is trimmed before sending."""
    sent: list[dict[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content))
        return httpx.Response(
            201,
            json={"id": "abc12345", "share_url": "http://x/view/abc12345", "expires_at": NOW.isoformat()},
        )

    result = _client(handler).create_markdown("  # Hi  \n\n")

    assert sent == [{"content": "# Hi"}]
    assert result["id"] == "abc12345"


def test_create_markdown_blank_sends_nothing() -> None:
    """Test blank content fails locally without a request."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(201, json={})

    with pytest.raises(ApiError) as exc_info:
        _client(handler).create_markdown("   \n  ")

    assert exc_info.value.kind == ErrorKind.invalid_input
    assert calls == []


def test_add_comment_blank_text_sends_nothing() -> None:
    """Test whitespace-only comment text fails locally without a request."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(201, json={})

    with pytest.raises(ApiError) as exc_info:
        _client(handler).add_comment("abc12345", line=2, text="   ")

    assert exc_info.value.kind == ErrorKind.invalid_input
    assert exc_info.value.message == "Please enter a comment"
    assert calls == []


def test_add_comment_defaults_author() -> None:
    """Test a blank author is sent as Anonymous."""
    sent: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        sent.append(body)
        return httpx.Response(201, json={"id": "c1", "created_at": NOW.isoformat(), **body})

    comment = _client(handler).add_comment("abc12345", line=2, text=" hello ", author="  ")

    assert sent == [{"line": 2, "text": "hello", "author": "Anonymous"}]
    assert comment.author == "Anonymous"
    assert comment.line == 2


def test_list_comments_parses_models() -> None:
    """Test comments come back as models in server order."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/markdown/abc12345/comments"
        return httpx.Response(
            200,
            json={
                "comments": [
                    {"id": "c1", "line": 9, "text": "a", "author": "Ann", "created_at": NOW.isoformat()},
                    {"id": "c2", "line": 1, "text": "b", "author": "Bob", "created_at": NOW.isoformat()},
                ]
            },
        )

    comments = _client(handler).list_comments("abc12345")

    assert [c.line for c in comments] == [9, 1]


def test_http_error_status_raises_api_error() -> None:
    """Test non-2xx responses raise classified errors."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": "Permission denied", "kind": "unauthorized"})

    with pytest.raises(ApiError) as exc_info:
        _client(handler).delete_markdown("abc12345")

    assert exc_info.value.kind == ErrorKind.unauthorized
    assert exc_info.value.message == "Permission denied"


def test_network_failure_is_transport_failure() -> None:
    """Test connection errors surface as transport_failure."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ApiError) as exc_info:
        _client(handler).get_markdown("abc12345")

    assert exc_info.value.kind == ErrorKind.transport_failure
    assert exc_info.value.status_code is None


def test_first_line_title_strips_heading_marks() -> None:
    """Test heading marks and spacing are dropped from the title."""
    assert first_line_title("## My Notes\nbody") == "My Notes"
    assert first_line_title("plain first line") == "plain first line"


def test_page_title_truncates() -> None:
    """Test long titles are cut to 50 characters."""
    title = page_title("# " + "x" * 80)

    assert title == "x" * 50 + " - mdspace"


def test_download_filename() -> None:
    """Test filenames are sanitized and fall back to markdown.md."""
    assert download_filename("# My Notes: v2!") == "My_Notes__v2_.md"
    assert download_filename("") == "markdown.md"
    assert download_filename("#\nbody") == "markdown.md"


@pytest.mark.parametrize(
    ("filename", "content_type", "expected"),
    [
        ("notes.md", None, True),
        ("NOTES.MARKDOWN", None, True),
        ("notes", "text/markdown", True),
        ("notes.txt", "text/plain", False),
        ("notes.md.txt", None, False),
    ],
)
def test_is_markdown_upload(filename: str, content_type: str | None, expected: bool) -> None:
    """Test upload filtering by extension or media type."""
    assert is_markdown_upload(filename, content_type) is expected


def test_format_relative_time() -> None:
    """Test relative expiry formatting."""
    assert format_relative_time(NOW + timedelta(hours=3, minutes=12), now=NOW) == "in 3h 12m"
    assert format_relative_time(NOW + timedelta(minutes=45), now=NOW) == "in 45m"
    assert format_relative_time(NOW - timedelta(seconds=1), now=NOW) == "expired"
