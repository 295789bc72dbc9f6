"""Integration tests for line comment endpoints."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def markdown_id(client: TestClient) -> str:
    response = client.post("/api/markdown", json={"content": "# Title\nBody text"})
    assert response.status_code == 201
    value: str = response.json()["id"]
    return value


def test_add_comment_defaults_author(client: TestClient, markdown_id: str) -> None:
    """Test a comment without author is stored as Anonymous."""
    response = client.post(
        f"/api/markdown/{markdown_id}/comments", json={"line": 2, "text": "Nice"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["line"] == 2
    assert data["text"] == "Nice"
    assert data["author"] == "Anonymous"
    assert data["id"]
    assert data["created_at"]


def test_add_comment_trims_text_and_author(client: TestClient, markdown_id: str) -> None:
    """Test surrounding whitespace is dropped."""
    data = client.post(
        f"/api/markdown/{markdown_id}/comments",
        json={"line": 1, "text": "  hi  ", "author": "  Ann "},
    ).json()

    assert data["text"] == "hi"
    assert data["author"] == "Ann"


def test_any_session_can_comment(other_client: TestClient, markdown_id: str) -> None:
    """Test commenting does not require ownership."""
    response = other_client.post(
        f"/api/markdown/{markdown_id}/comments", json={"line": 1, "text": "drive-by"}
    )

    assert response.status_code == 201


def test_comment_beyond_last_line_is_accepted(client: TestClient, markdown_id: str) -> None:
    """Test line numbers are not checked against the document length."""
    response = client.post(
        f"/api/markdown/{markdown_id}/comments", json={"line": 99, "text": "far away"}
    )

    assert response.status_code == 201


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"line": 0, "text": "x"}, "Line number must be positive"),
        ({"line": -2, "text": "x"}, "Line number must be positive"),
        ({"line": 1, "text": "   "}, "Comment text cannot be empty"),
        ({"line": 1, "text": "x" * 1001}, "Comment too long (max 1000 characters)"),
    ],
)
def test_add_comment_validation(
    client: TestClient, markdown_id: str, payload: dict[str, object], message: str
) -> None:
    """Test invalid comments are rejected with a reason."""
    response = client.post(f"/api/markdown/{markdown_id}/comments", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": message, "kind": "invalid_input"}


def test_add_comment_to_unknown_document(client: TestClient) -> None:
    """Test commenting on a missing document is not found."""
    response = client.post("/api/markdown/nope1234/comments", json={"line": 1, "text": "x"})

    assert response.status_code == 404


def test_list_comments_in_creation_order(client: TestClient, markdown_id: str) -> None:
    """Test comments are listed as created, not sorted by line."""
    for line, text in [(2, "second line"), (1, "first line"), (2, "again")]:
        client.post(f"/api/markdown/{markdown_id}/comments", json={"line": line, "text": text})

    response = client.get(f"/api/markdown/{markdown_id}/comments")

    assert response.status_code == 200
    comments = response.json()["comments"]
    assert [c["text"] for c in comments] == ["second line", "first line", "again"]
    assert [c["line"] for c in comments] == [2, 1, 2]


def test_list_comments_unknown_document_is_empty(client: TestClient) -> None:
    """Test listing comments of a missing document returns an empty list."""
    response = client.get("/api/markdown/nope1234/comments")

    assert response.status_code == 200
    assert response.json() == {"comments": []}


def test_comments_removed_with_document(client: TestClient, markdown_id: str) -> None:
    """Test deleting a document drops its comments."""
    client.post(f"/api/markdown/{markdown_id}/comments", json={"line": 1, "text": "x"})

    client.delete(f"/api/markdown/{markdown_id}")

    assert client.get(f"/api/markdown/{markdown_id}/comments").json() == {"comments": []}
