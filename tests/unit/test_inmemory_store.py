"""Unit tests for the in-memory markdown store."""

from datetime import UTC, datetime, timedelta

import pytest

from backend.mdspace.db.inmemory import InMemoryMarkdownStore
from backend.mdspace.errors import (
    ErrorKind,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def clocked_store(clock: FakeClock) -> InMemoryMarkdownStore:
    return InMemoryMarkdownStore(ttl=timedelta(hours=24), max_files_per_user=3, clock=clock)


def test_save_and_get(clocked_store: InMemoryMarkdownStore, clock: FakeClock) -> None:
    """Test saved documents can be read back."""
    doc = clocked_store.save_markdown("# Hello", "session-a")

    fetched = clocked_store.get_markdown(doc.id)

    assert fetched is not None
    assert fetched.content == "# Hello"
    assert fetched.owner_id == "session-a"
    assert fetched.views == 0
    assert fetched.created_at == clock.now
    assert fetched.expires_at == clock.now + timedelta(hours=24)
    assert len(doc.id) == 8


def test_get_missing_returns_none(clocked_store: InMemoryMarkdownStore) -> None:
    """Test unknown ids are not found."""
    assert clocked_store.get_markdown("nope1234") is None


def test_increment_views(clocked_store: InMemoryMarkdownStore) -> None:
    """Test view counter increments per call."""
    doc = clocked_store.save_markdown("x", "session-a")

    assert clocked_store.increment_views(doc.id) == 1
    assert clocked_store.increment_views(doc.id) == 2
    assert clocked_store.get_markdown(doc.id).views == 2  # type: ignore[union-attr]


def test_documents_expire(clocked_store: InMemoryMarkdownStore, clock: FakeClock) -> None:
    """Test documents and their comments disappear after the TTL."""
    doc = clocked_store.save_markdown("x", "session-a")
    clocked_store.add_comment(doc.id, line=1, text="hi", author="Anonymous")

    clock.advance(timedelta(hours=24))

    assert clocked_store.get_markdown(doc.id) is None
    assert clocked_store.list_comments(doc.id) == []


def test_quota_per_owner(clocked_store: InMemoryMarkdownStore) -> None:
    """Test the per-session file limit and that other sessions are unaffected."""
    for _ in range(3):
        clocked_store.save_markdown("x", "session-a")

    with pytest.raises(QuotaExceededError) as exc_info:
        clocked_store.save_markdown("x", "session-a")

    assert exc_info.value.kind == ErrorKind.rate_limited
    assert exc_info.value.status_code == 429
    assert "maximum 3 files per user" in exc_info.value.message
    clocked_store.save_markdown("x", "session-b")


def test_expired_documents_release_quota(clocked_store: InMemoryMarkdownStore, clock: FakeClock) -> None:
    """Test expired files no longer count toward the limit."""
    for _ in range(3):
        clocked_store.save_markdown("x", "session-a")

    clock.advance(timedelta(hours=25))

    assert clocked_store.count_user_files("session-a") == 0
    clocked_store.save_markdown("x", "session-a")


def test_delete_by_owner(clocked_store: InMemoryMarkdownStore) -> None:
    """Test owners can delete and the quota slot is released."""
    doc = clocked_store.save_markdown("x", "session-a")
    clocked_store.add_comment(doc.id, line=1, text="hi", author="Anonymous")

    clocked_store.delete_markdown(doc.id, "session-a")

    assert clocked_store.get_markdown(doc.id) is None
    assert clocked_store.list_comments(doc.id) == []
    assert clocked_store.count_user_files("session-a") == 0


def test_delete_by_other_session_is_denied(clocked_store: InMemoryMarkdownStore) -> None:
    """Test non-owners cannot delete."""
    doc = clocked_store.save_markdown("x", "session-a")

    with pytest.raises(PermissionDeniedError):
        clocked_store.delete_markdown(doc.id, "session-b")

    assert clocked_store.get_markdown(doc.id) is not None


def test_delete_missing_is_not_found(clocked_store: InMemoryMarkdownStore) -> None:
    """Test deleting an unknown id raises NotFoundError."""
    with pytest.raises(NotFoundError):
        clocked_store.delete_markdown("nope1234", "session-a")


def test_comments_keep_creation_order(clocked_store: InMemoryMarkdownStore) -> None:
    """Test comments list in insertion order, not by line."""
    doc = clocked_store.save_markdown("a\nb\nc", "session-a")

    clocked_store.add_comment(doc.id, line=3, text="third line", author="Ann")
    clocked_store.add_comment(doc.id, line=1, text="first line", author="Bob")

    comments = clocked_store.list_comments(doc.id)

    assert [c.text for c in comments] == ["third line", "first line"]
    assert [c.line for c in comments] == [3, 1]


def test_returned_documents_are_copies(clocked_store: InMemoryMarkdownStore) -> None:
    """Test mutating a returned model does not change the stored one."""
    doc = clocked_store.save_markdown("x", "session-a")

    doc.content = "changed"

    assert clocked_store.get_markdown(doc.id).content == "x"  # type: ignore[union-attr]
