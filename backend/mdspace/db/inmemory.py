"""In-memory implementations of repository interfaces."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from backend.mdspace.db.repositories import RetryAfter, new_short_id
from backend.mdspace.errors import NotFoundError, PermissionDeniedError, QuotaExceededError
from backend.mdspace.models.markdown import Comment, Markdown


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemoryMarkdownStore:
    """In-memory implementation of MarkdownStore.

    Applies the same expiry and quota rules as the Redis store, driven by an
    injectable clock.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = timedelta(hours=24),
        max_files_per_user: int = 10,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = ttl
        self._max_files_per_user = max_files_per_user
        self._clock = clock
        self._docs: dict[str, Markdown] = {}
        self._comments: dict[str, list[Comment]] = {}
        self._user_files: dict[str, set[str]] = {}

    def _live(self, markdown_id: str) -> Markdown | None:
        """Get a document, dropping it if it has expired."""
        doc = self._docs.get(markdown_id)
        if doc is None:
            return None

        if self._clock() >= doc.expires_at:
            del self._docs[markdown_id]
            self._comments.pop(markdown_id, None)
            return None

        return doc

    def save_markdown(self, content: str, owner_id: str) -> Markdown:
        """Store a new markdown document."""
        if self.count_user_files(owner_id) >= self._max_files_per_user:
            raise QuotaExceededError(
                f"Rate limit exceeded: maximum {self._max_files_per_user} files per user"
            )

        now = self._clock()
        doc = Markdown(
            id=new_short_id(),
            content=content,
            views=0,
            owner_id=owner_id,
            created_at=now,
            expires_at=now + self._ttl,
        )

        self._docs[doc.id] = doc
        self._user_files.setdefault(owner_id, set()).add(doc.id)
        return doc.model_copy()

    def get_markdown(self, markdown_id: str) -> Markdown | None:
        """Get markdown document by ID."""
        doc = self._live(markdown_id)
        if doc is None:
            return None
        return doc.model_copy()

    def increment_views(self, markdown_id: str) -> int:
        """Increment the view count."""
        doc = self._live(markdown_id)
        if doc is None:
            return 0

        doc.views += 1
        return doc.views

    def delete_markdown(self, markdown_id: str, owner_id: str) -> None:
        """Delete a document owned by owner_id."""
        doc = self._live(markdown_id)
        if doc is None:
            raise NotFoundError("Markdown not found")

        if doc.owner_id != owner_id:
            raise PermissionDeniedError("Permission denied")

        del self._docs[markdown_id]
        self._comments.pop(markdown_id, None)
        self._user_files.get(owner_id, set()).discard(markdown_id)

    def count_user_files(self, owner_id: str) -> int:
        """Count live files owned by a session."""
        files = self._user_files.get(owner_id)
        if not files:
            return 0

        # Expired documents release their slot
        for markdown_id in list(files):
            if self._live(markdown_id) is None:
                files.discard(markdown_id)

        return len(files)

    def add_comment(self, markdown_id: str, *, line: int, text: str, author: str) -> Comment:
        """Append a comment to a document."""
        comment = Comment(
            id=new_short_id(),
            line=line,
            text=text,
            author=author,
            created_at=self._clock(),
        )
        self._comments.setdefault(markdown_id, []).append(comment)
        return comment

    def list_comments(self, markdown_id: str) -> list[Comment]:
        """List comments in creation order."""
        if self._live(markdown_id) is None:
            return []
        return list(self._comments.get(markdown_id, []))


class InMemoryRateLimiter:
    """In-memory implementation of RateLimiter using fixed window."""

    def __init__(self, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._windows: dict[str, tuple[datetime, int]] = {}

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Count one request and report whether it is over quota."""
        window = timedelta(seconds=self._window_seconds)
        self._evict_expired(now, window)

        window_start, count = self._windows.get(key, (now, 0))
        if count >= self._max_requests:
            seconds_remaining = int((window_start + window - now).total_seconds())
            return RetryAfter(seconds=max(1, seconds_remaining))

        self._windows[key] = (window_start, count + 1)
        return None

    def _evict_expired(self, now: datetime, window: timedelta) -> None:
        """Forget windows that have closed so idle sessions do not accumulate."""
        expired = [key for key, (start, _) in self._windows.items() if now >= start + window]
        for key in expired:
            del self._windows[key]
