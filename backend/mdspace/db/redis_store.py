"""Redis implementation of MarkdownStore.

Key layout:
    md:{id}              hash with the document fields, expires with the document
    md:{id}:comments     list of JSON comments, TTL aligned to the document
    user:{owner}:files   set of document ids owned by a session
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import redis
from pydantic import ValidationError

from backend.mdspace.db.repositories import new_short_id
from backend.mdspace.errors import NotFoundError, PermissionDeniedError, QuotaExceededError
from backend.mdspace.models.markdown import Comment, Markdown

logger = logging.getLogger(__name__)


def markdown_key(markdown_id: str) -> str:
    """Redis key for a markdown document."""
    return f"md:{markdown_id}"


def comments_key(markdown_id: str) -> str:
    """Redis key for the comments of a markdown document."""
    return f"md:{markdown_id}:comments"


def user_files_key(owner_id: str) -> str:
    """Redis key for the set of files owned by a session."""
    return f"user:{owner_id}:files"


# HINCRBY would recreate an expired hash without a TTL
INCREMENT_VIEWS_SCRIPT = """
if redis.call("EXISTS", KEYS[1]) == 1 then
    return redis.call("HINCRBY", KEYS[1], "views", 1)
end
return 0
"""


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RedisMarkdownStore:
    """Redis-backed MarkdownStore using hashes, lists and sets with TTLs."""

    def __init__(
        self,
        redis_client: redis.Redis,
        *,
        ttl: timedelta = timedelta(hours=24),
        max_files_per_user: int = 10,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize store.

        Args:
            redis_client: Redis client created with decode_responses=True
            ttl: Document lifetime
            max_files_per_user: Maximum live files per session
            clock: Time source (for testing)
        """
        self._redis = redis_client
        self._ttl = ttl
        self._max_files_per_user = max_files_per_user
        self._clock = clock
        self._increment_views = redis_client.register_script(INCREMENT_VIEWS_SCRIPT)

    @classmethod
    def from_url(cls, redis_url: str, **kwargs: object) -> "RedisMarkdownStore":
        """Create a store from a redis:// URL."""
        client = redis.from_url(redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        return cls(client, **kwargs)  # type: ignore[arg-type]

    @property
    def _ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def save_markdown(self, content: str, owner_id: str) -> Markdown:
        """Store a new markdown document with TTL and record ownership."""
        count = self.count_user_files(owner_id)
        if count >= self._max_files_per_user:
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

        key = markdown_key(doc.id)
        user_key = user_files_key(owner_id)

        pipe = self._redis.pipeline()
        pipe.hset(
            key,
            mapping={
                "id": doc.id,
                "content": doc.content,
                "views": doc.views,
                "owner_id": doc.owner_id,
                "created_at": int(doc.created_at.timestamp()),
                "expires_at": int(doc.expires_at.timestamp()),
            },
        )
        pipe.expire(key, self._ttl_seconds)
        pipe.sadd(user_key, doc.id)
        pipe.expire(user_key, self._ttl_seconds)
        pipe.execute()

        return doc

    def get_markdown(self, markdown_id: str) -> Markdown | None:
        """Get markdown document by ID."""
        result = self._redis.hgetall(markdown_key(markdown_id))
        # A hash without an id is a leftover, not a document
        if not result or "id" not in result:
            return None

        return Markdown(
            id=result["id"],
            content=result.get("content", ""),
            views=int(result.get("views", 0)),
            owner_id=result.get("owner_id", ""),
            created_at=datetime.fromtimestamp(int(result.get("created_at", 0)), UTC),
            expires_at=datetime.fromtimestamp(int(result.get("expires_at", 0)), UTC),
        )

    def increment_views(self, markdown_id: str) -> int:
        """Atomically increment the view count.

        Returns:
            New view count, or 0 if the document no longer exists
        """
        return int(self._increment_views(keys=[markdown_key(markdown_id)]))

    def delete_markdown(self, markdown_id: str, owner_id: str) -> None:
        """Delete a document, its comments and its quota slot."""
        doc = self.get_markdown(markdown_id)
        if doc is None:
            raise NotFoundError("Markdown not found")

        if doc.owner_id != owner_id:
            raise PermissionDeniedError("Permission denied")

        pipe = self._redis.pipeline()
        pipe.delete(markdown_key(markdown_id))
        pipe.delete(comments_key(markdown_id))
        pipe.srem(user_files_key(owner_id), markdown_id)
        pipe.execute()

    def count_user_files(self, owner_id: str) -> int:
        """Count live files owned by a session, pruning expired ids from the set."""
        key = user_files_key(owner_id)
        markdown_ids = list(self._redis.smembers(key))
        if not markdown_ids:
            return 0

        pipe = self._redis.pipeline()
        for markdown_id in markdown_ids:
            pipe.exists(markdown_key(markdown_id))
        alive = pipe.execute()

        expired = [mid for mid, exists in zip(markdown_ids, alive, strict=True) if not exists]
        if expired:
            self._redis.srem(key, *expired)

        return len(markdown_ids) - len(expired)

    def add_comment(self, markdown_id: str, *, line: int, text: str, author: str) -> Comment:
        """Append a comment and align the list TTL with the document."""
        comment = Comment(
            id=new_short_id(),
            line=line,
            text=text,
            author=author,
            created_at=self._clock(),
        )

        key = comments_key(markdown_id)
        pipe = self._redis.pipeline()
        pipe.rpush(key, comment.model_dump_json())

        ttl = self._redis.ttl(markdown_key(markdown_id))
        if ttl > 0:
            pipe.expire(key, ttl)

        pipe.execute()
        return comment

    def list_comments(self, markdown_id: str) -> list[Comment]:
        """List comments in creation order, skipping unparseable entries."""
        results = self._redis.lrange(comments_key(markdown_id), 0, -1)

        comments: list[Comment] = []
        for data in results:
            try:
                comments.append(Comment.model_validate_json(data))
            except ValidationError:
                logger.warning(f"Skipping malformed comment on markdown_id={markdown_id}")
                continue

        return comments
