"""Error kinds and domain exceptions shared by the API and the client."""

from enum import Enum


class ErrorKind(str, Enum):
    """User-facing failure categories."""

    invalid_input = "invalid_input"
    not_found = "not_found"
    unauthorized = "unauthorized"
    rate_limited = "rate_limited"
    transport_failure = "transport_failure"
    unknown = "unknown"


class MdspaceError(Exception):
    """Base class for failures that map onto an HTTP error response."""

    kind: ErrorKind = ErrorKind.unknown
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(MdspaceError):
    """Rejected content, comment text or line number."""

    kind = ErrorKind.invalid_input
    status_code = 400


class NotFoundError(MdspaceError):
    """Document id has no live backing record (expired or deleted)."""

    kind = ErrorKind.not_found
    status_code = 404


class PermissionDeniedError(MdspaceError):
    """Destructive action attempted by a session that does not own the document."""

    kind = ErrorKind.unauthorized
    status_code = 403


class QuotaExceededError(MdspaceError):
    """Per-session file quota or write throttle exhausted."""

    kind = ErrorKind.rate_limited
    status_code = 429

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after
