"""Request context for ownership and quota bookkeeping."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """Anonymous session identity of the requester.

    Used as the owner id of created documents and as the quota and rate
    limit key.
    """

    session_id: str
