"""Storage backend protocol for session state.

Defines the interface the SessionManager consumes. Backends own the
durable representation of a session and must make versioned writes atomic.
"""

from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from passwordle.models.session import Session


class SessionStoreBackend(Protocol):
    """Protocol defining the storage backend interface for sessions.

    Implementations:
    - InMemoryBackend: dict-based storage for a single process
    - RedisBackend: Redis-backed storage shared by every instance
    """

    def get(self, session_id: str) -> Optional["Session"]:
        """Retrieve a fresh copy of a session. Returns None if absent or expired."""
        ...

    def create(self, session_id: str, session: "Session", ttl: int) -> None:
        """Store a new session expiring after ttl seconds.

        Raises SessionExistsError if the id is already taken.
        """
        ...

    def put_if_version_matches(
        self, session_id: str, expected_version: int, session: "Session"
    ) -> None:
        """Replace a session only if the stored version equals expected_version.

        Raises VersionConflictError otherwise, including when the record is
        gone. The remaining TTL is left untouched.
        """
        ...

    def delete(self, session_id: str) -> bool:
        """Delete a session. Returns True if the session existed."""
        ...

    def ping(self) -> bool:
        """Health check."""
        ...
