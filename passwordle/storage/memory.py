"""In-memory storage backend for session state.

Sessions are kept as serialized records so every get() hands out an
independent copy, the same contract RedisBackend has. A single lock makes
the version check and the write one step.
"""

import threading
import time
from typing import Callable, Optional

from passwordle.core.exceptions import SessionExistsError, VersionConflictError
from passwordle.models.session import Session, deserialize_session, serialize_session


class InMemoryBackend:
    """Dict-based in-memory session storage with lazy TTL expiry."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._records: dict[str, dict] = {}
        self._expiry: dict[str, float] = {}
        self._lock = threading.Lock()

    def _evict_if_expired(self, session_id: str) -> None:
        """Drop an expired record. Must be called while holding self._lock."""
        expires_at = self._expiry.get(session_id)
        if expires_at is not None and self._clock() >= expires_at:
            self._records.pop(session_id, None)
            self._expiry.pop(session_id, None)

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            self._evict_if_expired(session_id)
            record = self._records.get(session_id)
            if record is None:
                return None
            return deserialize_session(record)

    def create(self, session_id: str, session: Session, ttl: int) -> None:
        with self._lock:
            self._evict_if_expired(session_id)
            if session_id in self._records:
                raise SessionExistsError(session_id)
            self._records[session_id] = serialize_session(session)
            self._expiry[session_id] = self._clock() + ttl

    def put_if_version_matches(
        self, session_id: str, expected_version: int, session: Session
    ) -> None:
        with self._lock:
            self._evict_if_expired(session_id)
            current = self._records.get(session_id)
            if current is None or current["version"] != expected_version:
                raise VersionConflictError(session_id, expected_version)
            self._records[session_id] = serialize_session(session)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            self._evict_if_expired(session_id)
            self._expiry.pop(session_id, None)
            return self._records.pop(session_id, None) is not None

    def ping(self) -> bool:
        return True

    def purge_expired(self) -> int:
        """Remove every expired record.

        Returns:
            Number of sessions removed
        """
        with self._lock:
            now = self._clock()
            expired = [sid for sid, exp in self._expiry.items() if now >= exp]
            for session_id in expired:
                self._records.pop(session_id, None)
                self._expiry.pop(session_id, None)
        return len(expired)

    def count(self) -> int:
        """Return the number of live sessions."""
        with self._lock:
            now = self._clock()
            return sum(1 for exp in self._expiry.values() if now < exp)

    def close(self) -> None:
        pass
