"""Redis storage backend for session state.

Stores serialized Session records in Redis, enabling multi-instance
deployment with shared game state and native key expiry.

Requires:
- redis>=5.0
- REDIS_URL environment variable (e.g. redis://localhost:6379/0)
"""

import json
import logging
from typing import Optional

from redis.exceptions import RedisError

from passwordle.core.exceptions import (
    SessionExistsError, StoreUnavailableError, VersionConflictError
)
from passwordle.models.session import Session, deserialize_session, serialize_session

logger = logging.getLogger(__name__)

# Key prefix for session state in Redis
_KEY_PREFIX = "passwordle:session:"

# Atomic compare-and-set on the record's version field.
# Returns 1 on success, 0 on version mismatch, -1 when the key is gone.
_CHECK_AND_SET_SCRIPT = """
local current = redis.call("get", KEYS[1])
if not current then
    return -1
end
local record = cjson.decode(current)
if tonumber(record["version"]) ~= tonumber(ARGV[1]) then
    return 0
end
redis.call("set", KEYS[1], ARGV[2], "KEEPTTL")
return 1
"""

# Errors that mean the store could not be reached or answered badly
_TRANSPORT_ERRORS = (RedisError, OSError)


class RedisBackend:
    """Redis-backed session storage.

    Key schema:
        passwordle:session:{session_id} -> JSON blob of serialized Session

    Expiry is delegated to Redis (SET EX on create, KEEPTTL on update), so
    an expired session simply reads back as missing.
    """

    def __init__(self, redis_url: str, key_prefix: str = _KEY_PREFIX):
        import redis as redis_lib
        self._client = redis_lib.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        self._key_prefix = key_prefix

    def _key(self, session_id: str) -> str:
        return f"{self._key_prefix}{session_id}"

    def get(self, session_id: str) -> Optional[Session]:
        try:
            data = self._client.get(self._key(session_id))
        except _TRANSPORT_ERRORS as e:
            logger.error(f"Redis GET failed for session {session_id}: {e}")
            raise StoreUnavailableError("get", str(e)) from e
        if data is None:
            return None
        return deserialize_session(json.loads(data))

    def create(self, session_id: str, session: Session, ttl: int) -> None:
        data = json.dumps(serialize_session(session), ensure_ascii=False)
        try:
            created = self._client.set(self._key(session_id), data, nx=True, ex=ttl)
        except _TRANSPORT_ERRORS as e:
            logger.error(f"Redis SET NX failed for session {session_id}: {e}")
            raise StoreUnavailableError("create", str(e)) from e
        if not created:
            raise SessionExistsError(session_id)

    def put_if_version_matches(
        self, session_id: str, expected_version: int, session: Session
    ) -> None:
        data = json.dumps(serialize_session(session), ensure_ascii=False)
        try:
            result = self._client.eval(
                _CHECK_AND_SET_SCRIPT, 1, self._key(session_id), expected_version, data
            )
        except _TRANSPORT_ERRORS as e:
            logger.error(f"Redis check-and-set failed for session {session_id}: {e}")
            raise StoreUnavailableError("put", str(e)) from e
        if int(result) != 1:
            raise VersionConflictError(session_id, expected_version)

    def delete(self, session_id: str) -> bool:
        try:
            return self._client.delete(self._key(session_id)) > 0
        except _TRANSPORT_ERRORS as e:
            logger.error(f"Redis DELETE failed for session {session_id}: {e}")
            raise StoreUnavailableError("delete", str(e)) from e

    def ping(self) -> bool:
        """Health check, verify Redis connectivity."""
        try:
            return bool(self._client.ping())
        except _TRANSPORT_ERRORS:
            return False

    def close(self) -> None:
        try:
            self._client.close()
        except _TRANSPORT_ERRORS as e:
            logger.warning(f"Error closing Redis client: {e}")
