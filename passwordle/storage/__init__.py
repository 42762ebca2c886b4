"""Session state storage abstraction layer.

Provides a pluggable backend interface for session persistence.

Configuration:
    SESSION_STORE_BACKEND=memory (default) | redis
    REDIS_URL=redis://localhost:6379/0 (required when backend=redis)
"""

import logging
from typing import Optional

from passwordle.core.config import Settings
from passwordle.core.exceptions import StoreUnavailableError
from passwordle.storage.backend import SessionStoreBackend
from passwordle.storage.memory import InMemoryBackend

logger = logging.getLogger(__name__)

__all__ = ["SessionStoreBackend", "InMemoryBackend", "create_backend"]


def create_backend(config: Optional[Settings] = None) -> SessionStoreBackend:
    """Create a storage backend based on configuration.

    Reads SESSION_STORE_BACKEND:
    - "memory" (default): In-memory dict storage
    - "redis": Redis-backed storage (requires REDIS_URL)

    An explicitly selected Redis store must be usable: a missing URL, a
    client that cannot be built or a failed ping raises
    StoreUnavailableError instead of degrading to process-local memory.

    Returns:
        Configured SessionStoreBackend instance
    """
    if config is None:
        config = Settings()
    backend_type = config.SESSION_STORE_BACKEND

    if backend_type == "redis":
        redis_url = config.REDIS_URL
        if not redis_url:
            logger.error("SESSION_STORE_BACKEND=redis but REDIS_URL not set")
            raise StoreUnavailableError("connect", "REDIS_URL not set")
        location = redis_url.split("@")[-1]
        try:
            from passwordle.storage.redis_backend import RedisBackend
            rb = RedisBackend(redis_url)
        except Exception as e:
            logger.error("Failed to initialize Redis backend (%s): %s", location, e)
            raise StoreUnavailableError("connect", str(e)) from e
        if not rb.ping():
            rb.close()
            logger.error("Redis ping failed (%s)", location)
            raise StoreUnavailableError("connect", "ping failed")
        logger.info("Session store backend: Redis (%s)", location)
        return rb

    if backend_type != "memory":
        logger.warning("Unknown SESSION_STORE_BACKEND=%s, using memory", backend_type)

    return InMemoryBackend()
