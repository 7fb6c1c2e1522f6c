from typing import Optional
import logging

import redis.asyncio as aioredis
from redis import RedisError, ConnectionError as RedisConnectionError

from ..exceptions import SessionStoreError

logger = logging.getLogger(__name__)


class RedisSessionStore:
    def __init__(self, redis_client: aioredis.Redis, prefix: str = "session:", ttl_seconds: Optional[int] = None):
        """Initialize the Redis store with an async Redis client.

        Args:
            redis_client: client used for every call, shared with the rest of the app
            prefix: namespace prepended to session ids to build the Redis key
            ttl_seconds: optional expiry applied on every save
        """
        self.redis_client = redis_client
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    def _handle_redis_error(self, operation: str, session_id: str, error: Exception) -> None:
        """Centralized error handling for Redis operations."""
        masked_id = f"{session_id[:6]}..."
        if isinstance(error, RedisConnectionError):
            logger.error(f"Redis connection failed during {operation} for session {masked_id}: {error}")
            raise SessionStoreError(operation, "database connection error") from error
        elif isinstance(error, RedisError):
            logger.error(f"Redis error during {operation} for session {masked_id}: {error}")
            raise SessionStoreError(operation, "database error") from error
        else:
            logger.error(f"Unexpected error during {operation} for session {masked_id}: {error}")
            raise SessionStoreError(operation, "unexpected error") from error

    async def load(self, session_id: str) -> Optional[str]:
        try:
            payload = await self.redis_client.get(self._key(session_id))
        except Exception as e:
            self._handle_redis_error("load", session_id, e)
            raise  # Never reached, but helps type checker

        if payload is None:
            logger.debug(f"Session {session_id[:6]}... not found in Redis")
            return None
        # Clients created without decode_responses hand back bytes
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        return payload

    async def save(self, session_id: str, payload: str) -> None:
        try:
            await self.redis_client.set(self._key(session_id), payload, ex=self.ttl_seconds)
            logger.debug(f"Session {session_id[:6]}... saved successfully")
        except Exception as e:
            self._handle_redis_error("save", session_id, e)

    async def remove(self, session_id: str) -> None:
        try:
            deleted_count = await self.redis_client.delete(self._key(session_id))
        except Exception as e:
            self._handle_redis_error("remove", session_id, e)
            raise  # Never reached, but helps type checker

        if deleted_count == 0:
            logger.warning(f"Session {session_id[:6]}... was not deleted, may have expired or been removed concurrently")
        else:
            logger.debug(f"Session {session_id[:6]}... removed successfully")
