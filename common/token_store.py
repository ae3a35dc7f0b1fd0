"""Redis-backed key/value store with per-key expiry, used for session tokens."""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from common.config import REDIS_HOST, REDIS_PORT
from common.exceptions import StoreUnavailableError
from common.logging_config import get_logger

logger = get_logger(__name__)


def create_redis_client(host: str = REDIS_HOST, port: int = REDIS_PORT) -> redis.Redis:
    """
    Build the asyncio Redis client shared by the token store and the job queue.
    """
    return redis.Redis(host=host, port=port, decode_responses=True)


class TokenStore:
    """
    Thin wrapper over Redis GET/SET EX/DEL.

    The liveness flag starts optimistic and follows connection events:
    every command that reaches the server marks the store alive, every
    connection or timeout failure marks it dead.
    """

    def __init__(self, client: redis.Redis):
        self._client = client
        self._alive = True

    def is_alive(self) -> bool:
        return self._alive

    def _on_connect(self) -> None:
        if not self._alive:
            logger.info("Redis connection restored")
        self._alive = True

    def _on_error(self, error: RedisError) -> None:
        if isinstance(error, (ConnectionError, TimeoutError)):
            if self._alive:
                logger.error(f"Redis connection lost: {error}")
            self._alive = False

    async def connect(self) -> bool:
        """
        Ping the server once to seed the liveness flag.

        Returns:
            True if the server answered
        """
        try:
            await self._client.ping()
        except RedisError as e:
            self._on_error(e)
            logger.warning(f"Redis ping failed: {e}")
            return False
        self._on_connect()
        logger.info("Connected to Redis")
        return True

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis connection closed")

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self._client.get(key)
        except RedisError as e:
            self._on_error(e)
            logger.error(f"Error getting value from Redis: {e}")
            raise StoreUnavailableError(f"Redis GET failed: {e}") from e
        self._on_connect()
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            self._on_error(e)
            logger.error(f"Error setting value in Redis: {e}")
            raise StoreUnavailableError(f"Redis SET failed: {e}") from e
        self._on_connect()

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as e:
            self._on_error(e)
            logger.error(f"Error deleting key in Redis: {e}")
            raise StoreUnavailableError(f"Redis DEL failed: {e}") from e
        self._on_connect()
