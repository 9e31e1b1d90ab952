"""
db/redis_client.py
------------------
Async Redis client wrapper with lifecycle management and a simple
distributed lock.

Usage:
    client = RedisClient("redis://localhost:6379/0")
    await client.init()
    r = client.get()
    await r.set("foo", "bar")
    await client.close()
"""

import uuid
from typing import Optional

import redis.asyncio as redis

from utils.logger import get_logger

logger = get_logger(__name__)

# Deletes the lock only if it still holds our token.
_RELEASE_SCRIPT = (
    "if redis.call('GET', KEYS[1]) == ARGV[1] then"
    " return redis.call('DEL', KEYS[1])"
    " else return 0 end"
)

# Writes KEYS[2] only while KEYS[1] still holds our lock token.
_GUARDED_SET_SCRIPT = (
    "if redis.call('GET', KEYS[1]) == ARGV[1] then"
    " redis.call('SET', KEYS[2], ARGV[2])"
    " return 1"
    " else return 0 end"
)


class RedisClient:
    """Owns one ``redis.asyncio.Redis`` connection pool."""

    def __init__(self, url: str, *, decode_responses: bool = True):
        self.url = url
        self.decode_responses = decode_responses
        self._client: Optional[redis.Redis] = None

    async def init(self) -> None:
        """
        Open the connection pool and verify the server answers.

        Raises:
            redis.RedisError: If the server is unreachable.
        """
        if self._client is not None:
            return
        self._client = redis.from_url(self.url, decode_responses=self.decode_responses)
        try:
            await self._client.ping()
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            await self.close()
            raise
        logger.info("Redis connection initialized successfully.")

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("Redis connection closed.")

    def get(self) -> redis.Redis:
        """Return the underlying client. Raises if ``init()`` was not awaited."""
        if self._client is None:
            raise RuntimeError("Redis client not initialized. Call init() first.")
        return self._client

    # ------ distributed lock helpers ------

    async def acquire_lock(self, key: str, timeout_ms: int) -> Optional[str]:
        """
        Try once to take the lock on ``key``.

        Returns:
            The token to release the lock with, or None if someone else holds it.
        """
        token = str(uuid.uuid4())
        acquired = await self.get().set(key, token, nx=True, px=timeout_ms)
        return token if acquired else None

    async def release_lock(self, key: str, token: str) -> bool:
        """Release the lock if ``token`` still owns it. Returns True if released."""
        res = await self.get().eval(_RELEASE_SCRIPT, 1, key, token)
        return res == 1

    async def set_if_locked(self, lock: str, token: str, key: str, value: str) -> bool:
        """
        Set ``key`` only if the lock on ``lock`` is still held with ``token``.

        Returns:
            False if the lock expired or changed owner; nothing is written then.
        """
        res = await self.get().eval(_GUARDED_SET_SCRIPT, 2, lock, key, token, value)
        return res == 1
