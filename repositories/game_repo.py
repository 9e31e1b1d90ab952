"""
repositories/game_repo.py
--------------------------
Data access layer for games stored in Redis.

Keys:
    game_id_counter   - INCR counter handing out game ids
    game:<id>         - JSON-serialized Game
    lock:game:<id>    - short-lived per-game lock
"""

import asyncio
import json
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.exceptions import RedisError

from config import LOCK_RETRY_ATTEMPTS, LOCK_RETRY_DELAY_SECONDS, LOCK_TIMEOUT_MS
from db.redis_client import RedisClient
from models.exceptions import GameBusy, GameNotFound, StoreError
from models.game import Game
from utils.logger import get_logger

logger = get_logger(__name__)

ID_COUNTER_KEY = "game_id_counter"


def game_key(game_id: int) -> str:
    return f"game:{game_id}"


def lock_key(game_id: int) -> str:
    return f"lock:game:{game_id}"


class GameRepository:
    """Repository for loading, saving and locking games."""

    def __init__(
        self,
        client: RedisClient,
        *,
        lock_timeout_ms: int = LOCK_TIMEOUT_MS,
        lock_retry_attempts: int = LOCK_RETRY_ATTEMPTS,
        lock_retry_delay: float = LOCK_RETRY_DELAY_SECONDS,
    ):
        self.client = client
        self.lock_timeout_ms = lock_timeout_ms
        self.lock_retry_attempts = lock_retry_attempts
        self.lock_retry_delay = lock_retry_delay

    async def next_id(self) -> int:
        """Allocate a new, never repeated game id."""
        try:
            return int(await self.client.get().incr(ID_COUNTER_KEY))
        except RedisError as e:
            logger.error(f"Failed to allocate game id: {e}")
            raise StoreError("Could not allocate a game id") from e

    async def load(self, game_id: int) -> Game:
        """
        Fetch a game by id.

        Raises:
            GameNotFound: If no game is stored under that id.
            StoreError: If Redis fails or the stored value is not a game.
        """
        try:
            raw = await self.client.get().get(game_key(game_id))
        except RedisError as e:
            logger.error(f"Failed to load game {game_id}: {e}")
            raise StoreError(f"Could not load game {game_id}") from e

        if raw is None:
            raise GameNotFound(f"Game {game_id} not found")

        try:
            return Game.from_json(raw)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Corrupt game record {game_id}: {e}")
            raise StoreError(f"Stored game {game_id} is unreadable") from e

    async def save(self, game: Game, lock_token: Optional[str] = None) -> None:
        """
        Store a game. Games never expire.

        With ``lock_token`` the write only happens while that token still
        holds the game's lock, so a worker whose lock expired cannot
        overwrite moves committed after it.

        Raises:
            GameBusy: If the lock was lost before the write.
            StoreError: If Redis fails.
        """
        key = game_key(game.game_id)
        try:
            if lock_token is None:
                await self.client.get().set(key, game.to_json())
                return
            written = await self.client.set_if_locked(
                lock_key(game.game_id), lock_token, key, game.to_json()
            )
        except RedisError as e:
            logger.error(f"Failed to save game {game.game_id}: {e}")
            raise StoreError(f"Could not save game {game.game_id}") from e

        if not written:
            logger.warning(f"Lock on game {game.game_id} lost before save; move discarded")
            raise GameBusy(f"Lost the lock on game {game.game_id}")

    @asynccontextmanager
    async def lock(self, game_id: int) -> AsyncIterator[str]:
        """
        Hold the per-game lock for the duration of the block.

        Yields the lock token to pass to ``save``.

        Raises:
            GameBusy: If the lock is still taken after all retries.
            StoreError: If Redis fails while taking the lock.
        """
        key = lock_key(game_id)
        token = None
        try:
            for attempt in range(self.lock_retry_attempts):
                token = await self.client.acquire_lock(key, self.lock_timeout_ms)
                if token is not None:
                    break
                if attempt + 1 < self.lock_retry_attempts:
                    await asyncio.sleep(self.lock_retry_delay)
        except RedisError as e:
            logger.error(f"Failed to lock game {game_id}: {e}")
            raise StoreError(f"Could not lock game {game_id}") from e

        if token is None:
            logger.warning(f"Gave up waiting for lock on game {game_id}")
            raise GameBusy(f"Game {game_id} is locked")

        try:
            yield token
        finally:
            try:
                released = await self.client.release_lock(key, token)
            except RedisError as e:
                logger.error(f"Failed to release lock on game {game_id}: {e}")
            else:
                if not released:
                    logger.warning(f"Lock on game {game_id} expired before release")
