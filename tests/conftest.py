"""Shared fixtures: an in-memory stand-in for the Redis calls the bot makes."""

from typing import Optional

import pytest

from db.redis_client import _GUARDED_SET_SCRIPT, _RELEASE_SCRIPT, RedisClient
from models.player import Player
from repositories.game_repo import GameRepository
from services.game_service import GameService


class FakeRedis:
    """Implements only INCR, GET, SET (with NX/PX) and the two lock scripts."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.fail_with: Optional[Exception] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def incr(self, key: str) -> int:
        self._check()
        value = int(self.data.get(key, "0")) + 1
        self.data[key] = str(value)
        return value

    async def get(self, key: str) -> Optional[str]:
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value: str, nx: bool = False, px: Optional[int] = None):
        self._check()
        if nx and key in self.data:
            return None
        self.data[key] = value
        return True

    async def eval(self, script: str, numkeys: int, *args: str) -> int:
        self._check()
        keys, argv = args[:numkeys], args[numkeys:]
        if self.data.get(keys[0]) != argv[0]:
            return 0
        if script == _RELEASE_SCRIPT:
            del self.data[keys[0]]
        elif script == _GUARDED_SET_SCRIPT:
            self.data[keys[1]] = argv[1]
        else:
            raise NotImplementedError(script)
        return 1

    async def aclose(self) -> None:
        pass


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_client(fake_redis) -> RedisClient:
    client = RedisClient("redis://fake")
    client._client = fake_redis
    return client


@pytest.fixture
def repo(redis_client) -> GameRepository:
    return GameRepository(redis_client, lock_retry_attempts=3, lock_retry_delay=0)


@pytest.fixture
def service(repo) -> GameService:
    return GameService(repo)


@pytest.fixture
def alice() -> Player:
    return Player(id=1, username="Alice", first_name="Alice")


@pytest.fixture
def bob() -> Player:
    return Player(id=2, username="Bob", first_name="Bob")


@pytest.fixture
def carol() -> Player:
    return Player(id=3, username=None, first_name="Carol")
