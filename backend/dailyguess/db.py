from __future__ import annotations
from typing import Protocol
import redis.asyncio as aioredis
from redis.exceptions import RedisError
import structlog
from dailyguess.config import settings
from dailyguess.errors import StorageError

log = structlog.get_logger()

# Logical keys; RedisStore prefixes them with its namespace
CURRENT_CHALLENGE_KEY = "challenge:current"
CHALLENGES_KEY = "challenges"
REGISTRATIONS_KEY = "registrations"
RATE_LIMITS_KEY = "rate_limits"


class KeyValueStore(Protocol):
    async def get_hash(self, key: str) -> dict[str, str]: ...
    async def set_hash_field(self, key: str, field: str, value: str) -> None: ...
    async def get_string(self, key: str) -> str | None: ...
    async def set_string(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def set_linked(self, hash_key: str, field: str, string_key: str, value: str) -> None:
        """Write `value` to `hash_key[field]` and to `string_key` in one atomic batch."""
        ...


class RedisStore:
    def __init__(self, client: aioredis.Redis | None = None, *, url: str | None = None, namespace: str | None = None):
        self._client = client or aioredis.from_url(url or settings.redis_url, encoding="utf-8", decode_responses=True)
        self.namespace = settings.redis_namespace if namespace is None else namespace

    def _k(self, key: str) -> str:
        return f"{self.namespace}:{key}" if self.namespace else key

    async def get_hash(self, key: str) -> dict[str, str]:
        try:
            return dict(await self._client.hgetall(self._k(key)) or {})
        except RedisError as e:
            raise StorageError(f"hgetall {key} failed: {e}") from e

    async def set_hash_field(self, key: str, field: str, value: str) -> None:
        try:
            await self._client.hset(self._k(key), field, value)
        except RedisError as e:
            raise StorageError(f"hset {key} failed: {e}") from e

    async def get_string(self, key: str) -> str | None:
        try:
            return await self._client.get(self._k(key))
        except RedisError as e:
            raise StorageError(f"get {key} failed: {e}") from e

    async def set_string(self, key: str, value: str) -> None:
        try:
            await self._client.set(self._k(key), value)
        except RedisError as e:
            raise StorageError(f"set {key} failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._k(key))
        except RedisError as e:
            raise StorageError(f"delete {key} failed: {e}") from e

    async def set_linked(self, hash_key: str, field: str, string_key: str, value: str) -> None:
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.hset(self._k(hash_key), field, value)
                pipe.set(self._k(string_key), value)
                await pipe.execute()
        except RedisError as e:
            raise StorageError(f"linked write {hash_key}/{string_key} failed: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
        log.info("redis_closed")
