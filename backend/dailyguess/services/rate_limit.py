from __future__ import annotations
import asyncio
from datetime import timedelta
from pydantic import ValidationError as PydanticValidationError
import structlog
from dailyguess.clock import Clock, utcnow
from dailyguess.config import settings
from dailyguess.db import KeyValueStore, RATE_LIMITS_KEY
from dailyguess.models.rate_limit import RateLimitEntry

log = structlog.get_logger()


class RateLimiter:
    """
    Attempt counter per key (usually a client address). An entry older than
    the window counts as zero; each allowed attempt restarts the window.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        max_attempts: int | None = None,
        window_seconds: int | None = None,
        clock: Clock = utcnow,
    ):
        self.kv = kv
        self.max_attempts = settings.rate_limit_max_attempts if max_attempts is None else max_attempts
        self.window = timedelta(seconds=settings.rate_limit_window_seconds if window_seconds is None else window_seconds)
        self.clock = clock
        self._lock = asyncio.Lock()

    async def _count(self, key: str) -> int:
        raw = (await self.kv.get_hash(RATE_LIMITS_KEY)).get(key)
        if not raw:
            return 0
        try:
            entry = RateLimitEntry.model_validate_json(raw)
        except PydanticValidationError:
            log.warning("rate_limit_entry_malformed", key=key)
            return 0
        if self.clock() - entry.window_start > self.window:
            return 0
        return entry.count

    async def check_and_increment(self, key: str) -> bool:
        async with self._lock:
            count = await self._count(key)
            if count >= self.max_attempts:
                log.info("rate_limited", key=key, count=count)
                return False
            entry = RateLimitEntry(count=count + 1, window_start=self.clock())
            await self.kv.set_hash_field(RATE_LIMITS_KEY, key, entry.model_dump_json())
        return True

    async def erase_all(self) -> None:
        async with self._lock:
            await self.kv.delete(RATE_LIMITS_KEY)
