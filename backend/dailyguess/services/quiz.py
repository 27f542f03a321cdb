from __future__ import annotations
import structlog
from dailyguess.clock import Clock, utcnow
from dailyguess.config import settings
from dailyguess.db import KeyValueStore, RedisStore
from dailyguess.logging_setup import configure_logging
from dailyguess.schemas.backup import Snapshot
from dailyguess.services.backup import export_snapshot, import_snapshot
from dailyguess.services.challenges import ChallengeStore
from dailyguess.services.guesses import GuessEngine
from dailyguess.services.leaderboard import LeaderboardService
from dailyguess.services.rate_limit import RateLimiter
from dailyguess.services.registrations import RegistrationStore
from dailyguess.services.storage import BlobStore, MinioBlobStore

log = structlog.get_logger()


class QuizService:
    """Wires every component over one key-value store, one blob store and one clock."""

    def __init__(
        self,
        kv: KeyValueStore,
        blobs: BlobStore,
        *,
        clock: Clock = utcnow,
        require_approval: bool = True,
        rate_limit_max_attempts: int | None = None,
        rate_limit_window_seconds: int | None = None,
        id_options: dict | None = None,
    ):
        self.kv = kv
        self.blobs = blobs
        self.registrations = RegistrationStore(kv, clock=clock, id_options=id_options)
        self.challenges = ChallengeStore(kv, blobs, clock=clock)
        self.guesses = GuessEngine(self.challenges, self.registrations if require_approval else None, clock=clock)
        self.leaderboard = LeaderboardService(self.registrations, self.challenges)
        self.rate_limiter = RateLimiter(
            kv,
            max_attempts=rate_limit_max_attempts,
            window_seconds=rate_limit_window_seconds,
            clock=clock,
        )

    @classmethod
    def from_settings(cls, **kwargs) -> QuizService:
        configure_logging()
        log.info("quiz_service_start", env=settings.environment, version=settings.app_version)
        return cls(RedisStore(), MinioBlobStore(), **kwargs)

    async def export_snapshot(self) -> Snapshot:
        return await export_snapshot(self.registrations, self.challenges)

    async def import_snapshot(self, snapshot: Snapshot) -> None:
        await import_snapshot(self.registrations, self.challenges, snapshot)

    async def erase_all(self) -> None:
        # Not transactional: a failure part-way leaves the later collections intact
        await self.challenges.erase_all()
        await self.registrations.erase_all()
        await self.rate_limiter.erase_all()
        log.warning("all_data_erased")
