from __future__ import annotations
import asyncio
import uuid
from pydantic import ValidationError as PydanticValidationError
import structlog
from dailyguess.clock import Clock, utcnow
from dailyguess.db import KeyValueStore, CHALLENGES_KEY, CURRENT_CHALLENGE_KEY
from dailyguess.errors import EmptyAnswerSet, NotFound, StorageError, UnsupportedImage
from dailyguess.models.challenge import Challenge
from dailyguess.services.media import sniff_mime
from dailyguess.services.storage import BlobStore

log = structlog.get_logger()


def clean_answers(answers) -> list[str]:
    """Drop blank entries and exact repeats; the rest is kept verbatim, in order."""
    out: list[str] = []
    for a in answers or []:
        if isinstance(a, str) and a.strip() and a not in out:
            out.append(a)
    return out


class ChallengeStore:
    """
    Challenges live in a hash keyed by id. The current challenge is also
    copied under its own key; both copies are written in one linked write,
    so readers of the pointer never see a version the hash doesn't have.
    """

    def __init__(self, kv: KeyValueStore, blobs: BlobStore, *, clock: Clock = utcnow):
        self.kv = kv
        self.blobs = blobs
        self.clock = clock
        # Shared with GuessEngine: every read-modify-write of a challenge holds it
        self.lock = asyncio.Lock()

    @staticmethod
    def _decode(raw: str | None) -> Challenge | None:
        if not raw:
            return None
        try:
            return Challenge.model_validate_json(raw)
        except PydanticValidationError:
            log.warning("challenge_malformed", record=raw[:200])
            return None

    async def create(self, image: bytes, accepted_answers: list[str], question: str | None = None) -> Challenge:
        answers = clean_answers(accepted_answers)
        if not answers:
            raise EmptyAnswerSet("At least one accepted answer is required")
        mime = sniff_mime(image or b"")
        if mime is None:
            raise UnsupportedImage("Image must be a JPEG, PNG, GIF or WEBP file")
        question = (question or "").strip() or None

        image_ref = self.blobs.store(image, mime)
        ch = Challenge(
            id=str(uuid.uuid4()),
            image_ref=image_ref,
            accepted_answers=answers,
            question=question,
            guesses=[],
            created_at=self.clock(),
        )
        async with self.lock:
            try:
                await self.save(ch)
            except StorageError:
                # Nothing references the image now; erase_all would never find it
                self._discard_image(ch)
                raise
        log.info("challenge_created", challenge_id=ch.id, answers=len(answers), image_ref=image_ref)
        return ch

    def _discard_image(self, ch: Challenge) -> None:
        try:
            self.blobs.delete(ch.image_ref)
        except StorageError as e:
            log.warning("image_delete_failed", challenge_id=ch.id, image_ref=ch.image_ref, error=str(e))

    async def save(self, ch: Challenge) -> None:
        """Persist `ch` as the current challenge. Callers hold `self.lock`."""
        await self.kv.set_linked(CHALLENGES_KEY, ch.id, CURRENT_CHALLENGE_KEY, ch.model_dump_json())

    async def current(self) -> Challenge | None:
        return self._decode(await self.kv.get_string(CURRENT_CHALLENGE_KEY))

    async def get(self, challenge_id: str) -> Challenge:
        ch = self._decode((await self.kv.get_hash(CHALLENGES_KEY)).get(challenge_id))
        if ch is None:
            raise NotFound(f"Challenge {challenge_id} not found")
        return ch

    async def list(self) -> list[Challenge]:
        out = []
        for raw in (await self.kv.get_hash(CHALLENGES_KEY)).values():
            ch = self._decode(raw)
            if ch is not None:
                out.append(ch)
        return out

    async def history(self) -> list[Challenge]:
        current = await self.current()
        past = [c for c in await self.list() if current is None or c.id != current.id]
        return sorted(past, key=lambda c: c.created_at, reverse=True)

    async def replace_all(self, challenges: list[Challenge]) -> None:
        """Swap the whole collection; the newest challenge becomes current."""
        async with self.lock:
            await self.kv.delete(CHALLENGES_KEY)
            await self.kv.delete(CURRENT_CHALLENGE_KEY)
            ordered = sorted(challenges, key=lambda c: c.created_at)
            for ch in ordered[:-1]:
                await self.kv.set_hash_field(CHALLENGES_KEY, ch.id, ch.model_dump_json())
            if ordered:
                await self.save(ordered[-1])

    async def erase_all(self) -> None:
        async with self.lock:
            challenges = await self.list()
            for ch in challenges:
                self._discard_image(ch)
            await self.kv.delete(CHALLENGES_KEY)
            await self.kv.delete(CURRENT_CHALLENGE_KEY)
        log.info("challenges_erased", count=len(challenges))
