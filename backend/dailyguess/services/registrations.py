from __future__ import annotations
import asyncio
import json
from pydantic import TypeAdapter, ValidationError as PydanticValidationError
import structlog
from dailyguess.catalog import UNIT_TEAMS, validate_category
from dailyguess.clock import Clock, utcnow
from dailyguess.db import KeyValueStore, REGISTRATIONS_KEY
from dailyguess.errors import Conflict, DuplicateRegistration, NotFound, ValidationError
from dailyguess.models.registration import Decision, Registration
from dailyguess.services.participant_id import generate_unique

log = structlog.get_logger()

_registrations = TypeAdapter(list[Registration])
DECISIONS = ("approved", "rejected")


class RegistrationStore:
    """
    Participant registrations, kept as one JSON list under a single key.

    Every mutation reads the whole list, changes it and writes it back. The
    per-instance lock makes that sequence single-writer within a process;
    separate processes sharing the same Redis can still interleave.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        clock: Clock = utcnow,
        catalog: dict[str, tuple[str, ...]] | None = None,
        id_options: dict | None = None,
    ):
        self.kv = kv
        self.clock = clock
        self.catalog = UNIT_TEAMS if catalog is None else catalog
        self.id_options = id_options or {}
        self._lock = asyncio.Lock()

    async def _load(self) -> list[Registration]:
        raw = await self.kv.get_string(REGISTRATIONS_KEY)
        if not raw:
            return []
        try:
            return _registrations.validate_json(raw)
        except PydanticValidationError:
            log.warning("registrations_malformed", key=REGISTRATIONS_KEY)
        # Salvage the records that still parse
        try:
            items = json.loads(raw)
        except json.JSONDecodeError:
            return []
        out = []
        for item in items if isinstance(items, list) else []:
            try:
                out.append(Registration.model_validate(item))
            except PydanticValidationError:
                log.warning("registration_skipped", record=str(item)[:200])
        return out

    async def _save(self, regs: list[Registration]) -> None:
        await self.kv.set_string(REGISTRATIONS_KEY, _registrations.dump_json(regs).decode("utf-8"))

    async def submit(self, name: str, unit: str, team: str) -> Registration:
        name, unit, team = (name or "").strip(), (unit or "").strip(), (team or "").strip()
        if not name or not unit or not team:
            raise ValidationError("name, unit and team are required")
        validate_category(unit, team, self.catalog)

        async with self._lock:
            regs = await self._load()
            if any(r.same_identity(name, unit, team) for r in regs):
                log.info("registration_duplicate", unit=unit, team=team)
                raise DuplicateRegistration("A participant with this name, unit and team is already registered")
            pid = await generate_unique(name, unit, team, {r.participant_id for r in regs}, **self.id_options)
            reg = Registration(participant_id=pid, name=name, unit=unit, team=team, status="pending", timestamp=self.clock())
            regs.append(reg)
            await self._save(regs)

        log.info("registration_submitted", participant_id=pid, unit=unit, team=team)
        return reg

    async def list(self) -> list[Registration]:
        return await self._load()

    async def get(self, participant_id: str) -> Registration:
        for r in await self._load():
            if r.participant_id == participant_id:
                return r
        raise NotFound(f"Registration {participant_id} not found")

    async def update_status(self, participant_id: str, status: Decision) -> Registration:
        """Decide a pending registration. A decided one raises Conflict."""
        if status not in DECISIONS:
            raise ValidationError(f"status must be one of {', '.join(DECISIONS)}")
        async with self._lock:
            regs = await self._load()
            for r in regs:
                if r.participant_id == participant_id:
                    if r.status != "pending":
                        raise Conflict(f"Registration {participant_id} is already {r.status}")
                    r.status = status
                    await self._save(regs)
                    log.info("registration_status_updated", participant_id=participant_id, status=status)
                    return r
        raise NotFound(f"Registration {participant_id} not found")

    async def is_approved(self, participant_id: str) -> bool:
        try:
            reg = await self.get(participant_id)
        except NotFound:
            return False
        return reg.status == "approved"

    async def replace_all(self, regs: list[Registration]) -> None:
        async with self._lock:
            await self._save(list(regs))

    async def erase_all(self) -> None:
        async with self._lock:
            await self.kv.delete(REGISTRATIONS_KEY)
        log.info("registrations_erased")
