from __future__ import annotations
import asyncio
import hashlib
import secrets
import time
from typing import Container
import structlog
from dailyguess.config import settings

log = structlog.get_logger()

def generate(name: str, unit: str, team: str, *, prefix: str | None = None, length: int | None = None) -> str:
    # name is left out of the digest so the id can't be derived from public info
    prefix = settings.participant_id_prefix if prefix is None else prefix
    length = settings.participant_id_length if length is None else length
    seed = f"{unit}|{team}|{time.time_ns()}".encode("utf-8")
    token = hashlib.sha256(seed).hexdigest()[:length].upper()
    return f"{prefix}-{token}" if prefix else token

async def generate_unique(
    name: str,
    unit: str,
    team: str,
    existing: Container[str],
    *,
    max_attempts: int | None = None,
    retry_delay_ms: int | None = None,
    prefix: str | None = None,
    length: int | None = None,
) -> str:
    """
    Generate a participant id not present in `existing`.

    Retries up to `max_attempts` times, sleeping between attempts so the
    timestamp-derived digest changes. If every attempt collides, a random
    suffix is appended until the id is free, so this always terminates.
    """
    max_attempts = settings.participant_id_max_attempts if max_attempts is None else max_attempts
    delay = (settings.participant_id_retry_delay_ms if retry_delay_ms is None else retry_delay_ms) / 1000
    candidate = ""
    for attempt in range(max(1, max_attempts)):
        if attempt:
            await asyncio.sleep(delay)
        candidate = generate(name, unit, team, prefix=prefix, length=length)
        if candidate not in existing:
            return candidate
    log.warning("participant_id_collisions", attempts=max_attempts)
    while True:
        suffixed = f"{candidate}-{secrets.token_hex(2).upper()}"
        if suffixed not in existing:
            return suffixed
