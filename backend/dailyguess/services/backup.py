from __future__ import annotations
import structlog
from dailyguess.schemas.backup import Snapshot
from dailyguess.services.challenges import ChallengeStore
from dailyguess.services.registrations import RegistrationStore

log = structlog.get_logger()

async def export_snapshot(registrations: RegistrationStore, challenges: ChallengeStore) -> Snapshot:
    return Snapshot(registrations=await registrations.list(), challenges=await challenges.list())

async def import_snapshot(registrations: RegistrationStore, challenges: ChallengeStore, snapshot: Snapshot) -> None:
    """
    Replace both collections with the snapshot's contents.
    Images are not touched; challenges keep whatever image_ref they carry.
    """
    await registrations.replace_all(snapshot.registrations)
    await challenges.replace_all(snapshot.challenges)
    log.info("snapshot_imported", registrations=len(snapshot.registrations), challenges=len(snapshot.challenges))
