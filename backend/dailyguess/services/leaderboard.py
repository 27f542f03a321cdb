from __future__ import annotations
from typing import Iterable
import structlog
from dailyguess.models.challenge import Challenge
from dailyguess.models.registration import Registration
from dailyguess.schemas.leaderboard import GroupStats, Leaderboard, LeaderboardRow, TeamStats
from dailyguess.services.challenges import ChallengeStore
from dailyguess.services.registrations import RegistrationStore

log = structlog.get_logger()


def compute_leaderboard(registrations: Iterable[Registration], challenges: Iterable[Challenge]) -> Leaderboard:
    """
    Fold every guess of every challenge into per-participant counters.

    All registrants appear, including those with no guesses. Guesses whose
    participant has no registration are ignored, since they can't be placed
    in a unit or team. `overall` is sorted by correct guesses, descending;
    ties keep registration order.
    """
    rows: dict[str, LeaderboardRow] = {}
    for r in registrations:
        if r.participant_id in rows:
            continue
        rows[r.participant_id] = LeaderboardRow(participant_id=r.participant_id, name=r.name, unit=r.unit, team=r.team)

    skipped = 0
    for ch in challenges:
        for g in ch.guesses:
            row = rows.get(g.participant_id)
            if row is None:
                skipped += 1
                continue
            row.total_guesses += 1
            if g.is_correct:
                row.correct_guesses += 1
    if skipped:
        log.debug("leaderboard_unattributed_guesses", count=skipped)

    by_unit: dict[str, GroupStats] = {}
    by_team: dict[str, TeamStats] = {}
    for row in rows.values():
        u = by_unit.setdefault(row.unit, GroupStats(name=row.unit))
        t = by_team.setdefault(row.team, TeamStats(name=row.team, unit=row.unit))
        for group in (u, t):
            group.users += 1
            group.correct_guesses += row.correct_guesses
            group.total_guesses += row.total_guesses

    overall = sorted(rows.values(), key=lambda r: r.correct_guesses, reverse=True)
    return Leaderboard(overall=overall, by_unit=list(by_unit.values()), by_team=list(by_team.values()))


class LeaderboardService:
    def __init__(self, registrations: RegistrationStore, challenges: ChallengeStore):
        self.registrations = registrations
        self.challenges = challenges

    async def compute(self) -> Leaderboard:
        return compute_leaderboard(await self.registrations.list(), await self.challenges.list())
