from __future__ import annotations
from dailyguess.errors import InvalidCategory

# unit -> teams; team names are unique across units
UNIT_TEAMS: dict[str, tuple[str, ...]] = {
    "Habesor": ("Team 1", "Team 2", "Team 3"),
    "Ramon": ("Team 4", "Team 5", "Team 6"),
    "Tamar": ("Team 7", "Team 8", "Team 9"),
    "Tzin": ("Team 10", "Team 11", "Team 12"),
    "Paran": ("Team 13", "Team 14", "Team 15"),
}

def units() -> list[str]:
    return list(UNIT_TEAMS)

def teams_for(unit: str) -> list[str]:
    return list(UNIT_TEAMS.get(unit, ()))

def validate_category(unit: str, team: str, catalog: dict[str, tuple[str, ...]] | None = None) -> None:
    catalog = UNIT_TEAMS if catalog is None else catalog
    if unit not in catalog:
        raise InvalidCategory(f"Unknown unit: {unit!r}")
    if team not in catalog[unit]:
        raise InvalidCategory(f"Team {team!r} does not belong to unit {unit!r}")
