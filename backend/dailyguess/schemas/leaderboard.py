from __future__ import annotations
from pydantic import BaseModel


class LeaderboardRow(BaseModel):
    participant_id: str
    name: str
    unit: str
    team: str
    correct_guesses: int = 0
    total_guesses: int = 0

    @property
    def accuracy(self) -> float:
        # 0 for participants who have not guessed yet
        return self.correct_guesses / self.total_guesses if self.total_guesses else 0.0


class GroupStats(BaseModel):
    name: str
    users: int = 0
    correct_guesses: int = 0
    total_guesses: int = 0


class TeamStats(GroupStats):
    unit: str


class Leaderboard(BaseModel):
    overall: list[LeaderboardRow]
    by_unit: list[GroupStats]
    by_team: list[TeamStats]
