from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class Guess(BaseModel):
    participant_id: str
    participant_name: str
    text: str
    timestamp: datetime
    is_correct: bool


class Challenge(BaseModel):
    id: str
    image_ref: str
    accepted_answers: list[str] = Field(min_length=1)
    question: str | None = None
    guesses: list[Guess] = Field(default_factory=list)
    created_at: datetime

    def guess_for(self, participant_id: str) -> Guess | None:
        for g in self.guesses:
            if g.participant_id == participant_id:
                return g
        return None
