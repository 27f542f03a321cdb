from __future__ import annotations
from pydantic import BaseModel, Field
from dailyguess.models.challenge import Challenge
from dailyguess.models.registration import Registration


class Snapshot(BaseModel):
    registrations: list[Registration] = Field(default_factory=list)
    challenges: list[Challenge] = Field(default_factory=list)
