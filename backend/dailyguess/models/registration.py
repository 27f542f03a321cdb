from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel

RegistrationStatus = Literal["pending", "approved", "rejected"]
Decision = Literal["approved", "rejected"]


class Registration(BaseModel):
    participant_id: str
    name: str
    unit: str
    team: str
    status: RegistrationStatus = "pending"
    timestamp: datetime

    def same_identity(self, name: str, unit: str, team: str) -> bool:
        return (self.name, self.unit, self.team) == (name, unit, team)
