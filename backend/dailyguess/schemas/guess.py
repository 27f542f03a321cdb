from __future__ import annotations
from pydantic import BaseModel


class GuessResult(BaseModel):
    is_correct: bool
    already_submitted: bool = False
