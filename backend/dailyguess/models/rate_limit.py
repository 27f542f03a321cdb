from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class RateLimitEntry(BaseModel):
    count: int = Field(ge=0, default=0)
    window_start: datetime
