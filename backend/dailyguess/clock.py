from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from typing import Callable

Clock = Callable[[], datetime]

def utcnow() -> datetime:
    return datetime.now(dt_tz.utc)
