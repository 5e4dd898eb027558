"""System clock adapter — implements ClockPort with the local wall clock."""

from __future__ import annotations

from datetime import datetime


class SystemClock:
    """Local wall-clock implementation of ClockPort."""

    def now(self) -> datetime:
        return datetime.now()
