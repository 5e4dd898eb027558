"""Clock port — abstract source of the current date/time.

Core modules take "now" from this protocol, never from the wall clock.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class ClockPort(Protocol):
    """Abstract clock used by the habit service and repository."""

    def now(self) -> datetime: ...
