"""Habit store port — abstract persistence for the habit collection.

The repository depends on this protocol, never on a specific backend.
Stores exchange JSON-compatible records; parsing them into habits is the
repository's job.
"""

from __future__ import annotations

from typing import Protocol


class CorruptPersistedState(Exception):
    """Raised when a stored habit collection cannot be decoded."""


class HabitStorePort(Protocol):
    """Abstract whole-collection storage used by HabitRepository."""

    def load(self) -> list[dict]: ...

    def save(self, records: list[dict]) -> None: ...
