"""JSON file habit store — implements HabitStorePort.

Keeps the collection as a single JSON array on disk, the same shape the
records take on the wire. Writes go to a sibling temp file first and are
swapped in with os.replace, so a crash never leaves a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from src.ports.habit_store_port import CorruptPersistedState

logger = logging.getLogger(__name__)


class JsonFileHabitStore:
    """JSON-array-file implementation of HabitStorePort."""

    def __init__(self, path: str | None = None) -> None:
        if path is None:
            from src.config import settings
            path = settings.HABITS_JSON_PATH

        self._path = Path(path)

    def load(self) -> list[dict]:
        """Return the stored array, or [] if the file does not exist yet."""
        if not self._path.exists():
            logger.debug("No habit file at %s, starting empty", self._path)
            return []

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.error("Failed to decode %s: %s", self._path, exc)
            raise CorruptPersistedState(f"{self._path} is not valid JSON") from exc

        if not isinstance(data, list):
            raise CorruptPersistedState(f"{self._path} does not hold a JSON array")
        return data

    def save(self, records: list[dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(records, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)
        logger.info("Saved %d habits to %s", len(records), self._path)
