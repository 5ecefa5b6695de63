"""
File-backed save repository for the adventure engine.

Each slot is one JSON document in a save directory, written with
pydantic's ``model_dump_json`` and read back with ``model_validate_json``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pydantic import ValidationError

from src.models.state import WorldSnapshot

logger = logging.getLogger(__name__)

_SLOT_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonFileSaveRepository:
    """
    JSON-file implementation of the SaveRepository interface.

    Slot names are restricted to letters, digits, ``_`` and ``-`` so they
    map directly to file names inside the save directory.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, slot: str) -> Path:
        if not _SLOT_PATTERN.match(slot):
            raise ValueError(f"Invalid slot name: {slot!r}")
        return self.directory / f"{slot}.json"

    def save(self, slot: str, snapshot: WorldSnapshot) -> None:
        """Write a snapshot to ``<directory>/<slot>.json``."""
        path = self._path(slot)
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        tmp.replace(path)
        logger.info("Saved game to %s", path)

    def load(self, slot: str) -> WorldSnapshot | None:
        """
        Read a slot.

        Raises:
            ValueError: If the file exists but is not a valid snapshot
        """
        path = self._path(slot)
        if not path.exists():
            return None
        try:
            return WorldSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise ValueError(f"Corrupt save file {path}: {e}") from e

    def delete(self, slot: str) -> bool:
        path = self._path(slot)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list_slots(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))
