"""
In-memory implementation of the save repository for testing.

Snapshots are deep-copied on the way in and out so callers can never
change a stored save through a reference they still hold.
"""

from __future__ import annotations

import logging
from copy import deepcopy

from src.models.state import WorldSnapshot

logger = logging.getLogger(__name__)


class InMemorySaveRepository:
    """In-memory implementation of SaveRepository."""

    def __init__(self) -> None:
        self._slots: dict[str, WorldSnapshot] = {}

    def save(self, slot: str, snapshot: WorldSnapshot) -> None:
        """Store a snapshot under a slot name."""
        if not slot:
            raise ValueError("Slot name must not be empty")
        self._slots[slot] = deepcopy(snapshot)
        logger.info("Saved game to slot %s", slot)

    def load(self, slot: str) -> WorldSnapshot | None:
        """Get the snapshot in a slot, or None if the slot is empty."""
        snapshot = self._slots.get(slot)
        return deepcopy(snapshot) if snapshot is not None else None

    def delete(self, slot: str) -> bool:
        """Remove a slot."""
        return self._slots.pop(slot, None) is not None

    def list_slots(self) -> list[str]:
        """Names of all occupied slots, sorted."""
        return sorted(self._slots)
