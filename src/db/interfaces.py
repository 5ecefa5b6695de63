"""
Save storage interface definitions for the adventure engine.

Uses Protocol classes to define the contract for storing game snapshots.
Implementations can keep saves in memory (tests) or on disk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.models.state import WorldSnapshot


class SaveRepository(Protocol):
    """
    Interface for saved games.

    A slot holds one WorldSnapshot. Saving to an existing slot replaces it.
    """

    def save(self, slot: str, snapshot: WorldSnapshot) -> None:
        """Store a snapshot under a slot name."""
        ...

    def load(self, slot: str) -> WorldSnapshot | None:
        """Get the snapshot in a slot, or None if the slot is empty."""
        ...

    def delete(self, slot: str) -> bool:
        """Remove a slot. Returns False if there was nothing to remove."""
        ...

    def list_slots(self) -> list[str]:
        """Names of all occupied slots, sorted."""
        ...
