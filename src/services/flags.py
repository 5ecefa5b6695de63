"""
Flag Store Service for the adventure engine.

The single source of truth for every boolean fact. Other services ask this
one instead of keeping private booleans that could drift from the flags.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from src.models.condition import And, Atom, Not, Or, parse_condition
from src.models.flags import (
    GLOBAL_LIGHT,
    FlagKey,
    ObjectLocked,
    ObjectOpen,
    ObjectRevealed,
    SceneVisited,
    flag_name,
)
from src.models.state import WorldState


@dataclass
class FlagService:
    """Read and write flags on a WorldState."""

    state: WorldState

    def set_flag(self, key: FlagKey | str) -> None:
        self.state.flags.add(flag_name(key))

    def clear_flag(self, key: FlagKey | str) -> None:
        self.state.flags.discard(flag_name(key))

    def put_flag(self, key: FlagKey | str, value: bool) -> None:
        """Set or clear a flag depending on ``value``."""
        if value:
            self.set_flag(key)
        else:
            self.clear_flag(key)

    def has_flag(self, key: FlagKey | str) -> bool:
        return flag_name(key) in self.state.flags

    def evaluate(
        self,
        expr: Atom | Not | And | Or | str | Iterable[str] | None,
    ) -> bool:
        """
        Evaluate a condition against the current flags.

        Accepts a parsed expression or raw authored clauses. Pure: never
        changes any flag.
        """
        parsed = parse_condition(expr)
        return parsed.evaluate(self.has_flag)

    # --- derived predicates, always read from flags ---

    def is_open(self, object_id: str) -> bool:
        return self.has_flag(ObjectOpen(object_id=object_id))

    def is_locked(self, object_id: str) -> bool:
        return self.has_flag(ObjectLocked(object_id=object_id))

    def is_revealed(self, object_id: str) -> bool:
        return self.has_flag(ObjectRevealed(object_id=object_id))

    def is_visited(self, scene_id: str) -> bool:
        return self.has_flag(SceneVisited(scene_id=scene_id))

    def has_light(self) -> bool:
        return self.has_flag(GLOBAL_LIGHT)
