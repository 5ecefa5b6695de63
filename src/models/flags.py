"""
Typed Flag Keys for the adventure engine.

Every dynamic fact about the world (open, locked, revealed, visited, on,
dead, scored) is a boolean flag. Flags are stored by canonical string name,
but the engine never builds those names by hand: it goes through the typed
keys below, which render to the same names authored content uses
(e.g. ``mailboxOpen``, ``westOfHouse_visited``).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FlagKey(BaseModel):
    """
    Base class for all typed flag keys.

    Never instantiated directly: each subclass below carries the ids it
    needs and overrides ``name`` to render its canonical flag name.
    """

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        """Canonical flag name stored in the flag set. Subclasses must override."""
        raise NotImplementedError(f"{type(self).__name__} does not define a flag name")

    def __str__(self) -> str:
        return self.name


# =============================================================================
# Object State
# =============================================================================


class ObjectOpen(FlagKey):
    """Container, door or window is open."""

    object_id: str

    @property
    def name(self) -> str:
        return f"{self.object_id}Open"


class ObjectLocked(FlagKey):
    """Container is locked."""

    object_id: str

    @property
    def name(self) -> str:
        return f"{self.object_id}Locked"


class ObjectRevealed(FlagKey):
    """A hidden object has been revealed."""

    object_id: str

    @property
    def name(self) -> str:
        return f"{self.object_id}Revealed"


class Holding(FlagKey):
    """Player is carrying the object (``hasLeaflet``)."""

    object_id: str

    @property
    def name(self) -> str:
        return f"has{self.object_id[:1].upper()}{self.object_id[1:]}"


# =============================================================================
# Light Sources
# =============================================================================


class LightOn(FlagKey):
    """Light source is switched on."""

    object_id: str

    @property
    def name(self) -> str:
        return f"{self.object_id}On"


class LightDead(FlagKey):
    """Light source battery is exhausted (terminal)."""

    object_id: str

    @property
    def name(self) -> str:
        return f"{self.object_id}Dead"


class GlobalLight(FlagKey):
    """Derived flag: some light is present in the current scene."""

    @property
    def name(self) -> str:
        return "hasLight"


# =============================================================================
# Scenes and Scoring
# =============================================================================


class SceneVisited(FlagKey):
    """Scene has been entered at least once."""

    scene_id: str

    @property
    def name(self) -> str:
        return f"{self.scene_id}_visited"


class ScoreGuard(FlagKey):
    """One-shot guard for an (object, action) score grant."""

    object_id: str
    action: str

    @property
    def name(self) -> str:
        return f"{self.object_id}_{self.action}_scored"


class ExitScored(FlagKey):
    """One-shot guard for the score awarded on first reaching a scene."""

    scene_id: str

    @property
    def name(self) -> str:
        return f"{self.scene_id}_exit_scored"


class Custom(FlagKey):
    """Free-form authored flag (``rugMoved``, ``mailboxEmpty``)."""

    flag: str = Field(min_length=1)

    @property
    def name(self) -> str:
        return self.flag


GLOBAL_LIGHT = GlobalLight()


def flag_name(key: FlagKey | str) -> str:
    """Normalize a typed key or a raw authored name to the stored name."""
    if isinstance(key, FlagKey):
        return key.name
    return key
