"""
World State Models for the adventure engine.

WorldState is the only mutable aggregate in the game. It is owned by the
GameEngine and changed only through the services, never handed out for
direct mutation. WorldSnapshot is its flat, serializable form used at the
persistence boundary.
"""

from __future__ import annotations

from copy import deepcopy
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from src.models.flags import (
    FlagKey,
    ObjectLocked,
    ObjectOpen,
    SceneVisited,
    flag_name,
)
from src.models.world import World


class LocationKind(str, Enum):
    """Where an item can be."""

    SCENE = "scene"
    CONTAINER = "container"
    INVENTORY = "inventory"
    CONSUMED = "consumed"


class ItemLocation(BaseModel):
    """Resolved location of a single item."""

    model_config = {"frozen": True}

    kind: LocationKind
    holder_id: str | None = Field(
        default=None, description="Scene or container id (None for inventory/consumed)"
    )

    def __str__(self) -> str:
        if self.holder_id is None:
            return self.kind.value
        return f"{self.kind.value}:{self.holder_id}"


INVENTORY = ItemLocation(kind=LocationKind.INVENTORY)
CONSUMED = ItemLocation(kind=LocationKind.CONSUMED)


def in_scene(scene_id: str) -> ItemLocation:
    return ItemLocation(kind=LocationKind.SCENE, holder_id=scene_id)


def in_container(container_id: str) -> ItemLocation:
    return ItemLocation(kind=LocationKind.CONTAINER, holder_id=container_id)


# =============================================================================
# World State
# =============================================================================


class WorldState(BaseModel):
    """
    All dynamic facts about a game in progress.

    Derived predicates (open, locked, revealed, light) are not stored here
    as fields; they are flags in ``flags`` and computed on read.
    """

    current_scene: str
    flags: set[str] = Field(default_factory=set)

    # Item locations. Every tracked item appears in exactly one of these.
    inventory: list[str] = Field(default_factory=list)
    containers: dict[str, list[str]] = Field(default_factory=dict)
    scene_items: dict[str, list[str]] = Field(default_factory=dict)
    consumed: list[str] = Field(default_factory=list)

    # Progress
    score: int = 0
    turns: int = 0
    moves: int = 0
    visited: list[str] = Field(default_factory=list)
    light_usage: dict[str, int] = Field(
        default_factory=dict, description="Turns each light source has spent switched on"
    )
    trophies: list[str] = Field(default_factory=list)
    game_won: bool = False

    def has(self, key: FlagKey | str) -> bool:
        """Check a flag by typed key or raw authored name."""
        return flag_name(key) in self.flags

    def copy_deep(self) -> WorldState:
        return deepcopy(self)


def create_initial_state(world: World, starting_scene: str | None = None) -> WorldState:
    """
    Build the starting WorldState for a world.

    Seeds item locations from the authored data (container contents first,
    then each item's declaring scene), initial open/locked flags for
    containers, and marks the starting scene visited.

    Args:
        world: A validated world
        starting_scene: Override for the world's starting scene

    Returns:
        Fresh WorldState
    """
    start = starting_scene or world.starting_scene
    world.scene(start)

    state = WorldState(current_scene=start)

    contained: set[str] = set()
    for container_id, container in world.containers().items():
        state.containers[container_id] = list(container.contents)
        contained |= set(container.contents)
        if container.open:
            state.flags.add(ObjectOpen(object_id=container_id).name)
        if container.locked:
            state.flags.add(ObjectLocked(object_id=container_id).name)

    for scene_id in world.scenes:
        state.scene_items[scene_id] = []
    for scene, obj in world.iter_objects():
        if world.is_item(obj.id) and obj.id not in contained:
            if obj.id not in state.scene_items[scene.id]:
                state.scene_items[scene.id].append(obj.id)

    state.flags.add(SceneVisited(scene_id=start).name)
    state.visited.append(start)
    return state


# =============================================================================
# Snapshot
# =============================================================================


class WorldSnapshot(BaseModel):
    """
    Flat, serializable copy of a WorldState.

    Encoding and storage are the caller's business; ``model_dump_json`` is
    enough for most uses.
    """

    version: Literal[1] = 1
    current_scene: str
    flags: dict[str, bool] = Field(default_factory=dict)
    inventory: list[str] = Field(default_factory=list)
    containers: dict[str, list[str]] = Field(default_factory=dict)
    scene_items: dict[str, list[str]] = Field(default_factory=dict)
    consumed: list[str] = Field(default_factory=list)
    score: int = 0
    turns: int = Field(default=0, ge=0)
    moves: int = Field(default=0, ge=0)
    visited: list[str] = Field(default_factory=list)
    light_usage: dict[str, int] = Field(default_factory=dict)
    trophies: list[str] = Field(default_factory=list)
    game_won: bool = False

    @classmethod
    def from_state(cls, state: WorldState) -> WorldSnapshot:
        return cls(
            current_scene=state.current_scene,
            flags={name: True for name in sorted(state.flags)},
            inventory=list(state.inventory),
            containers={k: list(v) for k, v in state.containers.items()},
            scene_items={k: list(v) for k, v in state.scene_items.items()},
            consumed=list(state.consumed),
            score=state.score,
            turns=state.turns,
            moves=state.moves,
            visited=list(state.visited),
            light_usage=dict(state.light_usage),
            trophies=list(state.trophies),
            game_won=state.game_won,
        )

    def to_state(self) -> WorldState:
        return WorldState(
            current_scene=self.current_scene,
            flags={name for name, value in self.flags.items() if value},
            inventory=list(self.inventory),
            containers={k: list(v) for k, v in self.containers.items()},
            scene_items={k: list(v) for k, v in self.scene_items.items()},
            consumed=list(self.consumed),
            score=self.score,
            turns=self.turns,
            moves=self.moves,
            visited=list(self.visited),
            light_usage=dict(self.light_usage),
            trophies=list(self.trophies),
            game_won=self.game_won,
        )
