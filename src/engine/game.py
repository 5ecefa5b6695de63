"""
Game Engine for the adventure engine.

The engine owns the single WorldState. Callers hand it tokenized commands
and read state back through properties and snapshots; nothing outside the
engine and its services mutates the state directly.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from src.engine.models import EngineConfig
from src.models.command import Command, CommandResponse
from src.models.flags import (
    GLOBAL_LIGHT,
    ExitScored,
    FlagKey,
    Holding,
    LightDead,
    LightOn,
    ObjectLocked,
    ObjectOpen,
    ObjectRevealed,
    SceneVisited,
)
from src.models.state import WorldSnapshot, WorldState, create_initial_state
from src.models.world import World, WorldIntegrityError
from src.services.containers import ContainerService
from src.services.dispatcher import InteractionDispatcher
from src.services.flags import FlagService
from src.services.light import LightService
from src.services.movement import MovementService
from src.services.scenes import ResolvedScene, SceneResolver
from src.services.score import ScoreService
from src.services.text import text
from src.services.transaction import StateTransaction

logger = logging.getLogger(__name__)


@dataclass
class GameEngine:
    """
    Main game engine.

    Coordinates:
    - Command dispatch (authored interactions and built-in verbs)
    - Turn progression (turn counter, light depletion)
    - State export and import at the persistence boundary
    """

    world: World
    config: EngineConfig = field(default_factory=EngineConfig)

    # Components (initialized in __post_init__)
    flags: FlagService = field(init=False)
    light: LightService = field(init=False)
    containers: ContainerService = field(init=False)
    scenes: SceneResolver = field(init=False)
    score: ScoreService = field(init=False)
    movement: MovementService = field(init=False)
    dispatcher: InteractionDispatcher = field(init=False)

    _state: WorldState = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Create the starting state and wire the services to it."""
        self._state = create_initial_state(self.world, self.config.starting_scene)
        self.flags = FlagService(self._state)
        self.light = LightService(
            self._state, self.world, self.flags, battery_life=self.config.battery_life
        )
        self.containers = ContainerService(
            self._state,
            self.world,
            self.flags,
            self.light,
            max_weight=self.config.max_inventory_weight,
        )
        self.scenes = SceneResolver(self._state, self.world, self.flags, self.light, self.containers)
        self.score = ScoreService(
            self._state,
            self.world,
            self.flags,
            achievements=list(self.config.achievements),
            trophy_container_id=self._trophy_container(),
        )
        self.movement = MovementService(
            self._state, self.world, self.flags, self.light, self.score, self.scenes
        )
        self.dispatcher = InteractionDispatcher(
            self._state,
            self.world,
            self.flags,
            self.light,
            self.containers,
            self.scenes,
            self.movement,
            self.score,
        )
        self.light.recompute_light()
        logger.info("New game started in %s", self._state.current_scene)

    def _trophy_container(self) -> str | None:
        container_id = self.config.trophy_container_id
        if container_id is not None and container_id not in self.world.containers():
            logger.info("No trophy container %s in this world; victory disabled", container_id)
            return None
        return container_id

    # =========================================================================
    # Commands
    # =========================================================================

    def execute(self, command: Command | Mapping[str, Any]) -> CommandResponse:
        """
        Execute one tokenized command.

        Args:
            command: A Command, or a mapping with ``verb``/``object``/
                ``target``/``preposition`` keys

        Returns:
            CommandResponse. Successful turn-consuming commands also advance
            the turn counter and drain lit light sources.

        Raises:
            WorldIntegrityError: If authored content references something
                missing. The state is left as it was before the command.
        """
        if not isinstance(command, Command):
            command = Command.model_validate(command)

        with StateTransaction(self._state):
            response = self.dispatcher.dispatch(command)
            if response.increment_turn:
                extra = self._advance_turn()
                if extra:
                    message = "\n".join([response.message, *extra])
                    response = response.model_copy(update={"message": message})
        return response

    def _advance_turn(self) -> list[str]:
        self._state.turns += 1
        lines = []
        for source_id in self.light.tick():
            if source_id in self._state.inventory:
                lines.append(text("light.died", item=self.world.item(source_id).name))
                if not self.light.is_light_present():
                    lines.append(text("scene.dark"))
        return lines

    def describe(self) -> str:
        """Text of the current scene, as ``look`` would show it."""
        return self.scenes.describe_scene()

    def resolve_scene(self, scene_id: str | None = None) -> ResolvedScene:
        return self.scenes.resolve_scene(scene_id)

    # =========================================================================
    # Read-only State
    # =========================================================================

    @property
    def current_scene(self) -> str:
        return self._state.current_scene

    @property
    def score_total(self) -> int:
        return self._state.score

    @property
    def turns(self) -> int:
        return self._state.turns

    @property
    def inventory(self) -> tuple[str, ...]:
        return tuple(self._state.inventory)

    @property
    def flag_names(self) -> frozenset[str]:
        return frozenset(self._state.flags)

    @property
    def trophies(self) -> tuple[str, ...]:
        return tuple(self._state.trophies)

    @property
    def is_won(self) -> bool:
        return self._state.game_won

    @property
    def state(self) -> WorldState:
        """A detached copy of the state; changing it has no effect on the game."""
        return self._state.copy_deep()

    def has_flag(self, key: FlagKey | str) -> bool:
        return self.flags.has_flag(key)

    # =========================================================================
    # Persistence Boundary
    # =========================================================================

    def export_state(self) -> WorldSnapshot:
        """Flat, serializable copy of the current state."""
        return WorldSnapshot.from_state(self._state)

    def import_state(self, snapshot: WorldSnapshot | Mapping[str, Any]) -> None:
        """
        Replace the current state with a snapshot.

        Every id in the snapshot is checked against the world graph and the
        item location invariant is verified before anything is replaced.
        Flags that this world never uses are dropped with a warning.

        Raises:
            WorldIntegrityError: If the snapshot is malformed, names unknown
                scenes, items or containers, or places an item twice
        """
        if not isinstance(snapshot, WorldSnapshot):
            try:
                snapshot = WorldSnapshot.model_validate(snapshot)
            except ValidationError as e:
                raise WorldIntegrityError(f"Malformed snapshot: {e}") from e

        incoming = snapshot.to_state()
        self._check_snapshot(incoming)
        for scene_id in self.world.scenes:
            incoming.scene_items.setdefault(scene_id, [])

        known = self._known_flags()
        unknown = sorted(name for name in incoming.flags if not self._is_known_flag(name, known))
        if unknown:
            logger.warning("Dropping %d unknown flags from snapshot: %s", len(unknown), ", ".join(unknown))
            incoming.flags -= set(unknown)

        for name in WorldState.model_fields:
            setattr(self._state, name, getattr(incoming, name))
        self.light.recompute_light()
        logger.info("Imported state at %s (score %d)", self._state.current_scene, self._state.score)

    def _check_snapshot(self, incoming: WorldState) -> None:
        world = self.world
        for scene_id in [incoming.current_scene, *incoming.visited, *incoming.scene_items]:
            world.scene(scene_id)

        containers = world.containers()
        for container_id in incoming.containers:
            if container_id not in containers:
                raise WorldIntegrityError(f"Snapshot names unknown container {container_id}")
        located = [
            *incoming.inventory,
            *incoming.consumed,
            *(i for items in incoming.containers.values() for i in items),
            *(i for items in incoming.scene_items.values() for i in items),
        ]
        for item_id in located:
            world.item(item_id)
        for source_id in incoming.light_usage:
            if self.light.source(source_id) is None:
                raise WorldIntegrityError(f"Snapshot names unknown light source {source_id}")

        checker = ContainerService(incoming, world, FlagService(incoming), self.light)
        problems = checker.check_invariants()
        if problems:
            raise WorldIntegrityError(f"Snapshot breaks item locations: {'; '.join(problems)}")

    def _known_flags(self) -> set[str]:
        known = self.world.referenced_flags() | {GLOBAL_LIGHT.name}
        for _, obj in self.world.iter_objects():
            for key in (ObjectOpen, ObjectLocked, ObjectRevealed, Holding, LightOn, LightDead):
                known.add(key(object_id=obj.id).name)
        for scene_id in self.world.scenes:
            known.add(SceneVisited(scene_id=scene_id).name)
            known.add(ExitScored(scene_id=scene_id).name)
        return known

    def _is_known_flag(self, name: str, known: set[str]) -> bool:
        if name in known:
            return True
        # Score guards are "{owner}_{action}_scored" for any object or scene.
        if name.endswith("_scored"):
            owner = name.split("_", 1)[0]
            return self.world.has_object(owner) or self.world.has_scene(owner)
        return False

