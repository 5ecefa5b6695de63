"""
Movement Service for the adventure engine.

Validates exits and moves the player between scenes. Validation never
mutates state; a traversal either advances the scene pointer together with
its score and visited flags, or changes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from src.models.command import CommandResponse
from src.models.flags import ExitScored, SceneVisited
from src.models.state import WorldState
from src.models.world import Exit, SceneDefinition, World
from src.services.flags import FlagService
from src.services.light import LightService
from src.services.scenes import SceneResolver
from src.services.score import ScoreService
from src.services.text import text
from src.services.transaction import StateTransaction

logger = logging.getLogger(__name__)

DIRECTION_ALIASES: dict[str, str] = {
    "n": "north",
    "s": "south",
    "e": "east",
    "w": "west",
    "ne": "northeast",
    "nw": "northwest",
    "se": "southeast",
    "sw": "southwest",
    "u": "up",
    "d": "down",
}

# Hook run after entering a scene; returns extra text to show, if any.
EnterHook = Callable[[SceneDefinition], str | None]


def normalize_direction(token: str) -> str:
    token = token.strip().lower()
    return DIRECTION_ALIASES.get(token, token)


@dataclass
class MovementService:
    """Exit resolution, validation and scene transitions."""

    state: WorldState
    world: World
    flags: FlagService
    light: LightService
    score: ScoreService
    scenes: SceneResolver
    on_enter: EnterHook | None = None

    def get_exit(self, token: str, scene_id: str | None = None) -> Exit | None:
        """
        Find an exit by direction, falling back to its description.

        Args:
            token: Direction ("north", "n") or words from the exit
                description ("window")
            scene_id: Scene to search (defaults to the current one)

        Returns:
            The exit, or None if nothing matches
        """
        scene = self.world.scene(scene_id or self.state.current_scene)
        wanted = normalize_direction(token)
        if not wanted:
            return None
        for exit_ in scene.exits:
            if exit_.direction.lower() == wanted:
                return exit_
        for exit_ in scene.exits:
            if exit_.description and wanted in exit_.description.lower():
                return exit_
        return None

    def can_traverse(self, exit_: Exit) -> CommandResponse | None:
        """
        Check an exit without touching state.

        Returns:
            None if the exit can be taken, else the failure response
        """
        if exit_.requires_light and not self.light.is_light_present():
            return CommandResponse.fail(text("movement.too_dark"))
        if not self.flags.evaluate(exit_.requires):
            return CommandResponse.fail(exit_.failure_message or text("movement.cant_go"))
        return None

    def available_exits(self, scene_id: str | None = None) -> list[Exit]:
        """Exits of a scene whose conditions currently hold."""
        scene = self.world.scene(scene_id or self.state.current_scene)
        return [e for e in scene.exits if self.can_traverse(e) is None]

    def traverse(self, exit_: Exit) -> CommandResponse:
        """
        Take an exit.

        Awards the exit's one-time score (guarded per target scene), marks
        the target visited and moves the player, all in one step.

        Raises:
            UnknownSceneError: If the target scene is missing from the world
        """
        failure = self.can_traverse(exit_)
        if failure is not None:
            logger.debug("Exit %s blocked: %s", exit_.direction, failure.message)
            return failure

        self.world.scene(exit_.target_scene)
        with StateTransaction(self.state):
            award = self.score.award_once(ExitScored(scene_id=exit_.target_scene), exit_.score)
            lines = [self.enter_scene(exit_.target_scene)]
            lines += self.score.announce(award)
        return CommandResponse.ok("\n".join(line for line in lines if line))

    def go(self, token: str | None) -> CommandResponse:
        if not token:
            return CommandResponse.fail(text("movement.which_way"))
        exit_ = self.get_exit(token)
        if exit_ is None:
            return CommandResponse.fail(text("movement.cant_go"))
        return self.traverse(exit_)

    def enter_scene(self, scene_id: str) -> str:
        """
        Move the player into a scene and describe it.

        The description is rendered before the visited flag is set, so a
        first visit shows the full text and later visits the short one.
        """
        scene = self.world.scene(scene_id)
        previous = self.state.current_scene
        self.state.current_scene = scene_id
        self.state.moves += 1
        self.light.recompute_light()

        description = self.scenes.describe_scene()
        self.flags.set_flag(SceneVisited(scene_id=scene_id))
        if scene_id not in self.state.visited:
            self.state.visited.append(scene_id)
        logger.info("Moved from %s to %s", previous, scene_id)

        if self.on_enter is not None:
            extra = self.on_enter(scene)
            if extra:
                description = f"{description}\n{extra}"
        return description
