"""
Light Service for the adventure engine.

Computes global illumination and runs the light-source state machine:

    off --switch on--> on --switch off--> off
                        |
                        +--battery exhausted--> dead   (terminal)

Usage accumulates only while a source is on; switching it off pauses
depletion. Every change that can affect light re-derives the ``hasLight``
flag, since movement, visibility and many preconditions read it directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from src.models.command import CommandResponse
from src.models.flags import GLOBAL_LIGHT, LightDead, LightOn
from src.models.state import WorldState
from src.models.world import ObjectDefinition, World
from src.services.flags import FlagService
from src.services.text import text

logger = logging.getLogger(__name__)

DEFAULT_BATTERY_LIFE = 100


class LightState(str, Enum):
    """States of a light source."""

    OFF = "off"
    ON = "on"
    DEAD = "dead"


@dataclass
class LightService:
    """Light-source state machine and global light resolution."""

    state: WorldState
    world: World
    flags: FlagService
    battery_life: int = DEFAULT_BATTERY_LIFE

    _sources: dict[str, ObjectDefinition] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self._sources = self.world.light_sources()

    # --- per-source state ---

    def source(self, source_id: str) -> ObjectDefinition | None:
        return self._sources.get(source_id)

    def state_of(self, source_id: str) -> LightState:
        if self.flags.has_flag(LightDead(object_id=source_id)):
            return LightState.DEAD
        if self.flags.has_flag(LightOn(object_id=source_id)):
            return LightState.ON
        return LightState.OFF

    def remaining(self, source_id: str) -> int:
        """Turns of power left for a source."""
        if self.state_of(source_id) == LightState.DEAD:
            return 0
        return max(0, self.battery_life - self.state.light_usage.get(source_id, 0))

    def battery_status(self, source_id: str) -> str:
        obj = self.source(source_id)
        name = obj.name if obj else source_id
        if self.state_of(source_id) == LightState.DEAD:
            return text("light.battery_dead", item=name)
        return text("light.battery", item=name, turns=self.remaining(source_id))

    # --- global light ---

    def compute_light(self) -> bool:
        """
        Light is present if the current scene has natural light, or a held
        light source is on and not dead.
        """
        scene = self.world.scene(self.state.current_scene)
        if scene.light:
            return True
        for item_id in self.state.inventory:
            obj = self.source(item_id)
            if obj is not None and self.state_of(item_id) == LightState.ON:
                return True
        return False

    def recompute_light(self) -> bool:
        """Re-derive and persist the global light flag."""
        lit = self.compute_light()
        self.flags.put_flag(GLOBAL_LIGHT, lit)
        return lit

    def is_light_present(self) -> bool:
        return self.flags.has_flag(GLOBAL_LIGHT)

    # --- transitions ---

    def validate_turn_on(self, source_id: str) -> CommandResponse | None:
        """Return a failure response if the source cannot be switched on."""
        obj = self.source(source_id)
        if obj is None:
            name = self.world.item(source_id).name if self.world.is_item(source_id) else source_id
            return CommandResponse.fail(text("light.not_source", item=name))
        current = self.state_of(source_id)
        if current == LightState.DEAD:
            return CommandResponse.fail(text("light.dead", item=obj.name))
        if current == LightState.ON:
            return CommandResponse.fail(text("light.already_on", item=obj.name))
        return None

    def turn_on(self, source_id: str) -> CommandResponse:
        """off -> on. Rejected for dead sources."""
        failure = self.validate_turn_on(source_id)
        if failure is not None:
            return failure
        obj = self.source(source_id)
        self.flags.set_flag(LightOn(object_id=source_id))
        self.recompute_light()
        logger.info("Light source %s switched on", source_id)
        return CommandResponse.ok(text("light.on", item=obj.name))

    def validate_turn_off(self, source_id: str) -> CommandResponse | None:
        obj = self.source(source_id)
        if obj is None:
            name = self.world.item(source_id).name if self.world.is_item(source_id) else source_id
            return CommandResponse.fail(text("light.not_source", item=name))
        if self.state_of(source_id) != LightState.ON:
            return CommandResponse.fail(text("light.already_off", item=obj.name))
        return None

    def turn_off(self, source_id: str) -> CommandResponse:
        """on -> off. Usage so far is kept."""
        failure = self.validate_turn_off(source_id)
        if failure is not None:
            return failure
        obj = self.source(source_id)
        self.flags.clear_flag(LightOn(object_id=source_id))
        self.recompute_light()
        logger.info("Light source %s switched off", source_id)
        return CommandResponse.ok(text("light.off", item=obj.name))

    def tick(self) -> list[str]:
        """
        Advance every lit source by one turn of usage.

        Returns:
            Ids of sources that died on this tick.
        """
        died: list[str] = []
        for source_id in sorted(self._sources):
            if self.state_of(source_id) != LightState.ON:
                continue
            used = self.state.light_usage.get(source_id, 0) + 1
            self.state.light_usage[source_id] = used
            if used >= self.battery_life:
                self.flags.clear_flag(LightOn(object_id=source_id))
                self.flags.set_flag(LightDead(object_id=source_id))
                died.append(source_id)
                logger.info("Light source %s died after %d turns", source_id, used)
        self.recompute_light()
        return died
