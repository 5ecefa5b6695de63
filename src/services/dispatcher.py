"""
Interaction Dispatcher for the adventure engine.

Resolves one tokenized command against the world. Authored interactions
(an ``(object, verb)`` entry in the object's interaction table) take
precedence; otherwise the built-in verb handlers apply.

Authored interactions run through a fixed pipeline:

    precondition -> grant flags -> remove flags -> guarded score
                 -> reveal objects -> item transfers -> scene transition
                 -> message selection

A failed precondition changes nothing and costs no turn. Once effects
start, they run inside a StateTransaction and are undone together if a
transfer is refused.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from src.models.command import Command, CommandResponse
from src.models.flags import ObjectRevealed, ScoreGuard
from src.models.state import CONSUMED, INVENTORY, ItemLocation, WorldState, in_container, in_scene
from src.models.world import InteractionSpec, ObjectDefinition, SceneDefinition, World
from src.services.containers import ContainerService
from src.services.flags import FlagService
from src.services.light import LightService
from src.services.movement import MovementService
from src.services.scenes import SceneResolver
from src.services.score import ScoreAward, ScoreService
from src.services.text import text
from src.services.transaction import StateTransaction

logger = logging.getLogger(__name__)

Handler = Callable[[ObjectDefinition, Command], CommandResponse]

# Verbs that only report; they never consume a turn.
META_VERBS = frozenset({"look", "inventory", "score"})


@dataclass
class InteractionDispatcher:
    """Routes commands to authored interactions or built-in verbs."""

    state: WorldState
    world: World
    flags: FlagService
    light: LightService
    containers: ContainerService
    scenes: SceneResolver
    movement: MovementService
    score: ScoreService

    _handlers: dict[str, Handler] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self._handlers = {
            "take": self._take,
            "drop": self._drop,
            "put": self._put,
            "open": self._open,
            "close": self._close,
            "unlock": self._unlock,
            "lock": self._lock,
            "turn_on": self._turn_on,
            "turn_off": self._turn_off,
            "examine": self._examine,
            "read": self._read,
        }
        self.movement.on_enter = self._run_on_enter

    @property
    def verbs(self) -> set[str]:
        """Every verb with built-in handling."""
        return set(self._handlers) | META_VERBS | {"go"}

    # =========================================================================
    # Entry Point
    # =========================================================================

    def dispatch(self, command: Command) -> CommandResponse:
        """
        Resolve a command to a response.

        Player mistakes come back as failed responses. Content errors
        (dangling ids) are raised.
        """
        verb = command.verb.strip().lower()

        if verb == "look" and not command.object:
            return CommandResponse.ok(self.scenes.describe_scene(), increment_turn=False)
        if verb == "inventory":
            return CommandResponse.ok(self._describe_inventory(), increment_turn=False)
        if verb == "score":
            return CommandResponse.ok(self._describe_score(), increment_turn=False)
        if verb == "go":
            return self.movement.go(command.object or command.target)

        if not command.object:
            if verb in self._handlers:
                return CommandResponse.fail(text("error.what", verb=verb.replace("_", " ")))
            return CommandResponse.fail(text("error.unknown_verb", verb=verb))

        obj = self.scenes.find_object(command.object, visible_only=False)
        if obj is None:
            # Directions double as objects ("enter window", "climb tree").
            exit_ = self.movement.get_exit(command.object)
            if exit_ is not None and verb in {"enter", "climb", "walk"}:
                return self.movement.traverse(exit_)
            return CommandResponse.fail(text("error.not_found", item=command.object))

        failure = self._check_reachable(obj)
        if failure is not None:
            logger.debug("Command %r rejected: %s", str(command), failure.message)
            return failure

        spec = obj.interaction(verb)
        if spec is not None:
            return self.apply_interaction(obj, verb, spec)

        if verb == "look":
            verb = "examine"
        handler = self._handlers.get(verb)
        if handler is None:
            return CommandResponse.fail(text("error.cant_action", verb=verb, item=obj.name.lower()))
        return handler(obj, command)

    def _check_reachable(self, obj: ObjectDefinition) -> CommandResponse | None:
        """
        Fail if the player cannot reach an object.

        A closed or locked container the player can see reports itself
        before the item inside is treated as missing.
        """
        if self.scenes.is_visible(obj):
            return None
        holder = self.scenes.enclosing_container(obj)
        if holder is not None and self.scenes.is_visible(holder):
            failure = self.containers.check_access(holder.id)
            if failure is not None:
                return failure
        if obj.requires_light and not self.light.is_light_present():
            return CommandResponse.fail(text("error.too_dark"))
        return CommandResponse.fail(text("error.not_found", item=obj.name.lower()))

    # =========================================================================
    # Authored Interactions
    # =========================================================================

    def apply_interaction(
        self,
        obj: ObjectDefinition | SceneDefinition,
        verb: str,
        spec: InteractionSpec,
    ) -> CommandResponse:
        """
        Run an authored interaction through the effect pipeline.

        Args:
            obj: Object (or scene, for on-enter effects) that owns the entry
            verb: Verb that selected the entry; part of the score guard
            spec: The interaction entry

        Returns:
            CommandResponse; consumes a turn only on success
        """
        if spec.requires_light and not self.light.is_light_present():
            return CommandResponse.fail(text("error.too_dark"))
        if not self.flags.evaluate(spec.requires):
            logger.debug("Precondition for %s.%s not met: %s", obj.id, verb, spec.requires)
            return CommandResponse.fail(spec.failure_message or text("error.not_allowed"))

        plan = self._plan_transfers(spec)
        for item_id, destination, source in plan:
            if source is not None and self.containers.locate(item_id) != source:
                return CommandResponse.fail(self._missing_message(item_id, source))

        with StateTransaction(self.state) as tx:
            for name in spec.grants:
                self.flags.set_flag(name)
            for name in spec.removes:
                self.flags.clear_flag(name)
            award = self.score.award_once(ScoreGuard(object_id=obj.id, action=verb), spec.score)
            for object_id in spec.reveals:
                self.flags.set_flag(ObjectRevealed(object_id=object_id))

            for item_id, destination, _ in plan:
                result = self.containers.relocate(item_id, destination)
                if not result.success:
                    tx.rollback()
                    logger.debug("Interaction %s.%s rolled back: %s", obj.id, verb, result.message)
                    return result

            arrival = None
            if spec.target_scene is not None:
                arrival = self.movement.enter_scene(spec.target_scene)
            self.light.recompute_light()
            # Message conditions see the scene the player ends up in.
            lines = [self.scenes.select_description(spec.message), arrival]

        lines += self._after_score(award)
        return CommandResponse.ok("\n".join(line for line in lines if line))

    def _plan_transfers(
        self, spec: InteractionSpec
    ) -> list[tuple[str, ItemLocation, ItemLocation | None]]:
        """
        Work out one move per item named by the interaction.

        Items gained go to the inventory, items added to a container go
        there, items only removed from the inventory are consumed, and
        items only taken out of a container drop to the current scene.
        """
        sources: dict[str, ItemLocation] = {}
        for item_id in spec.remove_from_inventory:
            sources[item_id] = INVENTORY
        if spec.remove_from_container is not None:
            for item_id in spec.remove_from_container.item_ids:
                sources[item_id] = in_container(spec.remove_from_container.container_id)

        destinations: dict[str, ItemLocation] = {}
        for item_id in spec.remove_from_inventory:
            destinations[item_id] = CONSUMED
        if spec.remove_from_container is not None:
            for item_id in spec.remove_from_container.item_ids:
                destinations[item_id] = in_scene(self.state.current_scene)
        if spec.add_to_container is not None:
            for item_id in spec.add_to_container.item_ids:
                destinations[item_id] = in_container(spec.add_to_container.container_id)
        for item_id in spec.add_to_inventory:
            destinations[item_id] = INVENTORY

        return [(item_id, dest, sources.get(item_id)) for item_id, dest in destinations.items()]

    def _missing_message(self, item_id: str, source: ItemLocation) -> str:
        item = self.world.item(item_id)
        if source == INVENTORY:
            return text("error.not_holding", item=item.name.lower())
        return text(
            "error.not_in_container",
            item=item.name.lower(),
            container=self.containers.display_name(source.holder_id),
        )

    def _run_on_enter(self, scene: SceneDefinition) -> str | None:
        if scene.on_enter is None:
            return None
        result = self.apply_interaction(scene, "enter", scene.on_enter)
        return result.message if result.success else None

    # =========================================================================
    # Built-in Verbs
    # =========================================================================

    def _after_score(self, award: ScoreAward) -> list[str]:
        lines = self.score.announce(award)
        if self.score.check_victory():
            lines.append(text("score.won", container=self.containers.display_name(
                self.score.trophy_container_id)))
        return lines

    def _award(self, obj: ObjectDefinition, action: str, points: int) -> ScoreAward:
        return self.score.award_once(ScoreGuard(object_id=obj.id, action=action), points)

    def _take(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        if self.containers.in_inventory(obj.id):
            return CommandResponse.fail(text("error.already_have", item=obj.name.lower()))
        if not obj.can_take or not self.world.is_item(obj.id):
            return CommandResponse.fail(text("error.cant_take", item=obj.name.lower()))
        with StateTransaction(self.state):
            result = self.containers.transfer_to_inventory(obj.id)
            if not result.success:
                return result
            award = self._award(obj, "take", obj.scoring.get("take", 0))
        return CommandResponse.ok("\n".join([result.message, *self._after_score(award)]))

    def _drop(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        if not self.containers.in_inventory(obj.id):
            return CommandResponse.fail(text("error.not_holding", item=obj.name.lower()))
        return self.containers.transfer_from_inventory(obj.id, in_scene(self.state.current_scene))

    def _put(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        if not command.target:
            return CommandResponse.fail(text("error.what", verb=f"put the {obj.name.lower()} in"))
        if not self.containers.in_inventory(obj.id):
            return CommandResponse.fail(text("error.not_holding", item=obj.name.lower()))
        target = self.scenes.find_object(command.target)
        if target is None:
            return CommandResponse.fail(text("error.not_found", item=command.target))
        with StateTransaction(self.state):
            result = self.containers.transfer_from_inventory(obj.id, in_container(target.id))
            if not result.success:
                return result
            award = self._award(obj, f"in_{target.id}", obj.container_targets.get(target.id, 0))
        return CommandResponse.ok("\n".join([result.message, *self._after_score(award)]))

    def _open(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        if not obj.is_container:
            return CommandResponse.fail(text("error.cant_action", verb="open", item=obj.name.lower()))
        with StateTransaction(self.state):
            result = self.containers.open(obj.id)
            if not result.success:
                return result
            award = self._award(obj, "open", obj.scoring.get("open", 0))
        return CommandResponse.ok("\n".join([result.message, *self._after_score(award)]))

    def _close(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        if not obj.is_container:
            return CommandResponse.fail(text("error.cant_action", verb="close", item=obj.name.lower()))
        return self.containers.close(obj.id)

    def _key_for(self, command: Command) -> tuple[str | None, CommandResponse | None]:
        if not command.target:
            return None, None
        key = self.scenes.find_object(command.target)
        if key is None:
            return None, CommandResponse.fail(text("error.not_found", item=command.target))
        return key.id, None

    def _unlock(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        key_id, failure = self._key_for(command)
        return failure or self.containers.unlock(obj.id, key_id)

    def _lock(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        key_id, failure = self._key_for(command)
        return failure or self.containers.lock(obj.id, key_id)

    def _turn_on(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        if self.light.source(obj.id) is not None and not self.containers.in_inventory(obj.id):
            return CommandResponse.fail(text("light.not_held", item=obj.name.lower()))
        return self.light.turn_on(obj.id)

    def _turn_off(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        return self.light.turn_off(obj.id)

    def _examine(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        if not self.light.is_light_present() and not self.containers.in_inventory(obj.id):
            return CommandResponse.fail(text("error.too_dark"))
        description = self.scenes.describe_object(obj, close_up=True)
        if self.light.source(obj.id) is not None:
            description = f"{description}\n{self.light.battery_status(obj.id)}"
        return CommandResponse.ok(description)

    def _read(self, obj: ObjectDefinition, command: Command) -> CommandResponse:
        if not self.light.is_light_present():
            return CommandResponse.fail(text("error.too_dark"))
        if obj.descriptions.examine is None:
            return CommandResponse.fail(text("error.cant_action", verb="read", item=obj.name.lower()))
        return CommandResponse.ok(obj.descriptions.examine)

    # =========================================================================
    # Meta Verbs
    # =========================================================================

    def _describe_inventory(self) -> str:
        if not self.state.inventory:
            return text("inventory.empty")
        lines = []
        for item_id in self.state.inventory:
            item = self.world.item(item_id)
            line = f"  {item.name}"
            if self.light.source(item_id) is not None:
                line += f" ({self.light.state_of(item_id).value})"
            lines.append(line)
            if item.is_container:
                contents = self.scenes.describe_contents(item)
                if contents:
                    lines.append(f"    {contents}")
        return text("inventory.carrying", items="\n".join(lines))

    def _describe_score(self) -> str:
        lines = [self.score.summary()]
        lines += [text("score.trophy", trophy=t) for t in self.state.trophies]
        return "\n".join(lines)
