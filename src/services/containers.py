"""
Container and Inventory Service for the adventure engine.

Owns the item location invariant: every tracked item is in exactly one
place (a scene floor, a container, the inventory, or retired as consumed).
Moves are remove-then-add; if the add is refused, the removal is undone
before the failure is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.models.command import CommandResponse
from src.models.flags import Holding, ObjectLocked, ObjectOpen, ObjectRevealed
from src.models.state import (
    CONSUMED,
    INVENTORY,
    ItemLocation,
    LocationKind,
    WorldState,
    in_container,
    in_scene,
)
from src.models.world import ObjectDefinition, UnknownObjectError, World, WorldIntegrityError
from src.services.flags import FlagService
from src.services.light import LightService
from src.services.text import text

logger = logging.getLogger(__name__)

DEFAULT_MAX_WEIGHT = 20


@dataclass
class ContainerService:
    """Service for container state, item locations and transfers."""

    state: WorldState
    world: World
    flags: FlagService
    light: LightService
    max_weight: int = DEFAULT_MAX_WEIGHT

    # =========================================================================
    # Locations
    # =========================================================================

    def locations_of(self, item_id: str) -> list[ItemLocation]:
        """Every place an item is recorded. Exactly one when the invariant holds."""
        found: list[ItemLocation] = []
        if item_id in self.state.inventory:
            found.append(INVENTORY)
        for container_id, contents in self.state.containers.items():
            if item_id in contents:
                found.append(in_container(container_id))
        for scene_id, items in self.state.scene_items.items():
            if item_id in items:
                found.append(in_scene(scene_id))
        if item_id in self.state.consumed:
            found.append(CONSUMED)
        return found

    def locate(self, item_id: str) -> ItemLocation:
        """
        Get an item's single location.

        Raises:
            UnknownObjectError: If the id is not a tracked item
            WorldIntegrityError: If the item is nowhere or in several places
        """
        if not self.world.is_item(item_id):
            raise UnknownObjectError(item_id)
        found = self.locations_of(item_id)
        if len(found) != 1:
            raise WorldIntegrityError(
                f"Item {item_id} has {len(found)} locations: {', '.join(map(str, found)) or 'none'}"
            )
        return found[0]

    def check_invariants(self) -> list[str]:
        """List every location-invariant violation (empty when consistent)."""
        problems: list[str] = []
        for item_id in sorted(self.world.item_ids()):
            count = len(self.locations_of(item_id))
            if count != 1:
                problems.append(f"{item_id}: {count} locations")
        return problems

    def in_inventory(self, item_id: str) -> bool:
        return item_id in self.state.inventory

    def scene_of(self, item_id: str) -> str | None:
        """Scene whose floor the item is on, following container nesting."""
        location = self.locate(item_id)
        seen: set[str] = set()
        while location.kind == LocationKind.CONTAINER:
            holder = location.holder_id
            if holder in seen:
                raise WorldIntegrityError(f"Container cycle at {holder}")
            seen.add(holder)
            if not self.world.is_item(holder):
                return self.world.home_scene(holder).id
            location = self.locate(holder)
        if location.kind == LocationKind.SCENE:
            return location.holder_id
        if location.kind == LocationKind.INVENTORY:
            return self.state.current_scene
        return None

    # =========================================================================
    # Container State
    # =========================================================================

    def container(self, container_id: str) -> ObjectDefinition | None:
        return self.world.containers().get(container_id)

    def display_name(self, object_id: str) -> str:
        if self.world.has_object(object_id):
            return self.world.home_scene(object_id).objects[object_id].name
        return object_id

    def contents(self, container_id: str) -> list[str]:
        return list(self.state.containers.get(container_id, []))

    def is_open(self, container_id: str) -> bool:
        return self.flags.is_open(container_id)

    def is_locked(self, container_id: str) -> bool:
        return self.flags.is_locked(container_id)

    def check_access(self, container_id: str) -> CommandResponse | None:
        """Failure if the container's contents cannot be reached; locked first."""
        container = self.container(container_id)
        if container is None:
            return CommandResponse.fail(text("error.not_container", container=self.display_name(container_id)))
        if self.is_locked(container_id):
            return CommandResponse.fail(text("error.container_locked", container=container.name))
        if not self.is_open(container_id):
            return CommandResponse.fail(text("error.container_closed", container=container.name))
        return None

    def validate_open(self, container_id: str) -> CommandResponse | None:
        container = self.container(container_id)
        if container is None:
            return CommandResponse.fail(text("error.not_container", container=self.display_name(container_id)))
        if self.is_locked(container_id):
            return CommandResponse.fail(text("error.container_locked", container=container.name))
        if self.is_open(container_id):
            return CommandResponse.fail(text("error.already_open", container=container.name))
        return None

    def open(self, container_id: str) -> CommandResponse:
        """Open a container. Rejected when locked or already open."""
        failure = self.validate_open(container_id)
        if failure is not None:
            return failure
        container = self.container(container_id)
        self.flags.set_flag(ObjectOpen(object_id=container_id))
        for item_id in self.contents(container_id):
            self.flags.set_flag(ObjectRevealed(object_id=item_id))
        return CommandResponse.ok(self.describe_opening(container))

    def validate_close(self, container_id: str) -> CommandResponse | None:
        container = self.container(container_id)
        if container is None:
            return CommandResponse.fail(text("error.not_container", container=self.display_name(container_id)))
        if self.is_locked(container_id):
            return CommandResponse.fail(text("error.container_locked", container=container.name))
        if not self.is_open(container_id):
            return CommandResponse.fail(text("error.already_closed", container=container.name))
        return None

    def close(self, container_id: str) -> CommandResponse:
        """Close a container. Rejected when locked or already closed."""
        failure = self.validate_close(container_id)
        if failure is not None:
            return failure
        container = self.container(container_id)
        self.flags.clear_flag(ObjectOpen(object_id=container_id))
        return CommandResponse.ok(text("container.close", container=container.name))

    def validate_unlock(self, container_id: str, key_id: str | None) -> CommandResponse | None:
        container = self.container(container_id)
        if container is None:
            return CommandResponse.fail(text("error.not_container", container=self.display_name(container_id)))
        if not self.is_locked(container_id):
            return CommandResponse.fail(text("error.not_locked", container=container.name))
        return self._check_key(container, key_id)

    def unlock(self, container_id: str, key_id: str | None = None) -> CommandResponse:
        """Unlock with the container's key, which must be carried."""
        failure = self.validate_unlock(container_id, key_id)
        if failure is not None:
            return failure
        container = self.container(container_id)
        self.flags.clear_flag(ObjectLocked(object_id=container_id))
        return CommandResponse.ok(text("container.unlock", container=container.name))

    def validate_lock(self, container_id: str, key_id: str | None) -> CommandResponse | None:
        container = self.container(container_id)
        if container is None:
            return CommandResponse.fail(text("error.not_container", container=self.display_name(container_id)))
        if self.is_locked(container_id):
            return CommandResponse.fail(text("error.already_locked", container=container.name))
        if self.is_open(container_id):
            return CommandResponse.fail(text("error.close_first", container=container.name))
        return self._check_key(container, key_id)

    def lock(self, container_id: str, key_id: str | None = None) -> CommandResponse:
        failure = self.validate_lock(container_id, key_id)
        if failure is not None:
            return failure
        container = self.container(container_id)
        self.flags.set_flag(ObjectLocked(object_id=container_id))
        return CommandResponse.ok(text("container.lock", container=container.name))

    def _check_key(self, container: ObjectDefinition, key_id: str | None) -> CommandResponse | None:
        if container.key_id is None:
            return CommandResponse.fail(text("error.not_lockable", container=container.name))
        key = key_id or container.key_id
        if key != container.key_id or not self.in_inventory(key):
            return CommandResponse.fail(text("error.no_key", container=container.name))
        return None

    def describe_opening(self, container: ObjectDefinition) -> str:
        message = text("container.open", container=container.name)
        names = [self.world.item(i).name.lower() for i in self.contents(container.id)]
        if names:
            message += " " + text("container.contents", container=container.name, items=", ".join(names))
        return message

    # =========================================================================
    # Primitive Add / Remove
    # =========================================================================

    def validate_add(self, container_id: str, item_id: str) -> CommandResponse | None:
        """Check a container can take one more item. Does not mutate."""
        container = self.container(container_id)
        item = self.world.item(item_id)
        if container is None:
            return CommandResponse.fail(text("error.not_container", container=self.display_name(container_id)))
        if container_id == item_id or self._nests_inside(container_id, item_id):
            return CommandResponse.fail(text("error.into_itself", item=item.name))
        failure = self.check_access(container_id)
        if failure is not None:
            return failure
        contents = self.state.containers.get(container_id, [])
        if item_id in contents:
            return None
        if container.capacity is not None and len(contents) >= container.capacity:
            return CommandResponse.fail(text("error.container_full", container=container.name))
        return None

    def _nests_inside(self, container_id: str, item_id: str) -> bool:
        """True if ``container_id`` is (transitively) inside ``item_id``."""
        if not self.world.is_item(container_id):
            return False
        location = self.locate(container_id)
        seen: set[str] = set()
        while location.kind == LocationKind.CONTAINER and location.holder_id not in seen:
            if location.holder_id == item_id:
                return True
            seen.add(location.holder_id)
            if not self.world.is_item(location.holder_id):
                return False
            location = self.locate(location.holder_id)
        return False

    def add_item(self, container_id: str, item_id: str) -> CommandResponse:
        """
        Move an item into a container from wherever it is now.

        The item leaves its current location in the same step, so it is
        never recorded in two places.
        """
        result = self.transfer(item_id, in_container(container_id))
        if not result.success:
            return result
        container = self.container(container_id)
        return CommandResponse.ok(
            text("container.put", item=self.world.item(item_id).name.lower(), container=container.name)
        )

    def remove_item(self, container_id: str, item_id: str) -> CommandResponse:
        """Take an item out of a container and leave it on the current scene's floor."""
        failure = self.check_access(container_id)
        if failure is not None:
            return failure
        return self.transfer(
            item_id, in_scene(self.state.current_scene), source=in_container(container_id)
        )

    # =========================================================================
    # Transfers
    # =========================================================================

    def inventory_weight(self) -> int:
        return sum(self.world.item(i).weight for i in self.state.inventory)

    def validate_source(self, item_id: str, source: ItemLocation | None = None) -> CommandResponse | None:
        """Check an item can leave where it is (and is where the caller expects)."""
        item = self.world.item(item_id)
        current = self.locate(item_id)
        if source is not None and current != source:
            if source.kind == LocationKind.INVENTORY:
                return CommandResponse.fail(text("error.not_holding", item=item.name.lower()))
            if source.kind == LocationKind.CONTAINER:
                container = self.container(source.holder_id)
                name = container.name if container else source.holder_id
                return CommandResponse.fail(
                    text("error.not_in_container", item=item.name.lower(), container=name)
                )
            return CommandResponse.fail(text("error.not_found", item=item.name.lower()))
        if current.kind == LocationKind.CONTAINER:
            return self.check_access(current.holder_id)
        if current.kind == LocationKind.CONSUMED:
            return CommandResponse.fail(text("error.not_found", item=item.name.lower()))
        return None

    def validate_destination(self, item_id: str, destination: ItemLocation) -> CommandResponse | None:
        """Check an item may be placed at ``destination`` (ignoring where it is now)."""
        item = self.world.item(item_id)
        if destination.kind == LocationKind.INVENTORY:
            if self.in_inventory(item_id):
                return None
            if self.inventory_weight() + item.weight > self.max_weight:
                return CommandResponse.fail(text("error.too_heavy", item=item.name.lower()))
            return None
        if destination.kind == LocationKind.CONTAINER:
            return self.validate_add(destination.holder_id, item_id)
        if destination.kind == LocationKind.SCENE:
            self.world.scene(destination.holder_id)
        return None

    def validate_transfer(self, item_id: str, destination: ItemLocation,
                          source: ItemLocation | None = None) -> CommandResponse | None:
        return self.validate_source(item_id, source) or self.validate_destination(item_id, destination)

    def _detach(self, item_id: str) -> tuple[ItemLocation, int]:
        location = self.locate(item_id)
        if location.kind == LocationKind.INVENTORY:
            bucket = self.state.inventory
        elif location.kind == LocationKind.CONTAINER:
            bucket = self.state.containers[location.holder_id]
        elif location.kind == LocationKind.SCENE:
            bucket = self.state.scene_items[location.holder_id]
        else:
            bucket = self.state.consumed
        index = bucket.index(item_id)
        bucket.pop(index)
        if location.kind == LocationKind.INVENTORY:
            self.flags.clear_flag(Holding(object_id=item_id))
        return location, index

    def _attach(self, item_id: str, location: ItemLocation, index: int | None = None) -> None:
        if location.kind == LocationKind.INVENTORY:
            bucket = self.state.inventory
            self.flags.set_flag(Holding(object_id=item_id))
            self.flags.set_flag(ObjectRevealed(object_id=item_id))
        elif location.kind == LocationKind.CONTAINER:
            bucket = self.state.containers.setdefault(location.holder_id, [])
        elif location.kind == LocationKind.SCENE:
            bucket = self.state.scene_items.setdefault(location.holder_id, [])
            self.flags.set_flag(ObjectRevealed(object_id=item_id))
        else:
            bucket = self.state.consumed
        if index is None or index > len(bucket):
            bucket.append(item_id)
        else:
            bucket.insert(index, item_id)

    def transfer(self, item_id: str, destination: ItemLocation,
                 source: ItemLocation | None = None) -> CommandResponse:
        """
        Move an item as one logical step.

        The item is removed from its source first; if the destination then
        refuses it, the removal is undone before the failure is returned, so
        the item never ends up in zero or two places.

        Args:
            item_id: Item to move
            destination: Where it should end up
            source: Where the caller expects it to be (checked if given)

        Returns:
            CommandResponse; on failure the state is unchanged
        """
        failure = self.validate_source(item_id, source)
        if failure is not None:
            return failure
        if self.locate(item_id) == destination:
            return CommandResponse.ok(text("success.done"))

        origin, index = self._detach(item_id)
        failure = self.validate_destination(item_id, destination)
        if failure is not None:
            self._attach(item_id, origin, index)
            logger.debug("Transfer of %s to %s refused; restored to %s", item_id, destination, origin)
            return failure

        self._attach(item_id, destination)
        if LocationKind.INVENTORY in (origin.kind, destination.kind):
            self.light.recompute_light()
        logger.debug("Moved %s from %s to %s", item_id, origin, destination)
        return CommandResponse.ok(text("success.done"))

    def relocate(self, item_id: str, destination: ItemLocation) -> CommandResponse:
        """
        Move an item on behalf of authored content.

        Unlike ``transfer`` the player need not reach either end, so closed
        containers are no obstacle, but capacity and carrying weight still
        apply and a refused move is undone.
        """
        if self.locate(item_id) == destination:
            return CommandResponse.ok(text("success.done"))
        origin, index = self._detach(item_id)
        failure = self._check_room(item_id, destination)
        if failure is not None:
            self._attach(item_id, origin, index)
            return failure
        self._attach(item_id, destination)
        if LocationKind.INVENTORY in (origin.kind, destination.kind):
            self.light.recompute_light()
        logger.debug("Relocated %s from %s to %s", item_id, origin, destination)
        return CommandResponse.ok(text("success.done"))

    def _check_room(self, item_id: str, destination: ItemLocation) -> CommandResponse | None:
        item = self.world.item(item_id)
        if destination.kind == LocationKind.INVENTORY:
            if self.inventory_weight() + item.weight > self.max_weight:
                return CommandResponse.fail(text("error.too_heavy", item=item.name.lower()))
        elif destination.kind == LocationKind.CONTAINER:
            container = self.container(destination.holder_id)
            if container is None:
                return CommandResponse.fail(
                    text("error.not_container", container=self.display_name(destination.holder_id))
                )
            if destination.holder_id == item_id or self._nests_inside(destination.holder_id, item_id):
                return CommandResponse.fail(text("error.into_itself", item=item.name))
            contents = self.state.containers.get(destination.holder_id, [])
            if container.capacity is not None and len(contents) >= container.capacity:
                return CommandResponse.fail(text("error.container_full", container=container.name))
        elif destination.kind == LocationKind.SCENE:
            self.world.scene(destination.holder_id)
        return None

    def transfer_to_inventory(self, item_id: str, source: ItemLocation | None = None) -> CommandResponse:
        """Take an item from a scene or container into the inventory."""
        item = self.world.item(item_id)
        if self.in_inventory(item_id):
            return CommandResponse.fail(text("error.already_have", item=item.name.lower()))
        result = self.transfer(item_id, INVENTORY, source)
        if not result.success:
            return result
        return CommandResponse.ok(text("success.take"))

    def transfer_from_inventory(self, item_id: str, destination: ItemLocation) -> CommandResponse:
        """Drop an item into the current scene, or put it into a container."""
        item = self.world.item(item_id)
        result = self.transfer(item_id, destination, INVENTORY)
        if not result.success:
            return result
        if destination.kind == LocationKind.CONTAINER:
            container = self.container(destination.holder_id)
            return CommandResponse.ok(
                text("container.put", item=item.name.lower(), container=container.name)
            )
        return CommandResponse.ok(text("success.drop"))

    def consume(self, item_id: str) -> CommandResponse:
        """Retire an item from play (eaten, drunk, burned)."""
        return self.transfer(item_id, CONSUMED)
