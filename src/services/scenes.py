"""
Scene Resolver for the adventure engine.

Joins the immutable world graph with live state: which objects are present
and visible, which description text applies, and how a player-supplied
name maps to an object.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from src.models.state import LocationKind, WorldState
from src.models.world import DescriptionTable, ObjectDefinition, SceneDefinition, World
from src.services.containers import ContainerService
from src.services.flags import FlagService
from src.services.light import LightService
from src.services.text import text


class ResolvedObject(BaseModel):
    """An object as it currently appears in a scene."""

    id: str
    name: str
    visible: bool
    is_item: bool = False
    is_open: bool = False
    is_locked: bool = False
    revealed: bool = False
    location: str | None = Field(default=None, description="Rendered ItemLocation for items")


class ResolvedScene(BaseModel):
    """Static scene data merged with derived state."""

    id: str
    name: str
    region: str = ""
    lit: bool
    visited: bool
    description: str
    objects: list[ResolvedObject] = Field(default_factory=list)
    exits: list[str] = Field(default_factory=list)

    @property
    def visible_objects(self) -> list[ResolvedObject]:
        return [o for o in self.objects if o.visible]


@dataclass
class SceneResolver:
    """Resolves scenes, descriptions, visibility and object names."""

    state: WorldState
    world: World
    flags: FlagService
    light: LightService
    containers: ContainerService

    # =========================================================================
    # Descriptions
    # =========================================================================

    def select_description(self, table: DescriptionTable, visited: bool = False) -> str:
        """
        Pick the text a description table shows right now.

        Dark text when there is no light (if authored), else the first
        override whose condition holds, else the visited text on return
        visits, else the default.
        """
        if table.dark is not None and not self.light.is_light_present():
            return table.dark
        for override in table.overrides:
            if self.flags.evaluate(override.when):
                return override.text
        if visited and table.visited is not None:
            return table.visited
        return table.default

    def scene_description(self, scene: SceneDefinition) -> str:
        if not self.light.is_light_present() and scene.descriptions.dark is None:
            return text("scene.dark")
        return self.select_description(scene.descriptions, visited=self.flags.is_visited(scene.id))

    # =========================================================================
    # Presence and Visibility
    # =========================================================================

    def present_objects(self, scene_id: str | None = None) -> list[ObjectDefinition]:
        """
        Every object physically in a scene, visible or not.

        Fixtures in declaration order, then floor items, then the contents
        of any present container (depth first). Carried items are excluded.
        """
        scene = self.world.scene(scene_id or self.state.current_scene)
        found: list[ObjectDefinition] = [
            obj for obj in scene.objects.values() if not self.world.is_item(obj.id)
        ]
        found += [self.world.item(i) for i in self.state.scene_items.get(scene.id, [])]

        index = 0
        while index < len(found):
            obj = found[index]
            index += 1
            if obj.is_container:
                for item_id in self.state.containers.get(obj.id, []):
                    item = self.world.item(item_id)
                    if item not in found:
                        found.append(item)
        return found

    def carried_objects(self) -> list[ObjectDefinition]:
        """Inventory items plus anything inside carried containers."""
        found = [self.world.item(i) for i in self.state.inventory]
        index = 0
        while index < len(found):
            obj = found[index]
            index += 1
            if obj.is_container:
                found += [self.world.item(i) for i in self.state.containers.get(obj.id, [])]
        return found

    def is_visible(self, obj: ObjectDefinition) -> bool:
        """
        Visibility of an object from the current scene.

        Carried items are always visible. Otherwise the object must be
        visible on entry or revealed, lit if it needs light, and every
        container around it must be open.
        """
        if self.containers.in_inventory(obj.id):
            return True
        if not (obj.visible_on_entry or self.flags.is_revealed(obj.id)):
            return False
        if obj.requires_light and not self.light.is_light_present():
            return False
        if not self.world.is_item(obj.id):
            return obj.id in self.world.scene(self.state.current_scene).objects

        location = self.containers.locate(obj.id)
        if location.kind == LocationKind.SCENE:
            return location.holder_id == self.state.current_scene
        if location.kind == LocationKind.CONTAINER:
            if not self.containers.is_open(location.holder_id):
                return False
            return self.is_visible(self._holder(location.holder_id))
        return False

    def _holder(self, container_id: str) -> ObjectDefinition:
        if self.world.is_item(container_id):
            return self.world.item(container_id)
        scene = self.world.scene(self.state.current_scene)
        if container_id in scene.objects:
            return scene.objects[container_id]
        return self.world.home_scene(container_id).objects[container_id]

    def visible_objects(self, scene_id: str | None = None) -> list[ObjectDefinition]:
        return [obj for obj in self.present_objects(scene_id) if self.is_visible(obj)]

    def enclosing_container(self, obj: ObjectDefinition) -> ObjectDefinition | None:
        """Container directly holding an item, if any."""
        if not self.world.is_item(obj.id):
            return None
        location = self.containers.locate(obj.id)
        if location.kind != LocationKind.CONTAINER:
            return None
        return self._holder(location.holder_id)

    # =========================================================================
    # Name Resolution
    # =========================================================================

    def find_object(self, name: str, visible_only: bool = True) -> ObjectDefinition | None:
        """
        Resolve a player-supplied name.

        Carried objects are searched before the scene. Within each group an
        exact id/name/alias match beats a partial name match.

        Args:
            name: What the player typed
            visible_only: Skip objects the player cannot currently see

        Returns:
            The matching object, or None
        """
        if not name:
            return None
        for group in (self.carried_objects(), self.present_objects()):
            if visible_only:
                group = [obj for obj in group if self.is_visible(obj)]
            for obj in group:
                if obj.matches(name):
                    return obj
            for obj in group:
                if obj.partially_matches(name):
                    return obj
        return None

    # =========================================================================
    # Rendering
    # =========================================================================

    def resolve_object(self, obj: ObjectDefinition) -> ResolvedObject:
        is_item = self.world.is_item(obj.id)
        return ResolvedObject(
            id=obj.id,
            name=obj.name,
            visible=self.is_visible(obj),
            is_item=is_item,
            is_open=obj.is_container and self.flags.is_open(obj.id),
            is_locked=obj.is_container and self.flags.is_locked(obj.id),
            revealed=self.flags.is_revealed(obj.id),
            location=str(self.containers.locate(obj.id)) if is_item else None,
        )

    def resolve_scene(self, scene_id: str | None = None) -> ResolvedScene:
        """
        Merge a scene definition with its live state.

        Raises:
            UnknownSceneError: If the scene id does not resolve
        """
        scene = self.world.scene(scene_id or self.state.current_scene)
        return ResolvedScene(
            id=scene.id,
            name=scene.name,
            region=scene.region,
            lit=self.light.is_light_present(),
            visited=self.flags.is_visited(scene.id),
            description=self.scene_description(scene),
            objects=[self.resolve_object(obj) for obj in self.present_objects(scene.id)],
            exits=[e.direction for e in scene.exits],
        )

    def describe_contents(self, container: ObjectDefinition) -> str:
        if self.flags.is_locked(container.id) or not self.flags.is_open(container.id):
            return ""
        names = [self.world.item(i).name.lower() for i in self.state.containers.get(container.id, [])]
        if not names:
            return container.descriptions.empty or text("container.empty", container=container.name)
        return text("container.contents", container=container.name, items=", ".join(names))

    def describe_object(self, obj: ObjectDefinition, close_up: bool = False) -> str:
        """Current description of an object, with container contents appended."""
        description = self.select_description(obj.descriptions)
        if close_up and obj.descriptions.examine is not None and description == obj.descriptions.default:
            description = obj.descriptions.examine
        if obj.is_container:
            contents = self.describe_contents(obj)
            if contents:
                description = f"{description} {contents}".strip()
        return description

    def describe_scene(self) -> str:
        """Full text for ``look``: name, description and loose items."""
        scene = self.world.scene(self.state.current_scene)
        lines = [scene.name, self.scene_description(scene)]
        if not self.light.is_light_present():
            return "\n".join(lines)

        visible = self.visible_objects()
        loose = [
            obj.name.lower()
            for obj in visible
            if self.world.is_item(obj.id) and self.enclosing_container(obj) is None
        ]
        if loose:
            lines.append(text("scene.objects", items=", ".join(loose)))
        for obj in visible:
            if obj.is_container and self.state.containers.get(obj.id):
                contents = self.describe_contents(obj)
                if contents:
                    lines.append(contents)
        return "\n".join(lines)
