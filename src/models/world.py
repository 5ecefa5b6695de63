"""
World Graph Models for the adventure engine.

Defines the immutable authored data: scenes, objects, exits and the
interaction table attached to each object. Content is written as plain
id-keyed dicts and loaded through ``load_world``, which validates the
structure with pydantic and the references between entities by hand.

Nothing in here changes during play. All dynamic facts live in WorldState.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from src.models.condition import ALWAYS, And, Atom, Not, Or, parse_condition

Condition = Atom | Not | And | Or


# =============================================================================
# Errors
# =============================================================================


class WorldIntegrityError(ValueError):
    """Authored content references something that does not exist.

    This is a content bug, never a player mistake. It is raised loudly and
    must not be turned into a player-facing message.
    """


class UnknownSceneError(WorldIntegrityError):
    """A scene id did not resolve."""

    def __init__(self, scene_id: str) -> None:
        super().__init__(f"Scene not found: {scene_id}")
        self.scene_id = scene_id


class UnknownObjectError(WorldIntegrityError):
    """An object id did not resolve."""

    def __init__(self, object_id: str, scene_id: str | None = None) -> None:
        where = f" in scene {scene_id}" if scene_id else ""
        super().__init__(f"Object not found{where}: {object_id}")
        self.object_id = object_id
        self.scene_id = scene_id


# =============================================================================
# Descriptions
# =============================================================================


def _coerce_condition(value: Any) -> Condition:
    return parse_condition(value)


class DescriptionOverride(BaseModel):
    """One row of an override table: when ``when`` holds, show ``text``."""

    model_config = {"frozen": True}

    when: Condition
    text: str

    @field_validator("when", mode="before")
    @classmethod
    def parse_when(cls, value: Any) -> Condition:
        return _coerce_condition(value)


class DescriptionTable(BaseModel):
    """
    Conditional text for a scene, object or interaction message.

    Overrides are kept in declaration order; the first match wins. The order
    is part of the authored content.
    """

    model_config = {"frozen": True}

    default: str
    dark: str | None = Field(default=None, description="Shown when no light is present")
    visited: str | None = Field(default=None, description="Shown on return visits")
    examine: str | None = Field(default=None, description="Close-up description")
    empty: str | None = Field(default=None, description="Container with nothing inside")
    overrides: tuple[DescriptionOverride, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def accept_states_mapping(cls, data: Any) -> Any:
        """Accept a bare string, and the authored ``states`` mapping."""
        if isinstance(data, str):
            return {"default": data}
        if isinstance(data, Mapping) and "states" in data:
            data = dict(data)
            states = data.pop("states") or {}
            data["overrides"] = [{"when": key, "text": text} for key, text in states.items()]
        return data


# =============================================================================
# Interactions
# =============================================================================


class ContainerTransfer(BaseModel):
    """Items moved into or out of a named container by an interaction."""

    model_config = {"frozen": True}

    container_id: str
    item_ids: tuple[str, ...] = ()


class InteractionSpec(BaseModel):
    """
    Effect bundle triggered by a verb on an object.

    Effects are applied in a fixed order by the dispatcher: grants, removals,
    score, reveals, transfers, scene transition.
    """

    model_config = {"frozen": True}

    message: DescriptionTable
    requires: Condition = ALWAYS
    failure_message: str | None = None
    requires_light: bool = False

    grants: tuple[str, ...] = ()
    removes: tuple[str, ...] = ()
    score: int = 0
    reveals: tuple[str, ...] = ()

    add_to_inventory: tuple[str, ...] = ()
    remove_from_inventory: tuple[str, ...] = ()
    add_to_container: ContainerTransfer | None = None
    remove_from_container: ContainerTransfer | None = None

    target_scene: str | None = None

    @model_validator(mode="before")
    @classmethod
    def accept_message_states(cls, data: Any) -> Any:
        """Fold ``message`` + ``states`` into a single description table."""
        if isinstance(data, Mapping) and not isinstance(data.get("message"), Mapping):
            data = dict(data)
            message = {"default": data.pop("message", "")}
            if "states" in data:
                message["states"] = data.pop("states")
            data["message"] = message
        return data

    @field_validator("requires", mode="before")
    @classmethod
    def parse_requires(cls, value: Any) -> Condition:
        return _coerce_condition(value)

    def transfer_item_ids(self) -> set[str]:
        """All item ids this interaction moves."""
        ids = set(self.add_to_inventory) | set(self.remove_from_inventory)
        for transfer in (self.add_to_container, self.remove_from_container):
            if transfer is not None:
                ids |= set(transfer.item_ids)
        return ids


# =============================================================================
# Objects, Exits, Scenes
# =============================================================================


class ObjectDefinition(BaseModel):
    """An authored object: fixture, item, container or light source."""

    model_config = {"frozen": True}

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    aliases: tuple[str, ...] = ()
    descriptions: DescriptionTable

    visible_on_entry: bool = False
    can_take: bool = False
    weight: int = Field(default=0, ge=0)

    # Containers
    is_container: bool = False
    capacity: int | None = Field(default=None, ge=0)
    open: bool = Field(default=False, description="Initial open state")
    locked: bool = Field(default=False, description="Initial locked state")
    contents: tuple[str, ...] = Field(default=(), description="Initial contents")
    key_id: str | None = Field(default=None, description="Item that locks/unlocks this")

    # Light
    provides_light: bool = False
    requires_light: bool = False

    # Scoring
    is_treasure: bool = False
    scoring: dict[str, int] = Field(
        default_factory=dict, description="Points per built-in verb, e.g. take/open"
    )
    container_targets: dict[str, int] = Field(
        default_factory=dict, description="Points for placing this in a container"
    )

    interactions: dict[str, InteractionSpec] = Field(default_factory=dict)

    @field_validator("descriptions", mode="before")
    @classmethod
    def accept_plain_description(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"default": value}
        return value

    @model_validator(mode="after")
    def validate_container_fields(self) -> ObjectDefinition:
        """Container-only attributes require ``is_container``."""
        if not self.is_container and (self.contents or self.capacity is not None):
            raise ValueError(f"Object {self.id} has contents/capacity but is not a container")
        if self.capacity is not None and len(self.contents) > self.capacity:
            raise ValueError(f"Container {self.id} starts over capacity")
        return self

    def interaction(self, verb: str) -> InteractionSpec | None:
        return self.interactions.get(verb)

    def matches(self, name: str) -> bool:
        """Exact, case-insensitive match on id, name or alias."""
        wanted = name.strip().lower()
        return wanted in {self.id.lower(), self.name.lower(), *(a.lower() for a in self.aliases)}

    def partially_matches(self, name: str) -> bool:
        wanted = name.strip().lower()
        return bool(wanted) and (
            wanted in self.name.lower() or any(wanted in a.lower() for a in self.aliases)
        )


class Exit(BaseModel):
    """A guarded edge between two scenes."""

    model_config = {"frozen": True}

    direction: str = Field(min_length=1)
    target_scene: str
    description: str = ""
    requires: Condition = ALWAYS
    failure_message: str | None = None
    score: int = Field(default=0, ge=0)
    requires_light: bool = True

    @field_validator("requires", mode="before")
    @classmethod
    def parse_requires(cls, value: Any) -> Condition:
        return _coerce_condition(value)


class SceneDefinition(BaseModel):
    """A location node with descriptions, contained objects and exits."""

    model_config = {"frozen": True}

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    region: str = ""
    light: bool = Field(default=False, description="Natural light")
    descriptions: DescriptionTable
    objects: dict[str, ObjectDefinition] = Field(default_factory=dict)
    exits: tuple[Exit, ...] = ()
    on_enter: InteractionSpec | None = None

    @model_validator(mode="before")
    @classmethod
    def fill_object_ids(cls, data: Any) -> Any:
        """Objects are authored id-keyed; the key doubles as the id."""
        if isinstance(data, Mapping) and isinstance(data.get("objects"), Mapping):
            data = dict(data)
            data["objects"] = {
                key: ({"id": key, **obj} if isinstance(obj, Mapping) and "id" not in obj else obj)
                for key, obj in data["objects"].items()
            }
        return data


# =============================================================================
# World Graph
# =============================================================================


class World(BaseModel):
    """
    The complete authored world.

    Items (takeable objects and anything placed inside a container) have
    world-unique ids and may travel between scenes. Fixtures stay in the
    scene that declares them, and the same fixture id may appear in more
    than one scene (e.g. the window seen from inside and outside).
    """

    model_config = {"frozen": True}

    scenes: dict[str, SceneDefinition]
    starting_scene: str
    max_score: int | None = Field(default=None, ge=0)

    _items: dict[str, ObjectDefinition] = PrivateAttr(default_factory=dict)
    _homes: dict[str, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        """Index items and the scene that declares each object."""
        contained = {
            item_id
            for scene in self.scenes.values()
            for obj in scene.objects.values()
            if obj.is_container
            for item_id in obj.contents
        }
        for scene in self.scenes.values():
            for obj in scene.objects.values():
                self._homes.setdefault(obj.id, scene.id)
                if obj.can_take or obj.id in contained:
                    self._items.setdefault(obj.id, obj)

    @model_validator(mode="before")
    @classmethod
    def fill_scene_ids(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and isinstance(data.get("scenes"), Mapping):
            data = dict(data)
            data["scenes"] = {
                key: ({"id": key, **scene} if isinstance(scene, Mapping) and "id" not in scene else scene)
                for key, scene in data["scenes"].items()
            }
        return data

    # --- lookups ---

    def scene(self, scene_id: str) -> SceneDefinition:
        """Get a scene definition or raise UnknownSceneError."""
        scene = self.scenes.get(scene_id)
        if scene is None:
            raise UnknownSceneError(scene_id)
        return scene

    def has_scene(self, scene_id: str) -> bool:
        return scene_id in self.scenes

    def iter_objects(self) -> Iterator[tuple[SceneDefinition, ObjectDefinition]]:
        for scene in self.scenes.values():
            for obj in scene.objects.values():
                yield scene, obj

    def item_ids(self) -> set[str]:
        """Ids of every object tracked by the location model."""
        return set(self._items)

    def is_item(self, object_id: str) -> bool:
        return object_id in self._items

    def item(self, item_id: str) -> ObjectDefinition:
        """Get an item definition by its world-unique id."""
        obj = self._items.get(item_id)
        if obj is None:
            raise UnknownObjectError(item_id)
        return obj

    def home_scene(self, object_id: str) -> SceneDefinition:
        """Scene that declares an object."""
        scene_id = self._homes.get(object_id)
        if scene_id is None:
            raise UnknownObjectError(object_id)
        return self.scenes[scene_id]

    def has_object(self, object_id: str) -> bool:
        return object_id in self._homes

    def object_in(self, scene_id: str, object_id: str) -> ObjectDefinition:
        """Resolve an object from a scene's point of view (fixture or item)."""
        scene = self.scene(scene_id)
        obj = scene.objects.get(object_id)
        if obj is not None:
            return obj
        if object_id in self._items:
            return self._items[object_id]
        raise UnknownObjectError(object_id, scene_id)

    def containers(self) -> dict[str, ObjectDefinition]:
        """Container definitions by id (first declaration wins)."""
        found: dict[str, ObjectDefinition] = {}
        for _, obj in self.iter_objects():
            if obj.is_container and obj.id not in found:
                found[obj.id] = obj
        return found

    def light_sources(self) -> dict[str, ObjectDefinition]:
        return {obj.id: obj for _, obj in self.iter_objects() if obj.provides_light}

    def treasures(self) -> list[str]:
        return [obj.id for _, obj in self.iter_objects() if obj.is_treasure]

    def referenced_flags(self) -> set[str]:
        """Every flag name authored content reads, grants or removes."""
        names: set[str] = set()

        def add_table(table: DescriptionTable) -> None:
            for override in table.overrides:
                names.update(override.when.flags())

        def add_spec(spec: InteractionSpec) -> None:
            names.update(spec.requires.flags())
            names.update(spec.grants)
            names.update(spec.removes)
            add_table(spec.message)

        for scene in self.scenes.values():
            add_table(scene.descriptions)
            for exit_ in scene.exits:
                names.update(exit_.requires.flags())
            if scene.on_enter is not None:
                add_spec(scene.on_enter)
            for obj in scene.objects.values():
                add_table(obj.descriptions)
                for spec in obj.interactions.values():
                    add_spec(spec)
        return names

    def possible_score(self) -> int:
        """Upper bound of points obtainable from interactions, exits and scoring maps.

        Score guards are keyed by object id, so a fixture declared in several
        scenes only counts once.
        """
        if self.max_score is not None:
            return self.max_score
        total = 0
        counted: set[str] = set()
        for scene in self.scenes.values():
            total += sum(e.score for e in scene.exits)
            for obj in scene.objects.values():
                if obj.id in counted:
                    continue
                counted.add(obj.id)
                total += sum(max(0, i.score) for i in obj.interactions.values())
                total += sum(max(0, points) for points in obj.scoring.values())
                total += max(obj.container_targets.values(), default=0)
        return total


# =============================================================================
# Loading and Validation
# =============================================================================


def validate_world(world: World) -> None:
    """
    Check referential integrity of an authored world.

    Raises:
        WorldIntegrityError: On the first dangling or ambiguous reference.
    """
    if not world.has_scene(world.starting_scene):
        raise UnknownSceneError(world.starting_scene)

    items = world.item_ids()
    containers = world.containers()

    seen_items: dict[str, str] = {}
    for scene, obj in world.iter_objects():
        if obj.id in items:
            if obj.id in seen_items and seen_items[obj.id] != scene.id:
                raise WorldIntegrityError(
                    f"Item {obj.id} is declared in both {seen_items[obj.id]} and {scene.id}"
                )
            seen_items[obj.id] = scene.id

    holders: dict[str, str] = {}
    for _, obj in world.iter_objects():
        for item_id in obj.contents:
            if item_id not in seen_items:
                raise WorldIntegrityError(f"Container {obj.id} holds unknown object {item_id}")
            if item_id == obj.id:
                raise WorldIntegrityError(f"Container {obj.id} contains itself")
            if item_id in holders and holders[item_id] != obj.id:
                raise WorldIntegrityError(
                    f"Item {item_id} starts in both {holders[item_id]} and {obj.id}"
                )
            holders[item_id] = obj.id
        if obj.key_id is not None and obj.key_id not in items:
            raise WorldIntegrityError(f"Container {obj.id} uses unknown key {obj.key_id}")

    def check_interaction(where: str, spec: InteractionSpec) -> None:
        if spec.target_scene is not None and not world.has_scene(spec.target_scene):
            raise WorldIntegrityError(f"{where}: target scene {spec.target_scene} not found")
        for object_id in spec.reveals:
            if not world.has_object(object_id):
                raise WorldIntegrityError(f"{where}: reveals unknown object {object_id}")
        for item_id in (*spec.add_to_inventory, *spec.remove_from_inventory):
            if item_id not in items:
                raise WorldIntegrityError(f"{where}: moves unknown item {item_id}")
        for transfer in (spec.add_to_container, spec.remove_from_container):
            if transfer is None:
                continue
            if transfer.container_id not in containers:
                raise WorldIntegrityError(
                    f"{where}: unknown container {transfer.container_id}"
                )
            for item_id in transfer.item_ids:
                if item_id not in items:
                    raise WorldIntegrityError(f"{where}: moves unknown item {item_id}")

    for scene in world.scenes.values():
        for exit_ in scene.exits:
            if not world.has_scene(exit_.target_scene):
                raise WorldIntegrityError(
                    f"Exit {scene.id}/{exit_.direction}: target scene {exit_.target_scene} not found"
                )
        if scene.on_enter is not None:
            check_interaction(f"{scene.id}.on_enter", scene.on_enter)
        for obj in scene.objects.values():
            for target in obj.container_targets:
                if target not in containers:
                    raise WorldIntegrityError(
                        f"Object {obj.id} scores for unknown container {target}"
                    )
            for verb, spec in obj.interactions.items():
                check_interaction(f"{scene.id}.{obj.id}.{verb}", spec)


def load_world(data: Mapping[str, Any] | World) -> World:
    """
    Build and validate a World from authored data.

    Args:
        data: ``{"starting_scene": ..., "scenes": {id: {...}}}`` or a World

    Returns:
        A validated, immutable World

    Raises:
        WorldIntegrityError: If the data is malformed or references dangle.
    """
    if isinstance(data, World):
        world = data
    else:
        try:
            world = World.model_validate(data)
        except ValidationError as e:
            raise WorldIntegrityError(f"Malformed world data: {e}") from e
    validate_world(world)
    return world
