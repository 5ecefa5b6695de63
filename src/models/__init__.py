"""
Core Data Models for the adventure engine.

These models define the ontology of a text-adventure world:
- Flags: typed keys for every dynamic boolean fact
- Conditions: expression trees over flags
- World: immutable authored scenes, objects, exits and interactions
- State: the single mutable WorldState and its snapshot
- Commands: the tokenized input and response contract
"""

from src.models.command import Command, CommandResponse
from src.models.condition import (
    ALWAYS,
    And,
    Atom,
    Not,
    Or,
    all_of,
    evaluate,
    none_of,
    parse_condition,
)
from src.models.flags import (
    GLOBAL_LIGHT,
    Custom,
    ExitScored,
    FlagKey,
    Holding,
    LightDead,
    LightOn,
    ObjectLocked,
    ObjectOpen,
    ObjectRevealed,
    SceneVisited,
    ScoreGuard,
    flag_name,
)
from src.models.state import (
    CONSUMED,
    INVENTORY,
    ItemLocation,
    LocationKind,
    WorldSnapshot,
    WorldState,
    create_initial_state,
    in_container,
    in_scene,
)
from src.models.world import (
    ContainerTransfer,
    DescriptionOverride,
    DescriptionTable,
    Exit,
    InteractionSpec,
    ObjectDefinition,
    SceneDefinition,
    UnknownObjectError,
    UnknownSceneError,
    World,
    WorldIntegrityError,
    load_world,
    validate_world,
)

__all__ = [
    # Commands
    "Command",
    "CommandResponse",
    # Flags
    "FlagKey",
    "ObjectOpen",
    "ObjectLocked",
    "ObjectRevealed",
    "Holding",
    "LightOn",
    "LightDead",
    "GLOBAL_LIGHT",
    "SceneVisited",
    "ScoreGuard",
    "ExitScored",
    "Custom",
    "flag_name",
    # Conditions
    "Atom",
    "Not",
    "And",
    "Or",
    "ALWAYS",
    "parse_condition",
    "evaluate",
    "all_of",
    "none_of",
    # World
    "World",
    "SceneDefinition",
    "ObjectDefinition",
    "Exit",
    "InteractionSpec",
    "ContainerTransfer",
    "DescriptionTable",
    "DescriptionOverride",
    "WorldIntegrityError",
    "UnknownSceneError",
    "UnknownObjectError",
    "load_world",
    "validate_world",
    # State
    "WorldState",
    "WorldSnapshot",
    "ItemLocation",
    "LocationKind",
    "INVENTORY",
    "CONSUMED",
    "in_scene",
    "in_container",
    "create_initial_state",
]
