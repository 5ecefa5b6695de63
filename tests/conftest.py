"""Shared fixtures: a small three-room world exercising every engine feature."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

import pytest

from src.engine import EngineConfig, GameEngine
from src.models.command import Command, CommandResponse
from src.models.state import WorldState, create_initial_state
from src.models.world import World, load_world
from src.services import (
    ContainerService,
    FlagService,
    LightService,
    ScoreService,
    reset_templates,
)
from src.services.score import Achievement

TEST_WORLD: dict[str, Any] = {
    "starting_scene": "hall",
    "scenes": {
        "hall": {
            "name": "Hall",
            "light": True,
            "descriptions": {
                "default": "A plain hall.",
                "states": {"doorOpen": "A plain hall. The door to the north stands open."},
            },
            "objects": {
                "door": {
                    "name": "Door",
                    "visible_on_entry": True,
                    "descriptions": {
                        "default": "A wooden door.",
                        "states": {"doorOpen": "The wooden door is open."},
                    },
                    "interactions": {
                        "open": {
                            "message": "The door swings open.",
                            "requires": ["!doorOpen"],
                            "failure_message": "It's already open.",
                            "grants": ["doorOpen"],
                            "score": 5,
                        },
                        "close": {
                            "message": "You close the door.",
                            "requires": ["doorOpen"],
                            "failure_message": "It's already closed.",
                            "removes": ["doorOpen"],
                        },
                    },
                },
                "box": {
                    "name": "Wooden Box",
                    "aliases": ["box"],
                    "visible_on_entry": True,
                    "is_container": True,
                    "capacity": 2,
                    "contents": ["coin"],
                    "descriptions": {"default": "A small wooden box.", "empty": "The box is empty."},
                },
                "coin": {
                    "name": "Gold Coin",
                    "aliases": ["coin"],
                    "can_take": True,
                    "weight": 1,
                    "scoring": {"take": 3},
                    "descriptions": "A shiny coin.",
                },
                "chest": {
                    "name": "Iron Chest",
                    "aliases": ["chest"],
                    "visible_on_entry": True,
                    "is_container": True,
                    "locked": True,
                    "key_id": "key",
                    "contents": ["scroll"],
                    "descriptions": "A heavy iron chest.",
                },
                "scroll": {
                    "name": "Scroll",
                    "can_take": True,
                    "weight": 1,
                    "descriptions": {"default": "A rolled scroll.", "examine": "It reads: XYZZY."},
                },
                "key": {
                    "name": "Brass Key",
                    "aliases": ["key"],
                    "visible_on_entry": True,
                    "can_take": True,
                    "weight": 1,
                    "descriptions": "A small brass key.",
                },
                "lamp": {
                    "name": "Oil Lamp",
                    "aliases": ["lamp"],
                    "visible_on_entry": True,
                    "can_take": True,
                    "weight": 2,
                    "provides_light": True,
                    "descriptions": "An oil lamp.",
                },
                "anvil": {
                    "name": "Anvil",
                    "visible_on_entry": True,
                    "can_take": True,
                    "weight": 50,
                    "descriptions": "A very heavy anvil.",
                },
                "statue": {
                    "name": "Statue",
                    "visible_on_entry": True,
                    "descriptions": "A marble statue of a forgotten king.",
                },
                "case": {
                    "name": "Trophy Case",
                    "aliases": ["case"],
                    "visible_on_entry": True,
                    "is_container": True,
                    "open": True,
                    "descriptions": "A glass trophy case.",
                },
            },
            "exits": [
                {
                    "direction": "north",
                    "target_scene": "garden",
                    "description": "A door leads north to the garden.",
                    "requires": ["doorOpen"],
                    "failure_message": "The door is closed.",
                    "score": 2,
                },
                {"direction": "down", "target_scene": "cellar", "description": "Stairs lead down."},
            ],
        },
        "garden": {
            "name": "Garden",
            "light": True,
            "descriptions": {"default": "A sunny garden.", "visited": "The garden again."},
            "objects": {
                "apple": {
                    "name": "Apple",
                    "visible_on_entry": True,
                    "can_take": True,
                    "weight": 1,
                    "descriptions": "A red apple.",
                    "interactions": {
                        "eat": {
                            "message": "Crunchy.",
                            "requires": ["hasApple"],
                            "failure_message": "You aren't holding the apple.",
                            "remove_from_inventory": ["apple"],
                            "score": 1,
                        },
                    },
                },
            },
            "exits": [{"direction": "south", "target_scene": "hall"}],
        },
        "cellar": {
            "name": "Cellar",
            "light": False,
            "descriptions": {"default": "A damp cellar.", "dark": "It is dark here."},
            "objects": {
                "gem": {
                    "name": "Green Gem",
                    "aliases": ["gem"],
                    "visible_on_entry": True,
                    "requires_light": True,
                    "can_take": True,
                    "weight": 1,
                    "is_treasure": True,
                    "container_targets": {"case": 10},
                    "descriptions": "A glittering gem.",
                },
            },
            "exits": [{"direction": "up", "target_scene": "hall", "requires_light": False}],
        },
    },
}


def world_data() -> dict[str, Any]:
    """A fresh, mutable copy of the test world for tests that edit it."""
    return deepcopy(TEST_WORLD)


def run(engine: GameEngine, verb: str, obj: str | None = None, target: str | None = None) -> CommandResponse:
    """Execute one command against an engine."""
    preposition = "in" if target and verb == "put" else ("with" if target else None)
    return engine.execute(Command(verb=verb, object=obj, target=target, preposition=preposition))


@pytest.fixture(autouse=True)
def _default_templates():
    yield
    reset_templates()


@pytest.fixture
def world() -> World:
    return load_world(TEST_WORLD)


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(
        battery_life=5,
        trophy_container_id="case",
        achievements=[Achievement(threshold=5, trophy="Doorman")],
    )


@pytest.fixture
def engine(world: World, config: EngineConfig) -> GameEngine:
    return GameEngine(world=world, config=config)


@pytest.fixture
def state(world: World) -> WorldState:
    return create_initial_state(world)


@pytest.fixture
def flags(state: WorldState) -> FlagService:
    return FlagService(state)


@pytest.fixture
def light(state: WorldState, world: World, flags: FlagService) -> LightService:
    return LightService(state, world, flags, battery_life=3)


@pytest.fixture
def containers(state: WorldState, world: World, flags: FlagService, light: LightService) -> ContainerService:
    return ContainerService(state, world, flags, light)


@pytest.fixture
def score(state: WorldState, world: World, flags: FlagService) -> ScoreService:
    return ScoreService(
        state,
        world,
        flags,
        achievements=[Achievement(threshold=10, trophy="Ten"), Achievement(threshold=5, trophy="Five")],
        trophy_container_id="case",
    )
