"""
Authored content for the adventure engine.

- starter_world: The white house, ready to play
"""

from __future__ import annotations

from src.content.starter_world import (
    STARTER_ACHIEVEMENTS,
    STARTER_WORLD_DATA,
    load_starter_world,
    starter_config,
)

__all__ = [
    "STARTER_ACHIEVEMENTS",
    "STARTER_WORLD_DATA",
    "load_starter_world",
    "starter_config",
]
