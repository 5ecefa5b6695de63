"""
Service layer for the adventure engine.

Services share one WorldState and change it only through their own
operations. The dispatcher composes them to resolve a command.
"""

from __future__ import annotations

from src.services.containers import ContainerService
from src.services.dispatcher import META_VERBS, InteractionDispatcher
from src.services.flags import FlagService
from src.services.light import DEFAULT_BATTERY_LIFE, LightService, LightState
from src.services.movement import MovementService, normalize_direction
from src.services.scenes import ResolvedObject, ResolvedScene, SceneResolver
from src.services.score import Achievement, ScoreAward, ScoreService
from src.services.text import reset_templates, set_templates, text
from src.services.transaction import StateTransaction

__all__ = [
    "Achievement",
    "ContainerService",
    "DEFAULT_BATTERY_LIFE",
    "FlagService",
    "InteractionDispatcher",
    "LightService",
    "LightState",
    "META_VERBS",
    "MovementService",
    "ResolvedObject",
    "ResolvedScene",
    "SceneResolver",
    "ScoreAward",
    "ScoreService",
    "StateTransaction",
    "normalize_direction",
    "reset_templates",
    "set_templates",
    "text",
]
