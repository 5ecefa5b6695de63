"""
Engine Configuration for the adventure engine.

Tunables that are not part of authored content: battery life, carrying
capacity, achievement thresholds and where treasures must end up.
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, Field, ValidationError

from src.services.containers import DEFAULT_MAX_WEIGHT
from src.services.light import DEFAULT_BATTERY_LIFE
from src.services.score import Achievement

logger = logging.getLogger(__name__)


class EngineConfig(BaseModel):
    """
    Engine configuration.

    Configuration via environment variables (see ``from_env``):
        ADVENTURE_BATTERY_LIFE: Turns a light source lasts while on
        ADVENTURE_MAX_WEIGHT: Total weight the player can carry
        ADVENTURE_START_SCENE: Override the world's starting scene
    """

    # Light
    battery_life: int = Field(default=DEFAULT_BATTERY_LIFE, ge=1)

    # Inventory
    max_inventory_weight: int = Field(default=DEFAULT_MAX_WEIGHT, ge=0)

    # Scoring
    achievements: list[Achievement] = Field(default_factory=list)
    trophy_container_id: str | None = Field(
        default="trophyCase", description="Container that must hold every treasure to win"
    )

    # World
    starting_scene: str | None = Field(default=None, description="Overrides the world's start")

    @classmethod
    def from_env(cls, **overrides: object) -> EngineConfig:
        """
        Build a config from environment variables.

        Missing or unparseable values fall back to the defaults.
        """
        values: dict[str, object] = {}
        for env_name, key in (
            ("ADVENTURE_BATTERY_LIFE", "battery_life"),
            ("ADVENTURE_MAX_WEIGHT", "max_inventory_weight"),
        ):
            raw = os.getenv(env_name)
            if not raw:
                continue
            try:
                values[key] = int(raw)
            except ValueError:
                logger.warning("Ignoring %s=%r: not an integer", env_name, raw)

        if os.getenv("ADVENTURE_START_SCENE"):
            values["starting_scene"] = os.getenv("ADVENTURE_START_SCENE")

        values.update(overrides)
        try:
            return cls(**values)
        except ValidationError as e:
            logger.warning("Invalid engine settings in environment, using defaults: %s", e)
            return cls(**overrides)
