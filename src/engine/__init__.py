"""
Core Engine for the adventure engine.

The engine orchestrates:
- Command dispatch (authored interactions first, then built-in verbs)
- Turn progression (turn counter and light-source depletion)
- State snapshots for saving and restoring games
"""

from __future__ import annotations

from src.engine.game import GameEngine
from src.engine.models import EngineConfig

__all__ = [
    "EngineConfig",
    "GameEngine",
]
