"""
Save storage layer for the adventure engine.

Provides an interface and implementations for storing game snapshots:
- InMemorySaveRepository: For testing (no filesystem access)
- JsonFileSaveRepository: One JSON file per slot in a save directory
"""

from __future__ import annotations

from src.db.files import JsonFileSaveRepository
from src.db.interfaces import SaveRepository
from src.db.memory import InMemorySaveRepository

__all__ = [
    # Protocol interface
    "SaveRepository",
    # Implementations
    "InMemorySaveRepository",
    "JsonFileSaveRepository",
]
