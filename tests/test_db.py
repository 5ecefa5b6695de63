"""
Tests for the save repositories.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from src.db import InMemorySaveRepository, JsonFileSaveRepository
from src.engine import GameEngine
from src.models.state import WorldSnapshot


@pytest.fixture
def snapshot(engine: GameEngine) -> WorldSnapshot:
    engine.execute({"verb": "take", "object": "key"})
    return engine.export_state()


class TestInMemorySaveRepository:
    """Tests for InMemorySaveRepository."""

    def test_save_and_load(self, snapshot: WorldSnapshot):
        repo = InMemorySaveRepository()
        repo.save("slot1", snapshot)
        assert repo.load("slot1") == snapshot

    def test_load_returns_a_copy(self, snapshot: WorldSnapshot):
        repo = InMemorySaveRepository()
        repo.save("slot1", snapshot)
        repo.load("slot1").inventory.append("gem")
        assert repo.load("slot1").inventory == ["key"]

    def test_save_stores_a_copy(self, snapshot: WorldSnapshot):
        repo = InMemorySaveRepository()
        repo.save("slot1", snapshot)
        snapshot.inventory.clear()
        assert repo.load("slot1").inventory == ["key"]

    def test_missing_slot(self):
        assert InMemorySaveRepository().load("nothing") is None

    def test_empty_slot_name(self, snapshot: WorldSnapshot):
        with pytest.raises(ValueError):
            InMemorySaveRepository().save("", snapshot)

    def test_delete_and_list(self, snapshot: WorldSnapshot):
        repo = InMemorySaveRepository()
        repo.save("b", snapshot)
        repo.save("a", snapshot)
        assert repo.list_slots() == ["a", "b"]
        assert repo.delete("a")
        assert not repo.delete("a")
        assert repo.list_slots() == ["b"]


class TestJsonFileSaveRepository:
    """Tests for JsonFileSaveRepository."""

    def test_save_writes_json(self, tmp_path: Path, snapshot: WorldSnapshot):
        repo = JsonFileSaveRepository(tmp_path / "saves")
        repo.save("quicksave", snapshot)

        path = tmp_path / "saves" / "quicksave.json"
        assert path.exists()
        assert '"current_scene": "hall"' in path.read_text(encoding="utf-8")

    def test_round_trip(self, tmp_path: Path, snapshot: WorldSnapshot):
        repo = JsonFileSaveRepository(tmp_path)
        repo.save("slot-1", snapshot)
        assert repo.load("slot-1") == snapshot

    def test_overwrite(self, tmp_path: Path, snapshot: WorldSnapshot, engine: GameEngine):
        repo = JsonFileSaveRepository(tmp_path)
        repo.save("slot", snapshot)
        engine.execute({"verb": "drop", "object": "key"})
        repo.save("slot", engine.export_state())
        assert repo.load("slot").inventory == []

    def test_missing_slot(self, tmp_path: Path):
        assert JsonFileSaveRepository(tmp_path).load("nothing") is None

    def test_invalid_slot_name(self, tmp_path: Path, snapshot: WorldSnapshot):
        repo = JsonFileSaveRepository(tmp_path)
        with pytest.raises(ValueError, match="Invalid slot name"):
            repo.save("../escape", snapshot)
        with pytest.raises(ValueError):
            repo.load("")

    def test_corrupt_file(self, tmp_path: Path):
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="Corrupt save file"):
            JsonFileSaveRepository(tmp_path).load("broken")

    def test_list_slots(self, tmp_path: Path, snapshot: WorldSnapshot):
        repo = JsonFileSaveRepository(tmp_path / "saves")
        assert repo.list_slots() == []
        repo.save("zeta", snapshot)
        repo.save("alpha", snapshot)
        assert repo.list_slots() == ["alpha", "zeta"]

    def test_delete(self, tmp_path: Path, snapshot: WorldSnapshot):
        repo = JsonFileSaveRepository(tmp_path)
        repo.save("slot", snapshot)
        assert repo.delete("slot")
        assert not repo.delete("slot")
        assert repo.load("slot") is None
