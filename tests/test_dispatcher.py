"""
Tests for command dispatch: authored interactions and built-in verbs.
"""

from __future__ import annotations

import pytest
from conftest import run, world_data

from src.engine import EngineConfig, GameEngine
from src.models.flags import Holding, ObjectRevealed, ScoreGuard
from src.models.state import CONSUMED, in_container
from src.models.world import load_world


def _engine_with(data: dict, **config) -> GameEngine:
    return GameEngine(world=load_world(data), config=EngineConfig(trophy_container_id="case", **config))


class TestResolution:
    """Tests for routing and player-facing failures."""

    def test_unknown_object(self, engine: GameEngine):
        result = run(engine, "take", "unicorn")
        assert result.message == "You don't see any unicorn here."
        assert not result.increment_turn

    def test_object_elsewhere_is_not_found(self, engine: GameEngine):
        assert run(engine, "take", "apple").message == "You don't see any apple here."

    def test_missing_object_for_known_verb(self, engine: GameEngine):
        assert run(engine, "take").message == "What do you want to take?"
        assert run(engine, "turn_on").message == "What do you want to turn on?"

    def test_unknown_verb(self, engine: GameEngine):
        assert run(engine, "xyzzy").message == "I don't know how to xyzzy things."

    def test_unsupported_verb_on_object(self, engine: GameEngine):
        assert run(engine, "dance", "statue").message == "You can't dance the statue."

    def test_item_in_closed_container(self, engine: GameEngine):
        result = run(engine, "take", "coin")
        assert result.message == "The Wooden Box is closed."
        assert engine.turns == 0

    def test_item_in_locked_container(self, engine: GameEngine):
        assert run(engine, "examine", "scroll").message == "The Iron Chest is locked."

    def test_name_matching_by_alias_and_partial_name(self, engine: GameEngine):
        assert run(engine, "take", "brass key").success
        assert run(engine, "take", "oil").success
        assert engine.inventory == ("key", "lamp")

    def test_dict_commands(self, engine: GameEngine):
        assert engine.execute({"verb": "take", "object": "key"}).success


class TestMetaVerbs:
    """look, inventory and score never consume a turn."""

    def test_look(self, engine: GameEngine):
        result = run(engine, "look")
        assert result.success
        assert not result.increment_turn
        assert result.message.startswith("Hall\nA plain hall.")
        assert "brass key, oil lamp, anvil" in result.message

    def test_inventory(self, engine: GameEngine):
        assert run(engine, "inventory").message == "You are empty-handed."
        run(engine, "take", "lamp")
        result = run(engine, "inventory")
        assert result.message == "You are carrying:\n  Oil Lamp (off)"
        assert engine.turns == 1

    def test_score(self, engine: GameEngine):
        result = run(engine, "score")
        assert result.message == "Your score is 0 out of a possible 21, in 0 turns."
        assert not result.increment_turn


class TestAuthoredInteractions:
    """Tests for the authored effect pipeline."""

    def test_grant_and_score(self, engine: GameEngine):
        result = run(engine, "open", "door")
        assert result.message.startswith("The door swings open.")
        assert engine.has_flag("doorOpen")
        assert engine.has_flag(ScoreGuard(object_id="door", action="open"))
        assert engine.score_total == 5
        assert engine.turns == 1

    def test_trophy_announced(self, engine: GameEngine):
        result = run(engine, "open", "door")
        assert "You have earned the Doorman trophy!" in result.message
        assert engine.trophies == ("Doorman",)

    def test_failed_precondition_is_turn_free(self, engine: GameEngine):
        run(engine, "open", "door")
        result = run(engine, "open", "door")
        assert result.message == "It's already open."
        assert not result.success
        assert engine.turns == 1
        assert engine.score_total == 5

    def test_score_not_repeated_after_reset(self, engine: GameEngine):
        run(engine, "open", "door")
        run(engine, "close", "door")
        run(engine, "open", "door")
        assert engine.score_total == 5
        assert engine.has_flag("doorOpen")

    def test_removes_flag(self, engine: GameEngine):
        run(engine, "open", "door")
        assert run(engine, "close", "door").message == "You close the door."
        assert not engine.has_flag("doorOpen")

    def test_authored_entry_wins_over_built_in(self):
        data = world_data()
        data["scenes"]["hall"]["objects"]["box"]["interactions"] = {
            "open": {"message": "The lid is glued shut.", "requires": ["solvent"]},
        }
        engine = _engine_with(data)
        result = run(engine, "open", "box")
        assert result.message == "You can't do that right now."
        assert not engine.has_flag("boxOpen")

    def test_consume_from_inventory(self, engine: GameEngine):
        run(engine, "open", "door")
        run(engine, "go", "north")
        assert run(engine, "eat", "apple").message == "You aren't holding the apple."

        run(engine, "take", "apple")
        result = run(engine, "eat", "apple")
        assert result.message == "Crunchy."
        assert engine.containers.locate("apple") == CONSUMED
        assert not engine.has_flag(Holding(object_id="apple"))
        assert engine.score_total == 8

    def test_message_overrides_first_match_wins(self):
        data = world_data()
        data["scenes"]["hall"]["objects"]["statue"]["interactions"] = {
            "touch": {
                "message": "Cold stone.",
                "states": {"doorOpen": "A draft chills the stone.", "hasKey": "The key hums."},
            },
        }
        engine = _engine_with(data)
        assert run(engine, "touch", "statue").message == "Cold stone."
        run(engine, "take", "key")
        assert run(engine, "touch", "statue").message == "The key hums."
        run(engine, "open", "door")
        assert run(engine, "touch", "statue").message == "A draft chills the stone."

    def test_reveals_hidden_object(self):
        data = world_data()
        data["scenes"]["hall"]["objects"]["ring"] = {
            "name": "Silver Ring",
            "aliases": ["ring"],
            "can_take": True,
            "descriptions": "A thin silver ring.",
        }
        data["scenes"]["hall"]["objects"]["statue"]["interactions"] = {
            "search": {"message": "Behind the statue lies a ring.", "reveals": ["ring"], "requires": ["!ringRevealed"]},
        }
        engine = _engine_with(data)
        assert run(engine, "take", "ring").message == "You don't see any silver ring here."
        run(engine, "search", "statue")
        assert engine.has_flag(ObjectRevealed(object_id="ring"))
        assert run(engine, "take", "ring").success

    def test_transfers_into_container(self):
        data = world_data()
        data["scenes"]["hall"]["objects"]["statue"]["interactions"] = {
            "offer": {
                "message": "The statue accepts your coin.",
                "requires": ["hasKey"],
                "remove_from_inventory": ["key"],
                "add_to_container": {"container_id": "case", "item_ids": ["key"]},
            },
        }
        engine = _engine_with(data)
        run(engine, "take", "key")
        assert run(engine, "offer", "statue").success
        assert engine.containers.locate("key") == in_container("case")
        assert engine.containers.check_invariants() == []

    def test_refused_transfer_rolls_back_everything(self):
        data = world_data()
        data["scenes"]["hall"]["objects"]["statue"]["interactions"] = {
            "pray": {
                "message": "Gifts appear.",
                "grants": ["prayed"],
                "score": 4,
                "add_to_inventory": ["key", "anvil"],
            },
        }
        engine = _engine_with(data)
        before = engine.state

        result = run(engine, "pray", "statue")

        assert result.message == "The anvil is too heavy to carry along with everything else."
        assert not result.increment_turn
        assert engine.state == before
        assert not engine.has_flag("prayed")

    def test_missing_source_item_fails_before_effects(self):
        data = world_data()
        data["scenes"]["hall"]["objects"]["statue"]["interactions"] = {
            "pay": {
                "message": "Paid.",
                "grants": ["paid"],
                "remove_from_inventory": ["coin"],
            },
        }
        engine = _engine_with(data)
        result = run(engine, "pay", "statue")
        assert result.message == "You don't have the gold coin."
        assert not engine.has_flag("paid")

    def test_target_scene(self):
        data = world_data()
        data["scenes"]["hall"]["objects"]["statue"]["interactions"] = {
            "climb": {"message": "You clamber over into the garden.", "target_scene": "garden"},
        }
        engine = _engine_with(data)
        result = run(engine, "climb", "statue")
        assert result.message.startswith("You clamber over into the garden.\nGarden")
        assert engine.current_scene == "garden"

    def test_message_chosen_in_destination_scene(self):
        data = world_data()
        data["scenes"]["hall"]["objects"]["statue"]["interactions"] = {
            "climb": {
                "message": {"default": "You drop down.", "dark": "You drop into darkness."},
                "target_scene": "cellar",
            },
        }
        engine = _engine_with(data)
        result = run(engine, "climb", "statue")
        assert result.message == "You drop into darkness.\nCellar\nIt is dark here."
        assert engine.current_scene == "cellar"
        assert not engine.has_flag("hasLight")

    def test_interaction_requiring_light(self):
        data = world_data()
        data["scenes"]["cellar"]["objects"]["gem"]["requires_light"] = False
        data["scenes"]["cellar"]["objects"]["gem"]["interactions"] = {
            "polish": {"message": "It gleams.", "requires_light": True},
        }
        engine = _engine_with(data)
        run(engine, "go", "down")
        assert run(engine, "polish", "gem").message == "It's too dark to see."

    def test_on_enter(self):
        data = world_data()
        data["scenes"]["garden"]["on_enter"] = {
            "message": "Birds sing as you arrive.",
            "requires": ["!heardBirds"],
            "grants": ["heardBirds"],
        }
        engine = _engine_with(data)
        run(engine, "open", "door")
        assert "Birds sing as you arrive." in run(engine, "go", "north").message
        run(engine, "go", "south")
        assert "Birds sing" not in run(engine, "go", "north").message


class TestBuiltInVerbs:
    """Tests for the built-in verb handlers."""

    def test_take_and_score_once(self, engine: GameEngine):
        run(engine, "open", "box")
        assert run(engine, "take", "coin").message == "Taken."
        assert engine.score_total == 3
        run(engine, "drop", "coin")
        run(engine, "take", "coin")
        assert engine.score_total == 3

    def test_take_twice(self, engine: GameEngine):
        run(engine, "take", "key")
        assert run(engine, "take", "key").message == "You already have the brass key."

    def test_take_fixture(self, engine: GameEngine):
        assert run(engine, "take", "statue").message == "You can't take the statue."

    def test_drop(self, engine: GameEngine):
        assert run(engine, "drop", "key").message == "You don't have the brass key."
        run(engine, "take", "key")
        assert run(engine, "drop", "key").message == "Dropped."
        assert engine.inventory == ()

    def test_open_closed_container_reveals(self, engine: GameEngine):
        result = run(engine, "open", "box")
        assert result.message == "You open the Wooden Box. The Wooden Box contains: gold coin."
        assert "gold coin" in engine.describe()

    def test_open_non_container(self, engine: GameEngine):
        assert run(engine, "open", "statue").message == "You can't open the statue."

    def test_put_requires_target(self, engine: GameEngine):
        run(engine, "take", "key")
        assert run(engine, "put", "key").message == "What do you want to put the brass key in?"

    def test_put_into_container(self, engine: GameEngine):
        run(engine, "take", "key")
        result = run(engine, "put", "key", "case")
        assert result.message == "You put the brass key in the Trophy Case."
        assert engine.containers.contents("case") == ["key"]

    def test_unlock_open_and_read(self, engine: GameEngine):
        assert run(engine, "unlock", "chest").message == (
            "You don't have anything that fits the Iron Chest's lock."
        )
        run(engine, "take", "key")
        assert run(engine, "unlock", "chest", "key").message == "You unlock the Iron Chest."
        run(engine, "open", "chest")
        assert run(engine, "read", "scroll").message == "It reads: XYZZY."
        assert run(engine, "examine", "scroll").message == "It reads: XYZZY."

    def test_lock_with_key(self, engine: GameEngine):
        run(engine, "take", "key")
        run(engine, "unlock", "chest", "key")
        assert run(engine, "lock", "chest", "key").message == "You lock the Iron Chest."

    def test_read_without_text(self, engine: GameEngine):
        assert run(engine, "read", "statue").message == "You can't read the statue."

    def test_examine(self, engine: GameEngine):
        assert run(engine, "examine", "statue").message == "A marble statue of a forgotten king."
        assert run(engine, "look", "door").message == "A wooden door."

    def test_examine_uses_object_overrides(self, engine: GameEngine):
        run(engine, "open", "door")
        assert run(engine, "examine", "door").message == "The wooden door is open."

    def test_examine_light_source_shows_battery(self, engine: GameEngine):
        result = run(engine, "examine", "lamp")
        assert result.message == "An oil lamp.\nThe Oil Lamp has 5 turns of power remaining."

    def test_examine_open_container_lists_contents(self, engine: GameEngine):
        run(engine, "open", "box")
        assert run(engine, "examine", "box").message == (
            "A small wooden box. The Wooden Box contains: gold coin."
        )

    def test_examine_empty_container(self, engine: GameEngine):
        run(engine, "open", "box")
        run(engine, "take", "coin")
        assert run(engine, "examine", "box").message == "A small wooden box. The box is empty."

    def test_turn_on_requires_holding(self, engine: GameEngine):
        assert run(engine, "turn_on", "lamp").message == "You need to be holding the oil lamp."
        run(engine, "take", "lamp")
        assert run(engine, "turn_on", "lamp").message == "The Oil Lamp is now on."
        assert run(engine, "turn_off", "lamp").message == "The Oil Lamp is now off."

    def test_turn_on_non_source(self, engine: GameEngine):
        run(engine, "take", "key")
        assert run(engine, "turn_on", "key").message == "The Brass Key isn't a light source."

    def test_too_dark_to_take(self, engine: GameEngine):
        run(engine, "go", "down")
        result = run(engine, "take", "gem")
        assert result.message == "It's too dark to see."
        assert engine.inventory == ()


class TestVictory:
    """Placing every treasure in the trophy container wins the game."""

    @pytest.fixture
    def lit_engine(self, engine: GameEngine) -> GameEngine:
        run(engine, "take", "lamp")
        run(engine, "turn_on", "lamp")
        return engine

    def test_win(self, lit_engine: GameEngine):
        run(lit_engine, "go", "down")
        run(lit_engine, "take", "gem")
        run(lit_engine, "go", "up")

        result = run(lit_engine, "put", "gem", "case")

        assert "All the treasures rest in the Trophy Case. You have won!" in result.message
        assert lit_engine.is_won
        assert lit_engine.score_total == 10

    def test_container_score_once(self, lit_engine: GameEngine):
        run(lit_engine, "go", "down")
        run(lit_engine, "take", "gem")
        run(lit_engine, "go", "up")
        run(lit_engine, "put", "gem", "case")
        run(lit_engine, "take", "gem")
        result = run(lit_engine, "put", "gem", "case")
        assert lit_engine.score_total == 10
        assert "You have won!" not in result.message
