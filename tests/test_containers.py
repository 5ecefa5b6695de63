"""
Tests for containers, item locations, transfers and state transactions.
"""

from __future__ import annotations

import pytest

from src.models.flags import Holding, ObjectOpen, ObjectRevealed
from src.models.state import CONSUMED, INVENTORY, WorldState, in_container, in_scene
from src.models.world import UnknownObjectError, WorldIntegrityError
from src.services import ContainerService, StateTransaction


class TestLocations:
    """Tests for the single-location invariant."""

    def test_locate(self, containers: ContainerService):
        assert containers.locate("coin") == in_container("box")
        assert containers.locate("key") == in_scene("hall")
        assert containers.locate("gem") == in_scene("cellar")

    def test_initial_state_is_consistent(self, containers: ContainerService):
        assert containers.check_invariants() == []

    def test_locate_unknown_item(self, containers: ContainerService):
        with pytest.raises(UnknownObjectError):
            containers.locate("door")

    def test_locate_duplicated_item(self, containers: ContainerService, state: WorldState):
        state.inventory.append("coin")
        with pytest.raises(WorldIntegrityError, match="2 locations"):
            containers.locate("coin")
        assert containers.check_invariants() == ["coin: 2 locations"]

    def test_locate_missing_item(self, containers: ContainerService, state: WorldState):
        state.scene_items["hall"].remove("key")
        with pytest.raises(WorldIntegrityError, match="0 locations"):
            containers.locate("key")

    def test_scene_of_follows_containers(self, containers: ContainerService):
        assert containers.scene_of("coin") == "hall"
        assert containers.scene_of("gem") == "cellar"


class TestContainerState:
    """Tests for open/close/lock/unlock."""

    def test_closed_container_blocks_access(self, containers: ContainerService):
        failure = containers.check_access("box")
        assert failure is not None
        assert failure.message == "The Wooden Box is closed."
        assert failure.increment_turn is False

    def test_locked_reported_before_closed(self, containers: ContainerService):
        failure = containers.check_access("chest")
        assert failure.message == "The Iron Chest is locked."

    def test_open_reveals_contents(self, containers: ContainerService, state: WorldState):
        result = containers.open("box")
        assert result.success
        assert "gold coin" in result.message
        assert state.has(ObjectOpen(object_id="box"))
        assert state.has(ObjectRevealed(object_id="coin"))
        assert containers.check_access("box") is None

    def test_open_twice(self, containers: ContainerService):
        containers.open("box")
        result = containers.open("box")
        assert not result.success
        assert result.message == "The Wooden Box is already open."

    def test_open_locked(self, containers: ContainerService):
        result = containers.open("chest")
        assert not result.success
        assert "locked" in result.message

    def test_close(self, containers: ContainerService):
        assert not containers.close("box").success
        containers.open("box")
        assert containers.close("box").success
        assert not containers.is_open("box")

    def test_unlock_requires_carried_key(self, containers: ContainerService, state: WorldState):
        result = containers.unlock("chest")
        assert result.message == "You don't have anything that fits the Iron Chest's lock."
        assert containers.is_locked("chest")

        containers.transfer_to_inventory("key")
        assert containers.unlock("chest", "key").success
        assert not containers.is_locked("chest")

    def test_unlock_with_wrong_key(self, containers: ContainerService):
        containers.transfer_to_inventory("lamp")
        result = containers.unlock("chest", "lamp")
        assert not result.success
        assert containers.is_locked("chest")

    def test_lock_requires_closed(self, containers: ContainerService):
        containers.transfer_to_inventory("key")
        containers.unlock("chest")
        containers.open("chest")
        assert containers.lock("chest").message == "You'll have to close the Iron Chest first."
        containers.close("chest")
        assert containers.lock("chest").success
        assert containers.lock("chest").message == "The Iron Chest is already locked."

    def test_not_lockable(self, containers: ContainerService):
        containers.close("case")
        assert containers.lock("case").message == "The Trophy Case has no lock."

    def test_not_a_container(self, containers: ContainerService):
        assert containers.open("door").message == "The Door isn't a container."


class TestTransfers:
    """Tests for moving items between locations."""

    def test_take_from_scene(self, containers: ContainerService, state: WorldState):
        result = containers.transfer_to_inventory("key")
        assert result.message == "Taken."
        assert state.inventory == ["key"]
        assert "key" not in state.scene_items["hall"]
        assert state.has(Holding(object_id="key"))
        assert containers.check_invariants() == []

    def test_take_from_closed_container_fails(self, containers: ContainerService, state: WorldState):
        result = containers.transfer_to_inventory("coin")
        assert not result.success
        assert state.containers["box"] == ["coin"]
        assert state.inventory == []

    def test_take_twice(self, containers: ContainerService):
        containers.transfer_to_inventory("key")
        assert containers.transfer_to_inventory("key").message == "You already have the brass key."

    def test_too_heavy(self, containers: ContainerService, state: WorldState):
        result = containers.transfer_to_inventory("anvil")
        assert result.message == "The anvil is too heavy to carry along with everything else."
        assert state.scene_items["hall"] == ["key", "lamp", "anvil"]
        assert state.inventory == []

    def test_drop_into_scene(self, containers: ContainerService, state: WorldState):
        containers.transfer_to_inventory("key")
        result = containers.transfer_from_inventory("key", in_scene("hall"))
        assert result.message == "Dropped."
        assert not state.has(Holding(object_id="key"))
        assert "key" in state.scene_items["hall"]

    def test_put_into_container(self, containers: ContainerService, state: WorldState):
        containers.transfer_to_inventory("key")
        result = containers.transfer_from_inventory("key", in_container("case"))
        assert result.message == "You put the brass key in the Trophy Case."
        assert state.containers["case"] == ["key"]

    def test_full_container_leaves_item_in_inventory(self, containers: ContainerService, state: WorldState):
        containers.open("box")
        containers.transfer_to_inventory("key")
        containers.transfer_to_inventory("lamp")
        assert containers.transfer_from_inventory("key", in_container("box")).success

        result = containers.transfer_from_inventory("lamp", in_container("box"))

        assert result.message == "The Wooden Box is full."
        assert state.inventory == ["lamp"]
        assert state.containers["box"] == ["coin", "key"]
        assert state.has(Holding(object_id="lamp"))
        assert containers.check_invariants() == []

    def test_refused_transfer_restores_position(self, containers: ContainerService, state: WorldState):
        for item_id in ("key", "lamp"):
            containers.transfer_to_inventory(item_id)
        containers.transfer_from_inventory("key", in_scene("hall"))
        before = list(state.inventory)

        result = containers.transfer("lamp", in_container("chest"), INVENTORY)

        assert not result.success
        assert state.inventory == before

    def test_put_into_closed_container(self, containers: ContainerService, state: WorldState):
        containers.transfer_to_inventory("key")
        result = containers.transfer_from_inventory("key", in_container("box"))
        assert result.message == "The Wooden Box is closed."
        assert state.inventory == ["key"]

    def test_not_holding(self, containers: ContainerService):
        result = containers.transfer_from_inventory("key", in_scene("hall"))
        assert result.message == "You don't have the brass key."

    def test_consume(self, containers: ContainerService, state: WorldState):
        containers.transfer_to_inventory("key")
        assert containers.consume("key").success
        assert containers.locate("key") == CONSUMED
        assert state.consumed == ["key"]
        assert containers.validate_source("key").message == "You don't see any brass key here."

    def test_relocate_ignores_closed_containers(self, containers: ContainerService, state: WorldState):
        assert containers.relocate("coin", INVENTORY).success
        assert state.inventory == ["coin"]
        assert state.containers["box"] == []

    def test_relocate_respects_capacity(self, containers: ContainerService, state: WorldState):
        containers.relocate("key", in_container("box"))
        result = containers.relocate("lamp", in_container("box"))
        assert result.message == "The Wooden Box is full."
        assert "lamp" in state.scene_items["hall"]

    def test_inventory_weight(self, containers: ContainerService):
        containers.transfer_to_inventory("key")
        containers.transfer_to_inventory("lamp")
        assert containers.inventory_weight() == 3


class TestAddRemove:
    """Tests for add_item / remove_item keeping each item in one place."""

    def test_add_from_scene(self, containers: ContainerService, state: WorldState):
        containers.open("box")
        result = containers.add_item("box", "key")
        assert result.message == "You put the brass key in the Wooden Box."
        assert containers.locate("key") == in_container("box")
        assert "key" not in state.scene_items["hall"]
        assert containers.check_invariants() == []

    def test_add_from_inventory(self, containers: ContainerService, state: WorldState):
        containers.open("box")
        containers.transfer_to_inventory("key")
        assert containers.add_item("box", "key").success
        assert state.inventory == []
        assert not state.has(Holding(object_id="key"))
        assert containers.check_invariants() == []

    def test_add_to_closed_container(self, containers: ContainerService, state: WorldState):
        result = containers.add_item("box", "key")
        assert result.message == "The Wooden Box is closed."
        assert containers.locate("key") == in_scene("hall")
        assert state.containers["box"] == ["coin"]

    def test_add_to_full_container(self, containers: ContainerService, state: WorldState):
        containers.open("box")
        containers.add_item("box", "key")
        assert containers.add_item("box", "lamp").message == "The Wooden Box is full."
        assert "lamp" in state.scene_items["hall"]
        assert containers.check_invariants() == []

    def test_remove_to_scene_floor(self, containers: ContainerService, state: WorldState):
        containers.open("box")
        assert containers.remove_item("box", "coin").success
        assert containers.locate("coin") == in_scene("hall")
        assert state.containers["box"] == []
        assert containers.check_invariants() == []

    def test_remove_from_closed_container(self, containers: ContainerService, state: WorldState):
        result = containers.remove_item("box", "coin")
        assert result.message == "The Wooden Box is closed."
        assert state.containers["box"] == ["coin"]

    def test_remove_item_not_inside(self, containers: ContainerService, state: WorldState):
        containers.open("box")
        result = containers.remove_item("box", "key")
        assert result.message == "The brass key isn't in the Wooden Box."
        assert containers.locate("key") == in_scene("hall")


class TestStateTransaction:
    """Tests for all-or-nothing state mutation."""

    def test_commit(self, state: WorldState):
        with StateTransaction(state):
            state.score = 10
        assert state.score == 10

    def test_explicit_rollback(self, state: WorldState):
        with StateTransaction(state) as tx:
            state.score = 10
            state.flags.add("temporary")
            state.inventory.append("key")
            tx.rollback()
        assert state.score == 0
        assert "temporary" not in state.flags
        assert state.inventory == []
        assert tx.rolled_back

    def test_rollback_on_exception(self, state: WorldState):
        with pytest.raises(RuntimeError):
            with StateTransaction(state):
                state.turns = 99
                raise RuntimeError("boom")
        assert state.turns == 0

    def test_rollback_keeps_identity(self, state: WorldState, containers: ContainerService):
        with StateTransaction(state) as tx:
            containers.transfer_to_inventory("key")
            tx.rollback()
        assert containers.state is state
        assert containers.locate("key") == in_scene("hall")

    def test_rollback_outside_transaction(self, state: WorldState):
        with pytest.raises(RuntimeError):
            StateTransaction(state).rollback()
