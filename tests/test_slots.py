"""Tests for the hierarchical metadata store."""

import pytest

from lotledger.engine.slots import Slots


class TestSlots:
    def test_set_and_get_nested(self):
        slots = Slots()
        slots.set("lot-mgmt/notes", "hand built")
        assert slots.get("lot-mgmt/notes") == "hand built"
        assert slots.get("/lot-mgmt/notes/") == "hand built"

    def test_missing_returns_default(self):
        slots = Slots()
        assert slots.get("title") is None
        assert slots.get("a/b/c", "x") == "x"

    def test_get_through_leaf_returns_default(self):
        slots = Slots({"title": "Lot 0"})
        assert slots.get("title/sub", "none") == "none"

    def test_delete(self):
        slots = Slots({"a/b": 1, "a/c": 2})
        slots.delete("a/b")
        assert "a/b" not in slots
        assert slots.get("a/c") == 2

    def test_get_frame_creates(self):
        slots = Slots()
        frame = slots.get_frame("x/y")
        frame["z"] = 3
        assert slots.get("x/y/z") == 3

    def test_to_dict_is_a_copy(self):
        slots = Slots({"a/b": 1})
        d = slots.to_dict()
        d["a"]["b"] = 99
        assert slots.get("a/b") == 1

    def test_empty_path_raises(self):
        with pytest.raises(KeyError):
            Slots().set("/", 1)

    def test_truthiness(self):
        assert not Slots()
        assert Slots({"title": "Lot 0"})
