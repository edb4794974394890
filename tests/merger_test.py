import pytest

from ripple.core.merger import clone
from ripple.core.merger import is_plain_mapping
from ripple.core.merger import merge


@pytest.mark.unit
class TestMerge:
    def test_returns_mutated_receiver(self):
        receiver = {"a": 1}
        result = merge(receiver, {"b": 2})
        assert result is receiver
        assert receiver == {"a": 1, "b": 2}

    def test_supplier_wins_on_scalars(self):
        assert merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_mappings_are_merged_recursively(self):
        receiver = {"hero": {"name": "saitama", "rank": "C"}}
        merge(receiver, {"hero": {"rank": "S", "class": "B"}})
        assert receiver == {
            "hero": {"name": "saitama", "rank": "S", "class": "B"}
        }

    def test_non_mapping_receiver_entry_is_replaced(self):
        receiver = {"a": 1, "b": [1]}
        merge(receiver, {"a": {"x": 1}, "b": {"y": 2}})
        assert receiver == {"a": {"x": 1}, "b": {"y": 2}}

    def test_lists_are_copied(self):
        team = ["luffy", "zoro"]
        receiver = merge({}, {"crew": team})
        assert receiver["crew"] == team
        assert receiver["crew"] is not team
        receiver["crew"].append("nami")
        assert team == ["luffy", "zoro"]

    def test_nested_mappings_are_not_aliased(self):
        supplier = {"hero": {"name": "saitama"}}
        receiver = merge({}, supplier)
        receiver["hero"]["name"] = "genos"
        assert supplier["hero"]["name"] == "saitama"

    def test_other_values_are_shared(self):
        marker = object()
        members = ("a", "b")
        receiver = merge({}, {"marker": marker, "members": members, "fn": len})
        assert receiver["marker"] is marker
        assert receiver["members"] is members
        assert receiver["fn"] is len

    def test_clone(self):
        supplier = {"a": {"b": [1, 2]}}
        cloned = clone(supplier)
        assert cloned == supplier
        assert cloned["a"] is not supplier["a"]
        assert cloned["a"]["b"] is not supplier["a"]["b"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ({}, True),
        ({"a": 1}, True),
        ([], False),
        ("dict", False),
        (None, False),
    ],
)
def test_is_plain_mapping(value, expected):
    assert is_plain_mapping(value) is expected
