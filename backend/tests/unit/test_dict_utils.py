"""
Unit tests for nested dict helpers.
"""

import pytest
from core.sentinels import MISSING, or_none
from utils.dict_utils import deep_merge, delete_nested_value, get_nested_value, set_nested_value, split_path


class TestGetNestedValue:
    """Test cases for get_nested_value."""

    def test_resolves_nested_path(self):
        """Test dot-path resolution through nested dicts."""
        obj = {"a": {"b": {"c": 3}}}
        assert get_nested_value(obj, "a.b.c") == 3
        assert get_nested_value(obj, "a.b") == {"c": 3}

    def test_absent_path_is_missing(self):
        """Test that an absent key yields MISSING rather than None."""
        obj = {"a": {"b": None}}
        assert get_nested_value(obj, "a.x") is MISSING
        assert get_nested_value(obj, "x.y.z") is MISSING

    def test_explicit_none_is_not_missing(self):
        """Test that a present None value is returned as None."""
        assert get_nested_value({"a": {"b": None}}, "a.b") is None

    def test_non_container_intermediate(self):
        """Test that walking through a scalar short-circuits to MISSING."""
        assert get_nested_value({"a": 5}, "a.b") is MISSING
        assert get_nested_value({"a": "text"}, "a.length") is MISSING
        assert get_nested_value(None, "a") is MISSING

    def test_numeric_segments_index_lists(self):
        """Test that digit segments index into lists."""
        obj = {"points": [{"x": 1}, {"x": 2}]}
        assert get_nested_value(obj, "points.1.x") == 2
        assert get_nested_value(obj, "points.5.x") is MISSING
        assert get_nested_value(obj, "points.x") is MISSING

    def test_empty_path_returns_object(self):
        """Test that an empty path returns the object itself."""
        obj = {"a": 1}
        assert get_nested_value(obj, "") is obj


class TestSetNestedValue:
    """Test cases for set_nested_value."""

    def test_creates_intermediates(self):
        """Test that missing intermediate dicts are created."""
        obj = {}
        set_nested_value(obj, "info.name", "Gate")
        assert obj == {"info": {"name": "Gate"}}

    def test_replaces_non_dict_intermediate(self):
        """Test that a scalar intermediate is replaced by a dict."""
        obj = {"info": "oops"}
        set_nested_value(obj, "info.name", "Gate")
        assert obj == {"info": {"name": "Gate"}}

    def test_preserves_siblings(self):
        """Test that existing sibling keys survive."""
        obj = {"info": {"type": "entry"}}
        set_nested_value(obj, "info.name", "Gate")
        assert obj == {"info": {"type": "entry", "name": "Gate"}}

    def test_no_op_cases(self):
        """Test that non-dict targets and empty paths are ignored."""
        obj = {"a": 1}
        set_nested_value(obj, "", 2)
        assert obj == {"a": 1}
        set_nested_value(None, "a", 2)  # type: ignore[arg-type]


class TestDeleteNestedValue:
    """Test cases for delete_nested_value."""

    def test_deletes_nested_key(self):
        """Test removing a nested key."""
        obj = {"direction": {"start": 1, "end": 2}, "id": "x"}
        delete_nested_value(obj, "direction")
        assert obj == {"id": "x"}

        obj = {"info": {"name": "a", "type": "b"}}
        delete_nested_value(obj, "info.name")
        assert obj == {"info": {"type": "b"}}

    def test_absent_path_is_ignored(self):
        """Test that deleting an absent path does nothing."""
        obj = {"a": 1}
        delete_nested_value(obj, "b.c")
        delete_nested_value(obj, "a.c")
        assert obj == {"a": 1}


class TestDeepMerge:
    """Test cases for deep_merge."""

    def test_merges_nested_dicts(self):
        """Test that nested keys are added and overwritten without dropping others."""
        target = {"output": {"id": "id"}, "input": {"elements": {"a": "b"}, "layers": {}}}
        source = {"output": {"color": "rgb(color)"}, "input": {"elements": {"a": "c"}}}

        merged = deep_merge(target, source)

        assert merged == {
            "output": {"id": "id", "color": "rgb(color)"},
            "input": {"elements": {"a": "c"}, "layers": {}},
        }

    def test_returns_new_dict(self):
        """Test that neither input is mutated."""
        target = {"a": {"b": 1}}
        source = {"a": {"c": 2}}
        deep_merge(target, source)
        assert target == {"a": {"b": 1}}
        assert source == {"a": {"c": 2}}

    def test_lists_are_atomic(self):
        """Test that lists are replaced, not concatenated."""
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}


class TestMissingSentinel:
    """Test cases for the MISSING sentinel."""

    def test_singleton_and_falsy(self):
        """Test sentinel identity and truthiness."""
        import copy
        assert copy.deepcopy(MISSING) is MISSING
        assert copy.copy(MISSING) is MISSING
        assert not MISSING
        assert repr(MISSING) == "MISSING"

    def test_or_none(self):
        """Test collapsing MISSING into None."""
        assert or_none(MISSING) is None
        assert or_none(0) == 0


def test_split_path():
    """Test dot-path splitting."""
    assert split_path("a.b.c") == ["a", "b", "c"]
    assert split_path("") == []
