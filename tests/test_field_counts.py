# ==============================================
# Tests for FieldCounts
# ==============================================

import pytest

from field_insights.aggregation import FieldCounts


class TestFieldCounts:

    def test_add_and_total(self):
        fc = FieldCounts(name="F")
        fc.add("a")
        fc.add("a")
        fc.add("b", 3)
        assert fc.to_dict() == {"a": 2, "b": 3}
        assert fc.total_entries == 5
        assert fc.distinct_values == 2
        assert "a" in fc and fc["b"] == 3

    def test_add_rejects_non_positive(self):
        with pytest.raises(ValueError):
            FieldCounts(name="F").add("a", 0)


class TestMerge:

    def test_merge(self):
        left = FieldCounts.from_dict("F", {"a": 1, "b": 2})
        right = FieldCounts.from_dict("F", {"c": 4, "a": 1})
        merged = left.merge(right)
        assert list(merged.to_dict().items()) == [("a", 2), ("b", 2), ("c", 4)]
        # inputs untouched
        assert left.to_dict() == {"a": 1, "b": 2}

    def test_merge_other_field_rejected(self):
        with pytest.raises(ValueError):
            FieldCounts(name="A").merge(FieldCounts(name="B"))


class TestSerialization:

    def test_from_dict_keeps_order(self):
        fc = FieldCounts.from_dict("F", {"z": 1, "a": 2})
        assert fc.name == "F"
        assert list(fc.items()) == [("z", 1), ("a", 2)]

    def test_from_dict_coerces_types(self):
        fc = FieldCounts.from_dict("F", {1: "3"})
        assert fc.to_dict() == {"1": 3}

    def test_from_dict_rejects_zero_counts(self):
        with pytest.raises(ValueError):
            FieldCounts.from_dict("F", {"a": 0})

    def test_to_dict_is_a_copy(self):
        fc = FieldCounts.from_dict("F", {"a": 1})
        fc.to_dict()["a"] = 99
        assert fc["a"] == 1
