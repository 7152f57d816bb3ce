"""MERIT bounded collection tests."""

import pytest

from core.primitives.bounded import (
    BoundedCollectionFull,
    OverflowPolicy,
    append_capped,
    append_capped_unique,
    would_overflow,
)


class TestAppendCapped:
    def test_appends_below_cap(self):
        assert append_capped((1, 2), 3, cap=3) == (1, 2, 3)

    def test_full_collection_drops_by_default(self):
        items = (1, 2, 3)
        assert append_capped(items, 4, cap=3) == items

    def test_full_collection_rejects_under_reject_policy(self):
        with pytest.raises(BoundedCollectionFull) as exc:
            append_capped((1, 2), 3, cap=2, policy=OverflowPolicy.REJECT)
        assert exc.value.cap == 2
        assert exc.value.value == 3

    def test_duplicates_allowed(self):
        assert append_capped((1,), 1, cap=5) == (1, 1)

    def test_zero_cap_never_grows(self):
        assert append_capped((), "x", cap=0) == ()

    def test_input_not_mutated(self):
        items = ["a"]
        result = append_capped(items, "b", cap=5)
        assert items == ["a"]
        assert result == ("a", "b")

    @pytest.mark.parametrize("cap", [-1, 1.5, True])
    def test_invalid_cap(self, cap):
        with pytest.raises(ValueError, match="cap"):
            append_capped((), 1, cap=cap)


class TestAppendCappedUnique:
    def test_present_value_unchanged(self):
        assert append_capped_unique(("a", "b"), "a", cap=5) == ("a", "b")

    def test_present_value_unchanged_even_when_full(self):
        items = ("a", "b")
        assert append_capped_unique(items, "b", cap=2, policy=OverflowPolicy.REJECT) == items

    def test_new_value_appended(self):
        assert append_capped_unique(("a",), "b", cap=5) == ("a", "b")

    def test_new_value_on_full_collection(self):
        assert append_capped_unique(("a",), "b", cap=1) == ("a",)
        with pytest.raises(BoundedCollectionFull):
            append_capped_unique(("a",), "b", cap=1, policy=OverflowPolicy.REJECT)

    def test_builds_ordered_set(self):
        items = ()
        for tag in ["b", "a", "b", "c", "a"]:
            items = append_capped_unique(items, tag, cap=10)
        assert items == ("b", "a", "c")


class TestWouldOverflow:
    def test_unique_present_never_overflows(self):
        assert would_overflow((1, 2), 2, 2, unique=True) is False

    def test_full_overflows(self):
        assert would_overflow((1, 2), 3, 2, unique=True) is True
        assert would_overflow((1, 2), 2, 2, unique=False) is True

    def test_room_left(self):
        assert would_overflow((1,), 2, 2, unique=False) is False
