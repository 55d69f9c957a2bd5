"""Tests for VMID block allocation."""

import pytest

from vm_batch.allocator import block_conflicts, find_available_start_id
from vm_batch.errors import IdentifierExhaustedError, RangeError


class TestFindAvailableStartId:
    """Linear scan for the first free contiguous block."""

    def test_skips_taken_ids(self):
        assert find_available_start_id(5050, 3, {5050, 5051}) == 5052

    def test_free_range_unchanged(self):
        assert find_available_start_id(5050, 2, set()) == 5050

    def test_skips_past_gap_too_small(self):
        # 5052 is free but 5053 is not, so a block of 2 starts at 5054
        assert find_available_start_id(5050, 2, {5050, 5051, 5053}) == 5054

    def test_ignores_ids_below_desired(self):
        assert find_available_start_id(5050, 3, {100, 101, 5049}) == 5050

    def test_deterministic(self):
        in_use = {5050, 5052, 5055}
        results = {find_available_start_id(5050, 2, in_use) for _ in range(5)}
        assert results == {5053}

    def test_exhausted_below_ceiling(self):
        with pytest.raises(IdentifierExhaustedError):
            find_available_start_id(10, 3, {11}, max_id=12)

    def test_count_must_be_positive(self):
        with pytest.raises(RangeError):
            find_available_start_id(10, 0, set())


class TestBlockConflicts:
    """Reporting which ids in a block are taken."""

    def test_lists_conflicts_in_order(self):
        assert block_conflicts(100, 4, [103, 101, 200]) == [101, 103]

    def test_no_conflicts(self):
        assert block_conflicts(100, 2, []) == []
