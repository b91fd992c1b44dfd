"""Unit tests for IdentitySequencer"""

import pytest

from src.application.services.identity_sequencer import IdentitySequencer


@pytest.mark.parametrize(
    "ids, expected",
    [
        ([], 1),
        ([1, 2, 4], 3),
        ([1, 2, 3], 4),
        ([2, 3], 1),
        ([5], 1),
        ([1], 2),
        ([4, 1, 2], 3),
    ],
)
def test_next_available_id(ids, expected):
    assert IdentitySequencer.next_available_id(ids) == expected


def test_next_available_id_ignores_duplicates():
    assert IdentitySequencer.next_available_id([1, 1, 2, 2]) == 3


class TestRenumbering:
    def test_gaps_are_closed_in_original_order(self):
        """
        GIVEN ids 1, 3, 7, 9
        WHEN computing the renumbering
        THEN rows map to 1, 2, 3, 4 keeping their relative order
        """
        assert IdentitySequencer.renumbering([9, 1, 7, 3]) == [(3, 2), (7, 3), (9, 4)]

    def test_contiguous_ids_need_no_moves(self):
        assert IdentitySequencer.renumbering([1, 2, 3]) == []

    def test_empty_table(self):
        assert IdentitySequencer.renumbering([]) == []

    def test_moves_never_target_an_unmoved_id(self):
        """
        GIVEN a renumbering applied in order
        WHEN each move lands
        THEN its target is free at that moment (no transient duplicate)
        """
        ids = [2, 3, 5, 8, 13, 21]
        occupied = set(ids)
        for old, new in IdentitySequencer.renumbering(ids):
            assert new not in occupied
            occupied.remove(old)
            occupied.add(new)
        assert occupied == {1, 2, 3, 4, 5, 6}
