"""
Identity sequencing for integer primary keys.

Pure computation; the store side (locking, renumbering rows, advancing
the serial sequence) lives in SequenceRepository and RegistryStorage.
"""

from collections.abc import Iterable


class IdentitySequencer:
    """Computes the next free id and the renumbering of a table's ids"""

    @staticmethod
    def next_available_id(ids: Iterable[int]) -> int:
        """
        Smallest positive id not in use.

        Returns 1 for an empty table, the first gap in [1, max] when there
        is one, and max + 1 otherwise.
        """
        used = set(ids)
        if not used:
            return 1
        highest = max(used)
        for candidate in range(1, highest + 1):
            if candidate not in used:
                return candidate
        return highest + 1

    @staticmethod
    def renumbering(ids: Iterable[int]) -> list[tuple[int, int]]:
        """
        (old_id, new_id) pairs that make the ids exactly [1..N].

        Rows keep their relative order. Pairs are ascending by old id, and
        new_id <= old_id, so applying them in order never collides with a
        row that has not been moved yet.
        """
        ordered = sorted(set(ids))
        return [(old, rank) for rank, old in enumerate(ordered, start=1) if old != rank]
