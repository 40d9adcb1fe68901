"""Longest common word-sequence matching with a bounded start offset."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Sequence
from typing import TypeVar

from .collation import CollationKey, split_keys, synthesize

T = TypeVar("T", bound=Hashable)

UNBOUNDED = -1


def match_common_sequence(
    a: Sequence[T],
    b: Sequence[T],
    max_start_index: int,
    return_first_match: bool = False,
) -> tuple[T, ...] | None:
    """Find the longest run of equal elements present in both sequences.

    The run must start at index ``<= max_start_index`` in both ``a`` and
    ``b``; ``-1`` lifts the bound. Candidates are scanned by start index
    in ``a`` first, then in ``b``, and only a strictly longer run replaces
    the current best, so ties go to the first run found.

    Args:
        a: First sequence; the returned run is a slice of it
        b: Second sequence
        max_start_index: Largest allowed start offset, or -1 for unbounded
        return_first_match: Return the first non-empty run instead of the longest

    Returns:
        The matched run, or None if the sequences share nothing within bounds
    """
    limit_a = len(a) if max_start_index < 0 else min(len(a), max_start_index + 1)
    limit_b = len(b) if max_start_index < 0 else min(len(b), max_start_index + 1)
    if limit_a == 0 or limit_b == 0:
        return None

    # start positions in b, ascending; positions where b differs from a[i]
    # can never start a run, so skipping them keeps the scan order intact
    positions: dict[T, list[int]] = {}
    for j in range(limit_b):
        positions.setdefault(b[j], []).append(j)

    best_start = best_len = 0
    for i in range(limit_a):
        for j in positions.get(a[i], ()):
            length = 1
            while (
                i + length < len(a)
                and j + length < len(b)
                and a[i + length] == b[j + length]
            ):
                length += 1

            if length > best_len:
                best_start, best_len = i, length
                if return_first_match:
                    return tuple(a[best_start : best_start + best_len])

    if best_len == 0:
        return None
    return tuple(a[best_start : best_start + best_len])


class CommonSequenceMatcher:
    """Fold common-sequence matching over any number of names.

    Args:
        max_start_index: Largest allowed start offset, or -1 for unbounded
        return_first_match: Stop at the first non-empty run
    """

    def __init__(self, max_start_index: int = 0, return_first_match: bool = False) -> None:
        self.max_start_index = max_start_index
        self.return_first_match = return_first_match

    def match_first_common_sequence(
        self, sequences: Iterable[Sequence[T]]
    ) -> tuple[T, ...] | None:
        common: tuple[T, ...] | None = None
        for words in sequences:
            if common is None:
                common = tuple(words)
                continue
            common = match_common_sequence(
                common, words, self.max_start_index, self.return_first_match
            )
            if common is None:
                return None
        return common

    def match_first_common_sequence_str(self, *names: str) -> str | None:
        """Common word sequence of all names, as the words of the first name."""
        keys: list[tuple[CollationKey, ...]] = [split_keys(name) for name in names]
        return synthesize(self.match_first_common_sequence(keys))


__all__ = ["CommonSequenceMatcher", "UNBOUNDED", "match_common_sequence"]
