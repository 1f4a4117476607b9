"""Overlap detection, enumeration and merging of text fragments.

A fragment `a` overlaps a fragment `b` by `k` characters when the last `k`
characters of `a` are the first `k` characters of `b`. Merging the two keeps
`a` without its overlapping tail, followed by all of `b`:

    >>> overlap("ABCDEF", "DEFG")
    3
    >>> merge("ABCDEF", "DEFG", 3)
    'ABCDEFG'
"""

from abc import ABC, abstractmethod
from typing_extensions import override

from defrag.data_types import OverlapCandidate


def overlap(a: str, b: str, *, allow_contained: bool = True) -> int:
    """Return the number of characters at the tail of `a` that start `b`.

    Args:
        a: The overlapping fragment.
        b: The overlapped fragment.
        allow_contained: When True and `a` occurs anywhere inside `b`, the
            overlap is the whole of `a`, so merging absorbs it into `b`.

    Returns:
        The overlap length, 0 when there is none. A fragment never overlaps
        an equal fragment.

    Examples:
        overlap("XYZABC", "ABCDEF") → 3
        overlap("BCDE", "ABCDEF") → 4 (contained)
        overlap("BCDE", "ABCDEF", allow_contained=False) → 0
    """
    if a == b:
        return 0

    # Longest suffix of a first, shrinking until b starts with it
    length = min(len(a), len(b))
    while length > 0 and not b.startswith(a[len(a) - length:]):
        length -= 1

    if allow_contained and a and a in b:
        length = len(a)

    return length


def merge(prefix: str, suffix: str, length: int) -> str:
    """Join two fragments, keeping a single copy of their overlap.

    Args:
        prefix: Fragment whose tail overlaps `suffix`.
        suffix: Fragment whose head is overlapped.
        length: Overlap length as returned by overlap().

    Returns:
        `prefix` minus its last `length` characters, followed by `suffix`.
    """
    assert 0 <= length <= len(prefix), (
        f"overlap of {length} exceeds fragment length {len(prefix)}"
    )
    return prefix[:len(prefix) - length] + suffix


class OverlapIndex(ABC):
    """Finds the overlapping pairs of a working set of fragments.

    The reassembly loop only depends on this interface, so the pairwise scan
    can be swapped for an indexed implementation.
    """

    @abstractmethod
    def candidates(self, fragments: list[str]) -> list[OverlapCandidate]:
        """Return every overlapping ordered pair in `fragments`.

        Candidates are listed outer-major in working-set order and only
        include pairs with a positive overlap.
        """
        pass


class BruteForceOverlapIndex(OverlapIndex):
    """Checks every ordered pair of fragments. O(N²) detector calls."""

    _allow_contained: bool

    def __init__(self, allow_contained: bool = True):
        self._allow_contained = allow_contained

    @override
    def candidates(self, fragments: list[str]) -> list[OverlapCandidate]:
        found: list[OverlapCandidate] = []
        for i, outer in enumerate(fragments):
            for j, inner in enumerate(fragments):
                if i == j:
                    continue
                length = overlap(outer, inner, allow_contained=self._allow_contained)
                if length > 0:
                    found.append(OverlapCandidate(outer, inner, length, i, j))
        return found


def enumerate_overlaps(fragments: list[str], *, allow_contained: bool = True) -> list[OverlapCandidate]:
    """Return the overlap candidates among `fragments` using the pairwise scan."""
    return BruteForceOverlapIndex(allow_contained).candidates(fragments)
