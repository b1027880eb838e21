"""Searches that combine per-plane results into slot-level answers.

A slot is *set* when any plane has a 1 there and *clear* when every plane
has a 0 there.  Callers validate ``from_index`` before calling in.
"""

from typing import Sequence

from .plane import Plane


def all_clear(planes: Sequence[Plane], index: int) -> bool:
    return not any(p.get(index) for p in planes)


def next_set(planes: Sequence[Plane], from_index: int) -> int:
    best = -1
    for plane in planes:
        found = plane.next_set(from_index)
        if found == from_index:
            return from_index
        if found >= 0 and (best < 0 or found < best):
            best = found
    return best


def next_clear(planes: Sequence[Plane], from_index: int, limit: int) -> int:
    """Smallest all-clear slot in ``[from_index, limit)``, else -1.

    A clear slot must be at or past every plane's own next clear bit, so the
    candidate jumps to the largest of those until all planes agree.
    """
    candidate = from_index
    while candidate < limit:
        seed = max(p.next_clear(candidate) for p in planes)
        if seed == candidate:
            return candidate
        candidate = seed
    return -1


def previous_set(planes: Sequence[Plane], from_index: int) -> int:
    best = -1
    for plane in planes:
        found = plane.previous_set(from_index)
        if found == from_index:
            return from_index
        best = max(best, found)
    return best


def previous_clear(planes: Sequence[Plane], from_index: int) -> int:
    candidate = from_index
    while candidate >= 0:
        seed = min(p.previous_clear(candidate) for p in planes)
        if seed == candidate:
            return candidate
        candidate = seed
    return -1
