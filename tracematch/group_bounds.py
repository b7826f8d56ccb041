"""Pre-filters and bounding boxes used when grouping route signatures."""

from __future__ import annotations

from typing import Iterable, Protocol

from tracematch.geo_utils import Bounds

_MIN_DISTANCE_RATIO = 0.5


class _Bounded(Protocol):
    """Anything carrying a bounding box."""

    bounds: Bounds


def distance_ratio_ok(d1: float, d2: float) -> bool:
    """Whether the shorter distance is at least half the longer one.

    Non-positive distances never pass.
    """
    if d1 <= 0.0 or d2 <= 0.0:
        return False
    ratio = d2 / d1 if d1 > d2 else d1 / d2
    return ratio >= _MIN_DISTANCE_RATIO


def combined_bounds(signatures: Iterable[_Bounded]) -> Bounds | None:
    """The smallest box enclosing every signature's bounds, or None for none."""
    boxes = [sig.bounds for sig in signatures]
    if not boxes:
        return None
    return Bounds(
        min_lat=min(b.min_lat for b in boxes),
        max_lat=max(b.max_lat for b in boxes),
        min_lng=min(b.min_lng for b in boxes),
        max_lng=max(b.max_lng for b in boxes),
    )