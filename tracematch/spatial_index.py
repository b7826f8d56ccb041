"""Viewport queries over activity bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass

from tracematch.activity_store import ActivityStore
from tracematch.geo_utils import Bounds


@dataclass(frozen=True)
class ActivityBounds:
    """An activity's bounding box."""

    activity_id: str
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def intersects(
        self, min_lat: float, max_lat: float, min_lng: float, max_lng: float
    ) -> bool:
        """Whether this box touches or overlaps the given box."""
        lat_lo, lat_hi = sorted((min_lat, max_lat))
        lng_lo, lng_hi = sorted((min_lng, max_lng))
        own_lat_lo, own_lat_hi = sorted((self.min_lat, self.max_lat))
        own_lng_lo, own_lng_hi = sorted((self.min_lng, self.max_lng))
        return (
            own_lat_lo <= lat_hi
            and lat_lo <= own_lat_hi
            and own_lng_lo <= lng_hi
            and lng_lo <= own_lng_hi
        )


class SpatialIndex:
    """Index of activity bounds, rebuilt from a store when marked dirty."""

    def __init__(self) -> None:
        self._entries: list[ActivityBounds] = []
        self._dirty = False

    @property
    def dirty(self) -> bool:
        """Whether the index needs a rebuild."""
        return self._dirty

    def mark_dirty(self) -> None:
        """Flag the index for rebuilding."""
        self._dirty = True

    def rebuild(self, store: ActivityStore) -> None:
        """Index every activity in the store that has bounds."""
        self._entries = [
            ActivityBounds(a.activity_id, a.bounds.min_lat, a.bounds.max_lat,
                           a.bounds.min_lng, a.bounds.max_lng)
            for a in store.values()
            if a.bounds is not None
        ]
        self._dirty = False

    def ensure_built(self, store: ActivityStore) -> None:
        """Rebuild from the store if the index is dirty."""
        if self._dirty:
            self.rebuild(store)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries = []
        self._dirty = False

    def query_viewport(self, bounds: Bounds) -> list[str]:
        """IDs of activities whose bounds intersect the viewport."""
        return self.query_viewport_raw(
            bounds.min_lat, bounds.max_lat, bounds.min_lng, bounds.max_lng
        )

    def query_viewport_raw(
        self, min_lat: float, max_lat: float, min_lng: float, max_lng: float
    ) -> list[str]:
        """IDs of activities whose bounds intersect the given box."""
        return [
            e.activity_id
            for e in self._entries
            if e.intersects(min_lat, max_lat, min_lng, max_lng)
        ]

    def find_nearby(self, lat: float, lng: float, radius_degrees: float) -> list[str]:
        """IDs of activities within a square of the given half-width."""
        return self.query_viewport_raw(
            lat - radius_degrees,
            lat + radius_degrees,
            lng - radius_degrees,
            lng + radius_degrees,
        )

    def __len__(self) -> int:
        return len(self._entries)