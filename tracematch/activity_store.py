"""In-memory storage of activity GPS tracks."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import chain, repeat
from typing import Iterable, Iterator, Sequence

from tracematch.geo_utils import Bounds, GpsPoint, compute_bounds, route_distance


def _bounds_of(coords: Sequence[GpsPoint]) -> Bounds | None:
    return compute_bounds(coords) if coords else None


def _pairs_to_points(flat_coords: Iterable[float]) -> list[GpsPoint]:
    values = iter(flat_coords)
    return [GpsPoint(lat, lng) for lat, lng in zip(values, values)]


@dataclass
class ActivityData:
    """An activity's GPS track with its sport type and bounding box."""

    activity_id: str
    coords: list[GpsPoint]
    sport_type: str
    bounds: Bounds | None


class ActivityStore:
    """Activities keyed by ID, with bulk loading from flat buffers."""

    def __init__(self) -> None:
        self._activities: dict[str, ActivityData] = {}

    def add(
        self, activity_id: str, coords: Sequence[GpsPoint], sport_type: str
    ) -> Bounds | None:
        """Store an activity, replacing any with the same ID; return its bounds."""
        points = list(coords)
        bounds = _bounds_of(points)
        self._activities[activity_id] = ActivityData(activity_id, points, sport_type, bounds)
        return bounds

    def add_flat(
        self, activity_id: str, flat_coords: Sequence[float], sport_type: str
    ) -> Bounds | None:
        """Store an activity from ``[lat1, lng1, lat2, lng2, ...]``.

        A trailing unpaired value is ignored.
        """
        return self.add(activity_id, _pairs_to_points(flat_coords), sport_type)

    def add_many_flat(
        self,
        activity_ids: Sequence[str],
        all_coords: Sequence[float],
        offsets: Sequence[int],
        sport_types: Sequence[str],
    ) -> list[str]:
        """Store many activities sharing one flat coordinate buffer.

        ``offsets`` gives each activity's first point index; an activity ends
        where the next begins, the last one at the end of the buffer. Missing
        sport types default to the empty string.
        """
        if len(offsets) < len(activity_ids):
            raise IndexError(
                f"{len(activity_ids)} activities but only {len(offsets)} offsets"
            )
        point_total = len(all_coords) // 2
        ends = chain(offsets[1:], repeat(point_total))
        sports = chain(sport_types, repeat(""))
        added = []
        for activity_id, start, end, sport in zip(activity_ids, offsets, ends, sports):
            coords = [
                GpsPoint(all_coords[2 * j], all_coords[2 * j + 1])
                for j in range(start, end)
                if 2 * j + 1 < len(all_coords)
            ]
            self.add(activity_id, coords, sport)
            added.append(activity_id)
        return added

    def remove(self, activity_id: str) -> ActivityData | None:
        """Remove an activity and return it, or None if it was absent."""
        return self._activities.pop(activity_id, None)

    def remove_many(self, activity_ids: Iterable[str]) -> list[str]:
        """Remove activities; return the IDs that were actually present."""
        return [i for i in activity_ids if self._activities.pop(i, None) is not None]

    def clear(self) -> None:
        """Remove every activity."""
        self._activities.clear()

    def get(self, activity_id: str) -> ActivityData | None:
        """The stored activity, or None."""
        return self._activities.get(activity_id)

    def get_coords(self, activity_id: str) -> list[GpsPoint] | None:
        """The activity's coordinates, or None."""
        activity = self._activities.get(activity_id)
        return activity.coords if activity is not None else None

    def get_sport_type(self, activity_id: str) -> str | None:
        """The activity's sport type, or None."""
        activity = self._activities.get(activity_id)
        return activity.sport_type if activity is not None else None

    def ids(self) -> Iterator[str]:
        """Iterate over the stored activity IDs."""
        return iter(self._activities)

    def values(self) -> Iterator[ActivityData]:
        """Iterate over the stored activities."""
        return iter(self._activities.values())

    def sport_type_map(self) -> dict[str, str]:
        """Mapping of activity ID to sport type."""
        return {i: a.sport_type for i, a in self._activities.items()}

    def as_tracks(self) -> list[tuple[str, list[GpsPoint]]]:
        """All activities as ``(id, coords)`` pairs."""
        return [(a.activity_id, list(a.coords)) for a in self._activities.values()]

    @staticmethod
    def compute_track_distance(coords: Sequence[GpsPoint]) -> float:
        """Total length of a track in meters."""
        return route_distance(coords)

    def __contains__(self, activity_id: object) -> bool:
        return activity_id in self._activities

    def __len__(self) -> int:
        return len(self._activities)

    def __iter__(self) -> Iterator[tuple[str, ActivityData]]:
        """Iterate over ``(id, activity)`` pairs."""
        return iter(self._activities.items())