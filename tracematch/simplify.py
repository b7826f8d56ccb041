"""Polyline simplification and resampling."""

from __future__ import annotations

import math
from itertools import pairwise
from typing import Sequence

from tracematch.geo_utils import GpsPoint, haversine_distance, route_distance


def _segment_distance(
    px: float, py: float, ax: float, ay: float, bx: float, by: float
) -> float:
    """Planar distance from point P to the segment AB."""
    dx = bx - ax
    dy = by - ay
    if dx == 0.0 and dy == 0.0:
        return math.hypot(px - ax, py - ay)
    t = ((px - ax) * dx + (py - ay) * dy) / (dx * dx + dy * dy)
    if t <= 0.0:
        return math.hypot(px - ax, py - ay)
    if t >= 1.0:
        return math.hypot(px - bx, py - by)
    return math.hypot(px - (ax + t * dx), py - (ay + t * dy))


def douglas_peucker(points: Sequence[GpsPoint], tolerance: float) -> list[GpsPoint]:
    """Simplify a polyline with the Ramer-Douglas-Peucker algorithm.

    The tolerance is in coordinate units (degrees), measured in the plane
    with longitude as x and latitude as y. Elevations are not carried over
    to the simplified line.
    """
    if len(points) < 2:
        return list(points)

    coords = [(p.longitude, p.latitude) for p in points]
    if tolerance <= 0.0:
        return [GpsPoint(y, x) for x, y in coords]

    keep = {0, len(coords) - 1}
    pending = [(0, len(coords) - 1)]
    while pending:
        first, last = pending.pop()
        if last - first < 2:
            continue
        ax, ay = coords[first]
        bx, by = coords[last]
        farthest, max_dist = max(
            (
                (index, _segment_distance(x, y, ax, ay, bx, by))
                for index, (x, y) in enumerate(coords[first + 1 : last], start=first + 1)
            ),
            key=lambda item: item[1],
        )
        if max_dist > tolerance:
            keep.add(farthest)
            pending.append((first, farthest))
            pending.append((farthest, last))

    return [GpsPoint(coords[i][1], coords[i][0]) for i in sorted(keep)]


def resample_track(points: Sequence[GpsPoint], count: int) -> list[GpsPoint]:
    """Resample a polyline to exactly ``count`` evenly spaced points.

    New points are linearly interpolated between the original ones; the
    first and last original points are kept as they are.
    """
    if not points or count <= 0:
        return []
    if len(points) == 1 or count == 1:
        return [points[0]]

    total_length = route_distance(points)
    if total_length == 0.0:
        return [points[0]] * count

    segment_length = total_length / (count - 1)
    result = [points[0]]
    current_distance = 0.0
    target_distance = segment_length

    for p1, p2 in pairwise(points):
        if len(result) >= count - 1:
            break
        seg_dist = haversine_distance(p1, p2)
        while current_distance + seg_dist >= target_distance and len(result) < count - 1:
            ratio = (target_distance - current_distance) / seg_dist
            result.append(
                GpsPoint(
                    p1.latitude + ratio * (p2.latitude - p1.latitude),
                    p1.longitude + ratio * (p2.longitude - p1.longitude),
                )
            )
            target_distance += segment_length
        current_distance += seg_dist

    if len(result) < count:
        result.append(points[-1])
    return result