"""Geographic helpers for GPS tracks in WGS84 degrees."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from itertools import pairwise
from typing import Iterable, Sequence

EARTH_RADIUS_METERS = 6_371_008.8
_METERS_PER_DEGREE = 111_320.0


@dataclass(frozen=True)
class GpsPoint:
    """A GPS position with an optional elevation in meters."""

    latitude: float
    longitude: float
    elevation: float | None = None


@dataclass(frozen=True)
class Bounds:
    """An axis-aligned latitude/longitude bounding box."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


def haversine_distance(p1: GpsPoint, p2: GpsPoint) -> float:
    """Great-circle distance in meters between two points."""
    lat1 = math.radians(p1.latitude)
    lat2 = math.radians(p2.latitude)
    d_lat = lat2 - lat1
    d_lng = math.radians(p2.longitude - p1.longitude)
    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return 2.0 * EARTH_RADIUS_METERS * math.asin(math.sqrt(min(1.0, a)))


def route_distance(points: Sequence[GpsPoint]) -> float:
    """Total length in meters along a polyline."""
    return sum(haversine_distance(a, b) for a, b in pairwise(points))


def meters_to_degrees(meters: float, latitude: float) -> float:
    """Approximate degrees spanned by a distance at the given latitude."""
    meters_per_degree = _METERS_PER_DEGREE * max(math.cos(math.radians(latitude)), 0.1)
    return meters / meters_per_degree


def compute_bounds(points: Iterable[GpsPoint]) -> Bounds:
    """Bounding box of the points; an inverted box for no points."""
    min_lat = min_lng = sys.float_info.max
    max_lat = max_lng = -sys.float_info.max
    for p in points:
        min_lat = min(min_lat, p.latitude)
        max_lat = max(max_lat, p.latitude)
        min_lng = min(min_lng, p.longitude)
        max_lng = max(max_lng, p.longitude)
    return Bounds(min_lat, max_lat, min_lng, max_lng)


def compute_bounds_tuple(points: Iterable[GpsPoint]) -> tuple[float, float, float, float]:
    """Bounding box as (min_lat, max_lat, min_lng, max_lng)."""
    b = compute_bounds(points)
    return (b.min_lat, b.max_lat, b.min_lng, b.max_lng)


def bounds_overlap(a: Bounds, b: Bounds, buffer_meters: float, reference_lat: float) -> bool:
    """Whether two boxes overlap once widened by a buffer."""
    buf = meters_to_degrees(buffer_meters, reference_lat)
    return not (
        a.max_lat + buf < b.min_lat
        or b.max_lat + buf < a.min_lat
        or a.max_lng + buf < b.min_lng
        or b.max_lng + buf < a.min_lng
    )


def compute_center(points: Sequence[GpsPoint]) -> GpsPoint:
    """Arithmetic mean of the coordinates; (0, 0) for no points."""
    if not points:
        return GpsPoint(0.0, 0.0)
    n = len(points)
    return GpsPoint(
        sum(p.latitude for p in points) / n,
        sum(p.longitude for p in points) / n,
    )


def calculate_bearing(p1: GpsPoint, p2: GpsPoint) -> float:
    """Initial bearing from p1 to p2 in degrees, 0 = north, clockwise."""
    lat1 = math.radians(p1.latitude)
    lat2 = math.radians(p2.latitude)
    d_lng = math.radians(p2.longitude - p1.longitude)
    x = math.sin(d_lng) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)
    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0


def bearing_difference(b1: float, b2: float) -> float:
    """Absolute angle between two bearings, in [0, 180]."""
    diff = abs(b1 - b2)
    return 360.0 - diff if diff > 180.0 else diff


def circular_mean_bearing(bearings: Sequence[float]) -> float:
    """Circular mean of bearings in [0, 360); 0 for none."""
    if not bearings:
        return 0.0
    sum_sin = sum(math.sin(math.radians(b)) for b in bearings)
    sum_cos = sum(math.cos(math.radians(b)) for b in bearings)
    return (math.degrees(math.atan2(sum_sin, sum_cos)) + 360.0) % 360.0


def circular_std_bearing(bearings: Sequence[float]) -> float:
    """Root-mean-square angular deviation from the circular mean."""
    if len(bearings) < 2:
        return 0.0
    mean = circular_mean_bearing(bearings)
    sum_sq = sum(bearing_difference(b, mean) ** 2 for b in bearings)
    return math.sqrt(sum_sq / len(bearings))


def calculate_gradient(p1: GpsPoint, p2: GpsPoint) -> float | None:
    """Grade in percent from p1 to p2, or None without elevations."""
    if p1.elevation is None or p2.elevation is None:
        return None
    horizontal = haversine_distance(p1, p2)
    if horizontal < 1.0:
        return 0.0
    return (p2.elevation - p1.elevation) / horizontal * 100.0


def segment_gradient(points: Sequence[GpsPoint]) -> float | None:
    """Average grade in percent from first to last point, or None."""
    if len(points) < 2:
        return None
    start, end = points[0].elevation, points[-1].elevation
    if start is None or end is None:
        return None
    total = route_distance(points)
    if total < 1.0:
        return 0.0
    return (end - start) / total * 100.0