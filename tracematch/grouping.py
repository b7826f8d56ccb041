"""Rules deciding whether two route signatures are the same journey."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from tracematch.geo_utils import GpsPoint, haversine_distance

_CHECK_POSITIONS = (0.15, 0.25, 0.35, 0.5, 0.65, 0.75, 0.85)
_MIN_POINTS_FOR_MIDDLE_CHECK = 5


class _Signature(Protocol):
    """A simplified route with its endpoints and length."""

    points: Sequence[GpsPoint]
    start_point: GpsPoint
    end_point: GpsPoint
    total_distance: float


class _MatchResult(Protocol):
    match_percentage: float


class _MatchConfig(Protocol):
    min_route_distance: float
    min_match_percentage: float
    max_distance_diff_ratio: float
    endpoint_threshold: float


def is_point_near_route(
    point: GpsPoint, route: Iterable[GpsPoint], threshold: float
) -> bool:
    """Whether any point of the route lies closer than ``threshold`` meters."""
    return any(haversine_distance(point, p) < threshold for p in route)


def check_middle_points_match(
    points1: Sequence[GpsPoint], points2: Sequence[GpsPoint], threshold: float
) -> bool:
    """Whether the routes stay within ``threshold`` meters at seven checkpoints.

    Routes with fewer than five points are accepted without checking.
    """
    if len(points1) < _MIN_POINTS_FOR_MIDDLE_CHECK or len(points2) < _MIN_POINTS_FOR_MIDDLE_CHECK:
        return True
    last1 = len(points1) - 1
    last2 = len(points2) - 1
    return all(
        haversine_distance(points1[int(last1 * pos)], points2[int(last2 * pos)]) <= threshold
        for pos in _CHECK_POSITIONS
    )


def should_group_routes(
    sig1: _Signature,
    sig2: _Signature,
    match_result: _MatchResult,
    config: _MatchConfig,
) -> bool:
    """Whether two matched routes are the same end-to-end journey.

    Both must be long enough, match well enough, have similar length and share
    endpoints (in either direction) with matching middles. Two loops are
    accepted when each one's start lies on the other.
    """
    if (
        sig1.total_distance < config.min_route_distance
        or sig2.total_distance < config.min_route_distance
    ):
        return False

    if match_result.match_percentage < config.min_match_percentage:
        return False

    distance_diff = abs(sig1.total_distance - sig2.total_distance)
    max_distance = max(sig1.total_distance, sig2.total_distance)
    if max_distance > 0.0 and distance_diff / max_distance > config.max_distance_diff_ratio:
        return False

    threshold = config.endpoint_threshold
    start1, end1 = sig1.start_point, sig1.end_point
    start2, end2 = sig2.start_point, sig2.end_point

    sig1_is_loop = haversine_distance(start1, end1) < threshold
    sig2_is_loop = haversine_distance(start2, end2) < threshold
    if sig1_is_loop and sig2_is_loop:
        return is_point_near_route(start1, sig2.points, threshold) and is_point_near_route(
            start2, sig1.points, threshold
        )

    same_direction_ok = (
        haversine_distance(start1, start2) < threshold
        and haversine_distance(end1, end2) < threshold
    )
    reverse_direction_ok = (
        haversine_distance(start1, end2) < threshold
        and haversine_distance(end1, start2) < threshold
    )
    if not same_direction_ok and not reverse_direction_ok:
        return False

    if reverse_direction_ok and not same_direction_ok:
        points2 = list(reversed(sig2.points))
    else:
        points2 = list(sig2.points)

    return check_middle_points_match(sig1.points, points2, threshold * 2.0)