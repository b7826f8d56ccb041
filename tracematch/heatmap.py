"""Sparse density grids over GPS tracks, annotated with the routes crossing each cell."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Protocol, Sequence

from tracematch.geo_utils import GpsPoint

_METERS_PER_DEGREE = 111_320.0


class _Track(Protocol):
    """Anything with an activity ID and a sequence of points."""

    activity_id: str
    points: Sequence[GpsPoint]


@dataclass(frozen=True)
class HeatmapBounds:
    """Bounding box for heatmap computation."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Whether a position lies inside the box, edges included."""
        return (
            self.min_lat <= latitude <= self.max_lat
            and self.min_lng <= longitude <= self.max_lng
        )


@dataclass
class HeatmapConfig:
    """Heatmap settings: cell size in meters and an optional clipping box."""

    cell_size_meters: float = 100.0
    bounds: HeatmapBounds | None = None


@dataclass
class RouteRef:
    """A route group passing through a cell."""

    route_id: str
    activity_count: int
    name: str | None = None


@dataclass
class HeatmapCell:
    """One non-empty cell of the heatmap grid."""

    row: int
    col: int
    center_lat: float
    center_lng: float
    density: float
    visit_count: int
    route_refs: list[RouteRef]
    unique_route_count: int
    activity_ids: list[str]
    first_visit: int | None
    last_visit: int | None
    is_common_path: bool


@dataclass
class HeatmapResult:
    """A complete heatmap holding only its non-empty cells."""

    cells: list[HeatmapCell]
    bounds: HeatmapBounds
    cell_size_meters: float
    grid_rows: int
    grid_cols: int
    max_density: float
    total_routes: int
    total_activities: int


@dataclass
class CellQueryResult:
    """The cell found at a queried location with a descriptive label."""

    cell: HeatmapCell
    suggested_label: str


@dataclass
class ActivityHeatmapData:
    """Metadata that links an activity to a route and a time."""

    activity_id: str
    route_id: str | None = None
    route_name: str | None = None
    timestamp: int | None = None


@dataclass
class _CellBuilder:
    visit_count: int = 0
    activity_ids: list[str] = field(default_factory=list)
    route_counts: dict[str, int] = field(default_factory=dict)
    route_names: dict[str, str | None] = field(default_factory=dict)
    first_visit: int | None = None
    last_visit: int | None = None


def _lng_meters_per_degree(ref_lat: float) -> float:
    return _METERS_PER_DEGREE * math.cos(math.radians(ref_lat))


def _grid_coords(lat: float, lng: float, ref_lat: float, cell_size: float) -> tuple[int, int]:
    row = math.floor((lat - ref_lat) * _METERS_PER_DEGREE / cell_size)
    col = math.floor(lng * _lng_meters_per_degree(ref_lat) / cell_size)
    return row, col


class _HeatmapGrid:
    def __init__(self, cell_size_meters: float) -> None:
        self.cell_size_meters = cell_size_meters
        self.ref_lat = 0.0
        self.cells: dict[tuple[int, int], _CellBuilder] = {}
        self.min_lat = math.inf
        self.max_lat = -math.inf
        self.min_lng = math.inf
        self.max_lng = -math.inf

    def cell_center(self, row: int, col: int) -> tuple[float, float]:
        center_lat = self.ref_lat + (row + 0.5) * self.cell_size_meters / _METERS_PER_DEGREE
        center_lng = (col + 0.5) * self.cell_size_meters / _lng_meters_per_degree(self.ref_lat)
        return center_lat, center_lng

    def add_point(
        self,
        lat: float,
        lng: float,
        activity_id: str,
        route_id: str | None,
        route_name: str | None,
        timestamp: int | None,
    ) -> None:
        self.min_lat = min(self.min_lat, lat)
        self.max_lat = max(self.max_lat, lat)
        self.min_lng = min(self.min_lng, lng)
        self.max_lng = max(self.max_lng, lng)

        if self.ref_lat == 0.0:
            self.ref_lat = lat

        key = _grid_coords(lat, lng, self.ref_lat, self.cell_size_meters)
        cell = self.cells.setdefault(key, _CellBuilder())
        cell.visit_count += 1

        if activity_id not in cell.activity_ids:
            cell.activity_ids.append(activity_id)

        if route_id is not None:
            cell.route_counts[route_id] = cell.route_counts.get(route_id, 0) + 1
            cell.route_names.setdefault(route_id, route_name)

        if timestamp is not None:
            cell.first_visit = timestamp if cell.first_visit is None else min(cell.first_visit, timestamp)
            cell.last_visit = timestamp if cell.last_visit is None else max(cell.last_visit, timestamp)

    def build(self) -> HeatmapResult:
        if not self.cells:
            return HeatmapResult(
                cells=[],
                bounds=HeatmapBounds(0.0, 0.0, 0.0, 0.0),
                cell_size_meters=self.cell_size_meters,
                grid_rows=0,
                grid_cols=0,
                max_density=0.0,
                total_routes=0,
                total_activities=0,
            )

        max_density = float(max(c.visit_count for c in self.cells.values()))
        all_routes: set[str] = set()
        all_activities: set[str] = set()
        cells = []

        for (row, col), builder in self.cells.items():
            center_lat, center_lng = self.cell_center(row, col)
            route_refs = [
                RouteRef(route_id, count, builder.route_names.get(route_id))
                for route_id, count in builder.route_counts.items()
            ]
            all_routes.update(builder.route_counts)
            all_activities.update(builder.activity_ids)
            unique = len(route_refs)
            cells.append(
                HeatmapCell(
                    row=row,
                    col=col,
                    center_lat=center_lat,
                    center_lng=center_lng,
                    density=builder.visit_count / max_density,
                    visit_count=builder.visit_count,
                    route_refs=route_refs,
                    unique_route_count=unique,
                    activity_ids=list(builder.activity_ids),
                    first_visit=builder.first_visit,
                    last_visit=builder.last_visit,
                    is_common_path=unique >= 2,
                )
            )

        rows = [r for r, _ in self.cells]
        cols = [c for _, c in self.cells]
        return HeatmapResult(
            cells=cells,
            bounds=HeatmapBounds(self.min_lat, self.max_lat, self.min_lng, self.max_lng),
            cell_size_meters=self.cell_size_meters,
            grid_rows=max(rows) - min(rows) + 1,
            grid_cols=max(cols) - min(cols) + 1,
            max_density=max_density,
            total_routes=len(all_routes),
            total_activities=len(all_activities),
        )


def generate_heatmap(
    signatures: Iterable[_Track],
    activity_data: Mapping[str, ActivityHeatmapData],
    config: HeatmapConfig,
) -> HeatmapResult:
    """Build a heatmap from the points of route signatures.

    ``activity_data`` maps activity IDs to their route and timestamp; points
    outside ``config.bounds`` (when given) are skipped.
    """
    grid = _HeatmapGrid(config.cell_size_meters)
    for sig in signatures:
        data = activity_data.get(sig.activity_id)
        route_id = data.route_id if data else None
        route_name = data.route_name if data else None
        timestamp = data.timestamp if data else None
        for point in sig.points:
            if config.bounds is not None and not config.bounds.contains(
                point.latitude, point.longitude
            ):
                continue
            grid.add_point(
                point.latitude, point.longitude, sig.activity_id, route_id, route_name, timestamp
            )
    return grid.build()


def _suggest_label(cell: HeatmapCell) -> str:
    if cell.unique_route_count == 0:
        if len(cell.activity_ids) == 1:
            return "Explored once"
        return f"{len(cell.activity_ids)} activities (no route)"
    if cell.unique_route_count == 1:
        route = cell.route_refs[0]
        if route.name is not None:
            return f"{route.name} ({route.activity_count}x)"
        return f"Route ({route.activity_count} activities)"
    if cell.is_common_path:
        return f"Common path ({cell.unique_route_count} routes)"
    return f"{cell.unique_route_count} routes"


def query_heatmap_cell(
    heatmap: HeatmapResult, lat: float, lng: float, cell_size_meters: float
) -> CellQueryResult | None:
    """The cell at a location with a suggested label, or None if empty there.

    The grid reference latitude is taken as the middle of the heatmap bounds.
    """
    if not heatmap.cells:
        return None
    ref_lat = (heatmap.bounds.min_lat + heatmap.bounds.max_lat) / 2.0
    target = _grid_coords(lat, lng, ref_lat, cell_size_meters)
    cell = next((c for c in heatmap.cells if (c.row, c.col) == target), None)
    if cell is None:
        return None
    return CellQueryResult(cell=cell, suggested_label=_suggest_label(cell))