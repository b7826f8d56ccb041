from dataclasses import dataclass, field

import pytest

from tracematch.geo_utils import GpsPoint
from tracematch.heatmap import (
    ActivityHeatmapData,
    HeatmapBounds,
    HeatmapConfig,
    generate_heatmap,
    query_heatmap_cell,
)

LAT = 51.5074
LNG = -0.1278


@dataclass
class Track:
    activity_id: str
    points: list = field(default_factory=list)


def _track(activity_id, *lngs):
    return Track(activity_id, [GpsPoint(LAT, lng) for lng in lngs])


def test_empty_input_gives_empty_heatmap():
    result = generate_heatmap([], {}, HeatmapConfig(cell_size_meters=50.0))
    assert result.cells == []
    assert result.cell_size_meters == 50.0
    assert result.grid_rows == 0 and result.grid_cols == 0
    assert result.max_density == 0.0
    assert result.total_routes == 0 and result.total_activities == 0
    assert query_heatmap_cell(result, LAT, LNG, 50.0) is None


def test_default_config_cell_size():
    assert HeatmapConfig().cell_size_meters == 100.0
    assert HeatmapConfig().bounds is None


def test_single_point_makes_one_full_density_cell():
    result = generate_heatmap([_track("a", LNG)], {}, HeatmapConfig())
    assert len(result.cells) == 1
    cell = result.cells[0]
    assert cell.visit_count == 1
    assert cell.density == 1.0
    assert cell.activity_ids == ["a"]
    assert result.grid_rows == 1 and result.grid_cols == 1
    assert result.bounds == HeatmapBounds(LAT, LAT, LNG, LNG)
    assert result.total_activities == 1
    assert result.total_routes == 0


def test_cell_center_lies_within_the_cell():
    result = generate_heatmap([_track("a", LNG)], {}, HeatmapConfig())
    cell = result.cells[0]
    half_lat = 100.0 / 111_320.0
    assert abs(cell.center_lat - LAT) <= half_lat
    assert abs(cell.center_lng - LNG) <= half_lat * 2


def test_repeated_visits_count_but_activity_is_deduped():
    result = generate_heatmap([_track("a", LNG, LNG, LNG)], {}, HeatmapConfig())
    assert len(result.cells) == 1
    assert result.cells[0].visit_count == 3
    assert result.cells[0].activity_ids == ["a"]
    assert result.max_density == 3.0


def test_densities_are_normalized_to_max():
    tracks = [_track("a", LNG, LNG, -0.2000), _track("b", LNG)]
    result = generate_heatmap(tracks, {}, HeatmapConfig())
    densities = [c.density for c in result.cells]
    assert max(densities) == 1.0
    assert all(0.0 < d <= 1.0 for d in densities)
    assert sum(c.visit_count for c in result.cells) == 4
    assert result.max_density == max(c.visit_count for c in result.cells)


def test_grid_dimensions_span_cells():
    tracks = [_track("a", LNG, LNG - 0.01)]
    result = generate_heatmap(tracks, {}, HeatmapConfig())
    cols = [c.col for c in result.cells]
    assert result.grid_cols == max(cols) - min(cols) + 1
    assert result.grid_rows == 1
    assert len(result.cells) == 2


def test_two_routes_make_common_path():
    data = {
        "a": ActivityHeatmapData("a", route_id="r1", route_name="North"),
        "b": ActivityHeatmapData("b", route_id="r2"),
    }
    result = generate_heatmap([_track("a", LNG), _track("b", LNG)], data, HeatmapConfig())
    cell = result.cells[0]
    assert cell.unique_route_count == 2
    assert cell.is_common_path is True
    assert {r.route_id for r in cell.route_refs} == {"r1", "r2"}
    names = {r.route_id: r.name for r in cell.route_refs}
    assert names == {"r1": "North", "r2": None}
    assert result.total_routes == 2
    assert result.total_activities == 2


def test_timestamps_track_first_and_last_visit():
    data = {
        "a": ActivityHeatmapData("a", timestamp=2000),
        "b": ActivityHeatmapData("b", timestamp=1000),
        "c": ActivityHeatmapData("c", timestamp=3000),
    }
    tracks = [_track(i, LNG) for i in ("a", "b", "c")]
    cell = generate_heatmap(tracks, data, HeatmapConfig()).cells[0]
    assert cell.first_visit == 1000
    assert cell.last_visit == 3000


def test_no_timestamps_leaves_visits_unset():
    cell = generate_heatmap([_track("a", LNG)], {}, HeatmapConfig()).cells[0]
    assert cell.first_visit is None and cell.last_visit is None


def test_config_bounds_filter_points():
    bounds = HeatmapBounds(LAT - 0.001, LAT + 0.001, LNG - 0.001, LNG + 0.001)
    tracks = [_track("a", LNG, -0.5)]
    result = generate_heatmap(tracks, {}, HeatmapConfig(bounds=bounds))
    assert len(result.cells) == 1
    assert result.bounds.min_lng == LNG and result.bounds.max_lng == LNG


def test_all_points_outside_bounds_gives_empty():
    bounds = HeatmapBounds(0.0, 1.0, 0.0, 1.0)
    result = generate_heatmap([_track("a", LNG)], {}, HeatmapConfig(bounds=bounds))
    assert result.cells == []


def test_route_counts_accumulate_per_point():
    data = {"a": ActivityHeatmapData("a", route_id="r1")}
    cell = generate_heatmap([_track("a", LNG, LNG)], data, HeatmapConfig()).cells[0]
    assert cell.route_refs[0].activity_count == 2


def _query(tracks, data):
    heatmap = generate_heatmap(tracks, data, HeatmapConfig())
    return query_heatmap_cell(heatmap, LAT, LNG, heatmap.cell_size_meters)


def test_query_explored_once():
    result = _query([_track("a", LNG)], {})
    assert result is not None
    assert result.suggested_label == "Explored once"
    assert result.cell.activity_ids == ["a"]


def test_query_many_activities_without_route():
    result = _query([_track("a", LNG), _track("b", LNG)], {})
    assert result.suggested_label == "2 activities (no route)"


def test_query_named_route():
    data = {
        "a": ActivityHeatmapData("a", route_id="r1", route_name="Lakeside"),
        "b": ActivityHeatmapData("b", route_id="r1", route_name="Lakeside"),
    }
    result = _query([_track("a", LNG), _track("b", LNG)], data)
    assert result.suggested_label == "Lakeside (2x)"


def test_query_unnamed_route():
    data = {"a": ActivityHeatmapData("a", route_id="r1")}
    result = _query([_track("a", LNG)], data)
    assert result.suggested_label == "Route (1 activities)"


def test_query_common_path():
    data = {
        "a": ActivityHeatmapData("a", route_id="r1"),
        "b": ActivityHeatmapData("b", route_id="r2"),
    }
    result = _query([_track("a", LNG), _track("b", LNG)], data)
    assert result.suggested_label == "Common path (2 routes)"


def test_query_location_without_cell():
    heatmap = generate_heatmap([_track("a", LNG)], {}, HeatmapConfig())
    assert query_heatmap_cell(heatmap, LAT, LNG + 1.0, 100.0) is None


@pytest.mark.parametrize("cell_size", [25.0, 100.0, 500.0])
def test_query_finds_generated_cell_for_each_size(cell_size):
    heatmap = generate_heatmap([_track("a", LNG)], {}, HeatmapConfig(cell_size_meters=cell_size))
    result = query_heatmap_cell(heatmap, LAT, LNG, cell_size)
    assert result is not None
    assert result.cell is heatmap.cells[0]