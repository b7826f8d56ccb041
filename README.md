# tracematch

Building blocks for working with GPS tracks: distances, bounds, bearings and
gradients; line simplification and resampling; the rules that decide whether
two routes are the same journey; density heatmaps; and a small in-memory
activity store with viewport queries.

The package uses only the standard library and supports Python 3.10 and later.

## Installation

```
pip install tracematch
```

## Geographic utilities

`tracematch.geo_utils` defines the frozen dataclasses `GpsPoint`
(`latitude`, `longitude`, optional `elevation`) and `Bounds`
(`min_lat`, `max_lat`, `min_lng`, `max_lng`).

```python
from tracematch.geo_utils import GpsPoint, haversine_distance, compute_bounds, route_distance

london = GpsPoint(51.5074, -0.1278)
paris = GpsPoint(48.8566, 2.3522)
print(haversine_distance(london, paris))  # about 343.5 km, in metres

track = [GpsPoint(51.50, -0.13), GpsPoint(51.51, -0.12), GpsPoint(51.505, -0.125)]
bounds = compute_bounds(track)
print(bounds.min_lat, bounds.max_lat)
print(route_distance(track))
```

The module also has:

- `compute_bounds_tuple` – bounds as `(min_lat, max_lat, min_lng, max_lng)`;
  `compute_bounds` of no points gives an inverted box.
- `meters_to_degrees` and `bounds_overlap` – approximate degree conversion and
  a buffered box-overlap test.
- `compute_center` – mean of the coordinates, `(0, 0)` for no points.
- `calculate_bearing`, `bearing_difference`, `circular_mean_bearing`,
  `circular_std_bearing` – bearings in degrees, 0 = north.
- `calculate_gradient`, `segment_gradient` – grade in percent, or `None`
  where elevations are missing; 0 when the points are under a metre apart.

## Simplifying and resampling

```python
from tracematch.simplify import douglas_peucker, resample_track

simplified = douglas_peucker(track, 0.0001)   # tolerance in degrees
evenly_spaced = resample_track(track, 10)
assert len(evenly_spaced) == 10
```

`douglas_peucker` keeps the first and last points and drops elevations.
`resample_track` interpolates linearly and keeps the original end points.

## Storing activities and querying a viewport

```python
from tracematch.activity_store import ActivityStore
from tracematch.spatial_index import SpatialIndex

store = ActivityStore()
store.add("morning-run", track, "Run")
store.add_flat("evening-ride", [51.50, -0.13, 51.52, -0.11], "Ride")

index = SpatialIndex()
index.mark_dirty()
index.ensure_built(store)
print(index.query_viewport_raw(51.49, 51.53, -0.14, -0.10))
print(index.find_nearby(51.50, -0.13, 0.01))
```

`ActivityStore` holds `ActivityData` records keyed by ID. Besides `add` and
`add_flat` it offers `add_many_flat` (one flat buffer plus per-activity
offsets), `remove`, `remove_many`, `clear`, `get`, `get_coords`,
`get_sport_type`, `ids`, `values`, `sport_type_map`, `as_tracks` and the static
`compute_track_distance`; it supports `in`, `len()` and iteration over
`(id, activity)` pairs.

`SpatialIndex` is rebuilt from a store on `ensure_built` only when it has been
marked dirty; `query_viewport` takes a `Bounds`, and `len()` counts the indexed
activities.

## Heatmaps

`tracematch.heatmap.generate_heatmap(signatures, activity_data, config)` builds
a sparse grid from any objects that have an `activity_id` and a sequence of
`points`. `activity_data` maps activity IDs to `ActivityHeatmapData`
(route id, route name, timestamp); `HeatmapConfig` sets the cell size
(default 100 m) and optional `HeatmapBounds` for clipping. The result is a
`HeatmapResult` of `HeatmapCell`s with visit counts, normalised density,
`RouteRef`s, activity IDs and first/last visit times.

`query_heatmap_cell(heatmap, lat, lng, cell_size_meters)` returns a
`CellQueryResult` with the cell at a location and a label such as
"Explored once" or "Common path (2 routes)", or `None` when there is no cell.

## Route grouping rules

`tracematch.grouping.should_group_routes(sig1, sig2, match_result, config)`
decides whether two already-matched routes are the same end-to-end journey:
both long enough, match percentage high enough, similar length, matching
endpoints in either direction with agreeing middle checkpoints
(`check_middle_points_match`), or two loops each passing the other's start
(`is_point_near_route`). The arguments are duck-typed: signatures need
`points`, `start_point`, `end_point` and `total_distance`; the match result
needs `match_percentage`; the config needs `min_route_distance`,
`min_match_percentage`, `max_distance_diff_ratio` and `endpoint_threshold`.

`tracematch.group_bounds` has `distance_ratio_ok`, a length pre-filter
(shorter at least half the longer), and `combined_bounds`, the box enclosing a
set of objects with a `bounds` attribute.

## Errors

`tracematch.errors` defines an exception hierarchy rooted at
`RouteMatchError` – `InsufficientPointsError`, `InvalidCoordinatesError`,
`RouteTooShortError`, `SectionDetectionError`, `OverlapDetectionError`,
`PersistenceError`, `HttpError`, `ConfigError`, `SpatialIndexError` and
`InternalError` – so callers can catch the whole family with one clause.

## What the package does not do

It does not create route signatures, compute match percentages between
routes, cluster routes into groups, detect frequently travelled sections,
fetch activities over HTTP, persist data to disk, or provide a command-line
tool. The grouping and heatmap functions accept signature, match and
configuration objects that you supply.