"""GPS track geometry, route-grouping rules, heatmaps and an in-memory activity store."""

__version__ = "0.0.4"

__all__ = [
    "activity_store",
    "errors",
    "geo_utils",
    "group_bounds",
    "grouping",
    "heatmap",
    "simplify",
    "spatial_index",
]