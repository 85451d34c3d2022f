"""Geometry kernel: distances, segment math and boundary polygons."""

from .distance import (
    EARTH_RADIUS_M,
    LonLat,
    distance_to_polyline_m,
    great_circle_distance_m,
    point_to_segment_distance_m,
    polyline_length_m,
)
from .polygon_ops import (
    is_usable_ring,
    outer_ring,
    pick_largest_polygon,
    point_in_polygon,
    polygon_area,
    ring_bounds,
)
from .segments import (
    closest_points_between_segments,
    segment_midpoint,
    segment_segment_intersection,
)

__all__ = [
    # Distances
    "EARTH_RADIUS_M",
    "LonLat",
    "great_circle_distance_m",
    "point_to_segment_distance_m",
    "distance_to_polyline_m",
    "polyline_length_m",
    # Segments
    "closest_points_between_segments",
    "segment_segment_intersection",
    "segment_midpoint",
    # Polygons
    "point_in_polygon",
    "polygon_area",
    "pick_largest_polygon",
    "outer_ring",
    "is_usable_ring",
    "ring_bounds",
]
