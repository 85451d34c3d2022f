"""Real-world distance calculations on (lon, lat) coordinates.

All distances are great-circle (haversine) distances in meters. Planar
math is only used to locate nearest points in degree space; the final
distance is always converted back through the haversine formula.
"""

import math
from collections.abc import Sequence

# Type aliases
LonLat = tuple[float, float]
Polyline = Sequence[LonLat]

EARTH_RADIUS_MILES = 3959.0
METERS_PER_MILE = 1609.34
EARTH_RADIUS_M = EARTH_RADIUS_MILES * METERS_PER_MILE


def great_circle_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two points.

    Args:
        lat1: Latitude of the first point in degrees
        lon1: Longitude of the first point in degrees
        lat2: Latitude of the second point in degrees
        lon2: Longitude of the second point in degrees

    Returns:
        Distance in meters
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def point_to_segment_distance_m(
    lat: float,
    lon: float,
    seg_start: LonLat,
    seg_end: LonLat,
) -> float:
    """Distance from a point to a line segment.

    Projects the point onto the line through the segment in (lon, lat)
    space, clamps the projection to the segment, then measures the
    great-circle distance to that nearest point. A zero-length segment
    degrades to point-to-point distance from its start.

    Args:
        lat: Point latitude
        lon: Point longitude
        seg_start: Segment start as (lon, lat)
        seg_end: Segment end as (lon, lat)

    Returns:
        Distance in meters
    """
    x1, y1 = seg_start
    x2, y2 = seg_end
    dx = x2 - x1
    dy = y2 - y1

    len_sq = dx * dx + dy * dy
    if len_sq == 0:
        return great_circle_distance_m(lat, lon, y1, x1)

    t = ((lon - x1) * dx + (lat - y1) * dy) / len_sq
    t = max(0.0, min(1.0, t))

    nearest_lon = x1 + t * dx
    nearest_lat = y1 + t * dy
    return great_circle_distance_m(lat, lon, nearest_lat, nearest_lon)


def distance_to_polyline_m(lat: float, lon: float, polyline: Polyline) -> float:
    """Minimum distance from a point to any segment of a polyline.

    Returns infinity for polylines with fewer than two points.
    """
    min_distance = math.inf
    for i in range(len(polyline) - 1):
        distance = point_to_segment_distance_m(lat, lon, polyline[i], polyline[i + 1])
        if distance < min_distance:
            min_distance = distance
    return min_distance


def polyline_length_m(polyline: Polyline) -> float:
    """Sum of great-circle distances between consecutive vertices."""
    length = 0.0
    for i in range(len(polyline) - 1):
        lon1, lat1 = polyline[i]
        lon2, lat2 = polyline[i + 1]
        length += great_circle_distance_m(lat1, lon1, lat2, lon2)
    return length


def is_finite_point(point: Sequence[float]) -> bool:
    """Check a coordinate pair has two finite numeric values."""
    try:
        if len(point) < 2:
            return False
        return math.isfinite(float(point[0])) and math.isfinite(float(point[1]))
    except (TypeError, ValueError):
        return False
