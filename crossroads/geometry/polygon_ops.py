"""Boundary polygon operations.

Point-in-polygon and area are computed directly on coordinate rings so the
results match the ray-casting and shoelace rules used elsewhere in the game.
Shapely is used for ring validation, bounds and GeoJSON interchange.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from numbers import Real
from typing import Any

from shapely.errors import GEOSException
from shapely.geometry import Polygon, box, mapping

from .distance import LonLat, is_finite_point

logger = logging.getLogger(__name__)

# Type aliases
Ring = Sequence[LonLat]
Coords = list[tuple[float, float]]


def polygon_from_coords(coords: Ring) -> Polygon:
    """Create Shapely Polygon from a (lon, lat) ring.

    Args:
        coords: List of (lon, lat) tuples forming the outer ring

    Returns:
        Shapely Polygon
    """
    return Polygon(coords)


def close_ring(ring: Ring) -> Coords:
    """Return the ring as a list with the first point repeated at the end."""
    coords = [(float(p[0]), float(p[1])) for p in ring]
    if coords and coords[0] != coords[-1]:
        coords.append(coords[0])
    return coords


def point_in_polygon(point: LonLat, ring: Ring) -> bool:
    """Even-odd ray casting test against an outer ring.

    Holes are not supported. Points exactly on an edge may fall either way.

    Args:
        point: (lon, lat) to test
        ring: Outer ring as (lon, lat) vertices

    Returns:
        True if the point is inside the ring
    """
    x, y = point[0], point[1]
    inside = False

    n = len(ring)
    j = n - 1
    for i in range(n):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]

        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i

    return inside


def polygon_area(ring: Ring) -> float:
    """Shoelace area of a ring in square degrees.

    Works for open or closed rings; a closing vertex contributes nothing.
    """
    n = len(ring)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        x1, y1 = ring[i][0], ring[i][1]
        x2, y2 = ring[(i + 1) % n][0], ring[(i + 1) % n][1]
        area += x1 * y2 - x2 * y1

    return abs(area / 2)


def pick_largest_polygon(geojson: dict[str, Any] | None) -> dict[str, Any] | None:
    """Select a single polygon from a Polygon or MultiPolygon geometry.

    A Polygon is returned unchanged. For a MultiPolygon, the part whose
    outer ring has the largest area is returned as a Polygon and the other
    parts are discarded.

    Args:
        geojson: GeoJSON geometry dict

    Returns:
        GeoJSON Polygon dict, or None if no polygon could be selected
    """
    if not geojson:
        return None

    geom_type = geojson.get("type")
    coordinates = geojson.get("coordinates") or []

    if geom_type == "Polygon":
        return geojson

    if geom_type == "MultiPolygon":
        largest = None
        largest_area = -1.0
        for polygon_coords in coordinates:
            if not isinstance(polygon_coords, (list, tuple)) or not polygon_coords:
                continue
            area = polygon_area(clean_ring(polygon_coords[0]))
            if area > largest_area:
                largest_area = area
                largest = {"type": "Polygon", "coordinates": polygon_coords}

        logger.debug(
            f"MultiPolygon with {len(coordinates)} parts - selected largest "
            f"with area {largest_area:.6f}"
        )
        return largest

    logger.warning(f"Unsupported boundary geometry type: {geom_type}")
    return None


def _is_vertex(p: Any) -> bool:
    if not isinstance(p, (list, tuple)) or len(p) < 2:
        return False
    x, y = p[0], p[1]
    if isinstance(x, bool) or isinstance(y, bool):
        return False
    return isinstance(x, Real) and isinstance(y, Real) and math.isfinite(x) and math.isfinite(y)


def clean_ring(raw: Any) -> Coords:
    """Keep the numeric, finite (lon, lat) vertices of a raw GeoJSON ring.

    Anything that is not a list of coordinate pairs yields an empty ring.
    """
    if not isinstance(raw, (list, tuple)):
        return []
    return [(float(p[0]), float(p[1])) for p in raw if _is_vertex(p)]


def outer_ring(geojson: dict[str, Any] | None) -> Coords:
    """Outer ring of the largest polygon part, or an empty list.

    Malformed coordinates never raise; they give an empty or short ring
    which callers treat as no usable boundary.
    """
    try:
        polygon = pick_largest_polygon(geojson)
    except (AttributeError, TypeError, ValueError, IndexError) as e:
        logger.warning(f"Could not read boundary geometry: {e}")
        return []
    if polygon is None:
        return []
    rings = polygon.get("coordinates")
    if not isinstance(rings, (list, tuple)) or not rings:
        return []
    return clean_ring(rings[0])


def is_usable_ring(ring: Ring) -> bool:
    """Check a ring can be used for containment filtering.

    Requires at least 4 finite vertices and a non-zero Shapely area.
    """
    if len(ring) < 4:
        return False
    if not all(is_finite_point(p) for p in ring):
        return False

    try:
        polygon = polygon_from_coords(close_ring(ring))
    except (ValueError, TypeError, GEOSException) as e:
        logger.debug(f"Ring rejected by Shapely: {e}")
        return False

    return not polygon.is_empty and polygon.area > 0


def ring_bounds(ring: Ring, expansion: float = 0.0) -> tuple[float, float, float, float]:
    """Bounding box of a ring, optionally expanded in every direction.

    Args:
        ring: (lon, lat) ring
        expansion: Degrees added on each side

    Returns:
        Tuple of (west, south, east, north)
    """
    if not ring:
        return (0.0, 0.0, 0.0, 0.0)
    lons = [p[0] for p in ring]
    lats = [p[1] for p in ring]
    west, south, east, north = min(lons), min(lats), max(lons), max(lats)
    return (west - expansion, south - expansion, east + expansion, north + expansion)


def rectangle_polygon(
    center_lon: float,
    center_lat: float,
    lon_offset: float,
    lat_offset: float,
) -> dict[str, Any]:
    """Axis-aligned rectangle around a center as a GeoJSON Polygon."""
    rect = box(
        center_lon - lon_offset,
        center_lat - lat_offset,
        center_lon + lon_offset,
        center_lat + lat_offset,
    )
    geometry = mapping(rect)
    return {
        "type": "Polygon",
        "coordinates": [[list(c) for c in ring] for ring in geometry["coordinates"]],
    }

