"""Playable area boundary validation, fallback and file loading."""

import json
import logging
from pathlib import Path
from typing import Any

from ..geometry.polygon_ops import rectangle_polygon

logger = logging.getLogger(__name__)

# Half-size of the fallback box (lat_offset, lon_offset) in degrees by place type
FALLBACK_OFFSETS: dict[str, tuple[float, float]] = {
    "city": (0.12, 0.15),
    "town": (0.12, 0.15),
    "village": (0.08, 0.10),
    "municipality": (0.08, 0.10),
    "neighbourhood": (0.02, 0.02),
    "suburb": (0.02, 0.02),
    "quarter": (0.03, 0.04),
    "district": (0.03, 0.04),
    "borough": (0.05, 0.06),
    "ward": (0.05, 0.06),
    "county": (0.20, 0.25),
    "state_district": (0.20, 0.25),
}
DEFAULT_FALLBACK_OFFSET = (0.04, 0.04)


def is_valid_boundary(geojson: dict[str, Any] | None) -> bool:
    """Check a geocoder boundary is worth using.

    The first ring must have at least 4 points and at least one coordinate
    must be away from (0, 0).
    """
    if not geojson or not geojson.get("type"):
        return False

    geom_type = geojson["type"]
    coordinates = geojson.get("coordinates")
    if geom_type not in ("Polygon", "MultiPolygon"):
        logger.info(f"Boundary type not supported: {geom_type}")
        return False
    if not coordinates:
        logger.info("No coordinates in boundary data")
        return False

    try:
        ring = coordinates[0] if geom_type == "Polygon" else coordinates[0][0]
    except (IndexError, TypeError):
        return False

    if not ring or len(ring) < 4:
        logger.info(f"Boundary ring has insufficient points: {len(ring or [])}")
        return False

    has_valid_coords = any(
        isinstance(coord, (list, tuple))
        and len(coord) >= 2
        and isinstance(coord[0], (int, float))
        and isinstance(coord[1], (int, float))
        and abs(coord[0]) > 0.001
        and abs(coord[1]) > 0.001
        for coord in ring
    )
    if not has_valid_coords:
        logger.info("Boundary coordinates appear to be invalid or all zeros")
        return False

    return True


def create_fallback_boundary(
    lat: float,
    lon: float,
    place_type: str | None = None,
) -> dict[str, Any]:
    """Rectangular boundary around a place when no official one exists.

    Args:
        lat: Place latitude
        lon: Place longitude
        place_type: Geocoder place type (city, village, suburb, ...)

    Returns:
        GeoJSON Polygon
    """
    lat_offset, lon_offset = FALLBACK_OFFSETS.get(place_type or "", DEFAULT_FALLBACK_OFFSET)
    logger.info(
        f"Creating {place_type or 'default'} fallback boundary at ({lat:.4f}, {lon:.4f}) "
        f"with size {lat_offset}x{lon_offset} degrees"
    )
    return rectangle_polygon(lon, lat, lon_offset, lat_offset)


def resolve_boundary(
    geojson: dict[str, Any] | None,
    lat: float | None = None,
    lon: float | None = None,
    place_type: str | None = None,
) -> dict[str, Any] | None:
    """Use the given boundary if valid, else a fallback box around (lat, lon)."""
    if is_valid_boundary(geojson):
        return geojson
    if lat is None or lon is None:
        return None
    return create_fallback_boundary(lat, lon, place_type)


def _extract_geometry(data: dict[str, Any]) -> dict[str, Any] | None:
    data_type = data.get("type")
    if data_type in ("Polygon", "MultiPolygon"):
        return data
    if data_type == "Feature":
        return data.get("geometry")
    if data_type == "FeatureCollection":
        for feature in data.get("features") or []:
            geometry = feature.get("geometry") or {}
            if geometry.get("type") in ("Polygon", "MultiPolygon"):
                return geometry
    return None


def load_boundary_from_file(file_path: str | Path) -> dict[str, Any] | None:
    """Read the first Polygon/MultiPolygon geometry from a GeoJSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Boundary file not found: {file_path}")

    with open(file_path) as f:
        data = json.load(f)

    geometry = _extract_geometry(data)
    if geometry is None:
        logger.warning(f"No polygon geometry found in {file_path.name}")
    return geometry
