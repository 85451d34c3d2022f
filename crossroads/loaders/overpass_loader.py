"""Road data parsing for Overpass API payloads and GeoJSON files.

The engine never performs HTTP itself. A fetcher posts the query built by
`build_overpass_query` and hands the decoded JSON to
`parse_overpass_payload`.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..geometry.distance import is_finite_point
from ..models.boundary import Boundary
from ..models.roads import RawRoadRecord

logger = logging.getLogger(__name__)

ROAD_HIGHWAY_TYPES = (
    "primary",
    "secondary",
    "tertiary",
    "residential",
    "unclassified",
    "trunk",
    "motorway",
)
BBOX_EXPANSION_DEG = 0.02


def build_overpass_query(
    boundary: Boundary,
    expansion: float = BBOX_EXPANSION_DEG,
    timeout: int = 60,
    highway_types: tuple[str, ...] = ROAD_HIGHWAY_TYPES,
) -> str:
    """Overpass QL query for named roads in the boundary's bounding box.

    Args:
        boundary: Playable area
        expansion: Degrees added to each side of the bounding box
        timeout: Server-side timeout in seconds
        highway_types: Highway tag values to request

    Returns:
        Overpass QL query string
    """
    west, south, east, north = boundary.bbox(expansion)
    pattern = "|".join(highway_types)
    return (
        f"[out:json][timeout:{timeout}];"
        f'(way["highway"~"^({pattern})$"]["name"]({south},{west},{north},{east}););'
        f"out geom;"
    )


def _node_coords(geometry: list[dict[str, Any]]) -> list[tuple[float, float]]:
    coords = []
    for node in geometry:
        point = (node.get("lon"), node.get("lat"))
        if is_finite_point(point):
            coords.append((float(point[0]), float(point[1])))
    return coords


def parse_overpass_payload(payload: dict[str, Any]) -> list[RawRoadRecord]:
    """Convert an Overpass `out geom` response into raw road records.

    Only named `way` elements with geometry are kept. Nodes with missing or
    non-finite coordinates are dropped, and ways left with fewer than two
    points are skipped.

    Args:
        payload: Decoded Overpass JSON

    Returns:
        Raw road records in element order
    """
    elements = payload.get("elements") or []
    records = []
    skipped = 0

    for element in elements:
        if element.get("type") != "way":
            continue
        tags = element.get("tags") or {}
        name = tags.get("name")
        geometry = element.get("geometry")
        if not name or not geometry:
            continue

        coords = _node_coords(geometry)
        if len(coords) < 2:
            skipped += 1
            continue

        records.append(RawRoadRecord(
            name=name,
            lines=[coords],
            highway=tags.get("highway", ""),
        ))

    logger.info(
        f"Overpass payload: {len(elements)} elements, {len(records)} named roads "
        f"({skipped} skipped for missing geometry)"
    )
    return records


def parse_geojson_roads(collection: dict[str, Any]) -> list[RawRoadRecord]:
    """Convert a GeoJSON FeatureCollection of named lines into road records."""
    records = []
    for i, feature in enumerate(collection.get("features") or []):
        properties = feature.get("properties") or {}
        if not properties.get("name"):
            continue
        try:
            records.append(RawRoadRecord.from_geojson_feature(feature))
        except ValidationError as e:
            logger.warning(f"Skipping road feature {i} ({properties.get('name')}): {e}")
    return records


def load_roads_from_file(file_path: str | Path) -> list[RawRoadRecord]:
    """Load road records from an Overpass JSON or GeoJSON file.

    Args:
        file_path: Path to the JSON file

    Returns:
        Raw road records

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is neither format
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Road data file not found: {file_path}")

    with open(file_path) as f:
        payload = json.load(f)

    return parse_roads_payload(payload)


def parse_roads_payload(payload: dict[str, Any]) -> list[RawRoadRecord]:
    """Dispatch on payload shape: Overpass response or GeoJSON FeatureCollection.

    Raises:
        ValueError: If the payload is neither format
    """
    if "elements" in payload:
        return parse_overpass_payload(payload)
    if payload.get("type") == "FeatureCollection":
        return parse_geojson_roads(payload)

    raise ValueError("Road data is neither an Overpass response nor a GeoJSON FeatureCollection")
