"""Road and boundary data loaders for crossroads."""

from .boundary_loader import (
    create_fallback_boundary,
    is_valid_boundary,
    load_boundary_from_file,
    resolve_boundary,
)
from .overpass_loader import (
    build_overpass_query,
    load_roads_from_file,
    parse_geojson_roads,
    parse_overpass_payload,
    parse_roads_payload,
)

__all__ = [
    "build_overpass_query",
    "parse_overpass_payload",
    "parse_geojson_roads",
    "parse_roads_payload",
    "load_roads_from_file",
    "is_valid_boundary",
    "create_fallback_boundary",
    "resolve_boundary",
    "load_boundary_from_file",
]
