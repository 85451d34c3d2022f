"""GeoJSON export utilities for catalogs, targets and guesses."""

from typing import Any

from shapely.geometry import LineString, MultiLineString, Point, mapping

from ..models.boundary import Boundary
from ..models.intersections import GuessScore, IntersectionCandidate
from ..models.progress import FoundSets
from ..models.roads import RoadFeature
from ..streets.catalog import RoadCatalog


def _geometry(geom) -> dict[str, Any]:
    """Shapely geometry to a plain GeoJSON dict with list coordinates."""
    data = mapping(geom)
    return {"type": data["type"], "coordinates": _listify(data["coordinates"])}


def _listify(value):
    if isinstance(value, (list, tuple)):
        if value and isinstance(value[0], (int, float)):
            return list(value)
        return [_listify(v) for v in value]
    return value


def feature_to_geojson(feature: RoadFeature, found: bool = False) -> dict[str, Any]:
    """One street as a GeoJSON Feature.

    Single-segment streets are LineStrings; others are MultiLineStrings.
    """
    if len(feature.segments) == 1:
        geom = LineString(feature.segments[0].polyline)
    else:
        geom = MultiLineString([s.polyline for s in feature.segments])

    return {
        "type": "Feature",
        "geometry": _geometry(geom),
        "properties": {
            "kind": "street",
            "name": feature.name,
            "type": feature.overall_class.value,
            "length": round(feature.total_length_m, 1),
            "highway": feature.segments[0].highway,
            "segments": len(feature.segments),
            "found": found,
        },
    }


def catalog_to_geojson(
    catalog: RoadCatalog,
    found: FoundSets | None = None,
    include_boundary: bool = True,
) -> dict[str, Any]:
    """Convert a catalog to a GeoJSON FeatureCollection.

    Args:
        catalog: Road catalog to export
        found: Optional found sets, used to flag found streets
        include_boundary: Add the boundary polygon as the first feature

    Returns:
        GeoJSON FeatureCollection dict
    """
    features = []

    if include_boundary and catalog.boundary is not None:
        boundary_feature = boundary_to_geojson(catalog.boundary)
        if boundary_feature is not None:
            features.append(boundary_feature)

    for feature in catalog:
        is_found = found.has_name(feature.name) if found else False
        features.append(feature_to_geojson(feature, found=is_found))

    return {"type": "FeatureCollection", "features": features}


def boundary_to_geojson(boundary: Boundary) -> dict[str, Any] | None:
    """Boundary as a GeoJSON Feature, or None if it is not a usable polygon."""
    if not boundary.is_usable:
        return None
    return {
        "type": "Feature",
        "geometry": boundary.to_geojson().model_dump(mode="json"),
        "properties": {"kind": "boundary", "layer": "area"},
    }


def candidate_to_geojson(candidate: IntersectionCandidate) -> dict[str, Any]:
    """All valid locations of an intersection target as Point features."""
    canonical = candidate.canonical
    features = []
    for i, location in enumerate(candidate.locations):
        features.append({
            "type": "Feature",
            "geometry": _geometry(Point(location.lon, location.lat)),
            "properties": {
                "kind": "intersection",
                "index": i,
                "street_a": candidate.street_a,
                "street_b": candidate.street_b,
                "approach_distance_m": round(location.approach_distance_m, 2),
                "canonical": location == canonical,
            },
        })
    return {"type": "FeatureCollection", "features": features}


def guess_to_geojson(lat: float, lon: float, score: GuessScore) -> dict[str, Any]:
    """Guess marker plus a line to the nearest valid location."""
    nearest = score.nearest
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": _geometry(Point(lon, lat)),
                "properties": {"kind": "guess", "score": score.score},
            },
            {
                "type": "Feature",
                "geometry": _geometry(LineString([(lon, lat), (nearest.lon, nearest.lat)])),
                "properties": {
                    "kind": "guess_line",
                    "distance_m": round(score.distance_m, 1),
                },
            },
        ],
    }
