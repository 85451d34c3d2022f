"""Tests for road payload parsing, boundary fallback and ruleset loading."""

import json

import pytest
from pydantic import ValidationError

from crossroads.loaders.boundary_loader import (
    create_fallback_boundary,
    is_valid_boundary,
    load_boundary_from_file,
    resolve_boundary,
)
from crossroads.loaders.overpass_loader import (
    build_overpass_query,
    load_roads_from_file,
    parse_geojson_roads,
    parse_overpass_payload,
    parse_roads_payload,
)
from crossroads.models.boundary import Boundary
from crossroads.models.intersections import DifficultyPolicy
from crossroads.models.roads import RoadClass
from crossroads.models.rules import EngineRules
from crossroads.rules.loader import get_ruleset_path, list_rulesets, load_ruleset


def overpass_way(name, highway, points, way_id=1):
    way = {
        "type": "way",
        "id": way_id,
        "tags": {"highway": highway},
        "geometry": [{"lat": lat, "lon": lon} for lon, lat in points],
    }
    if name:
        way["tags"]["name"] = name
    return way


OVERPASS_PAYLOAD = {
    "version": 0.6,
    "elements": [
        overpass_way("Main Street", "primary", [(-122.331, 47.60), (-122.329, 47.60)], 1),
        overpass_way(None, "residential", [(-122.331, 47.61), (-122.329, 47.61)], 2),
        overpass_way("Stub Lane", "residential", [(-122.331, 47.62)], 3),
        {"type": "node", "id": 4, "lat": 47.6, "lon": -122.33},
        overpass_way("1st Avenue", "secondary", [(-122.33, 47.599), (-122.33, 47.601)], 5),
    ],
}

SQUARE = {
    "type": "Polygon",
    "coordinates": [[[-122.34, 47.59], [-122.32, 47.59], [-122.32, 47.61], [-122.34, 47.61], [-122.34, 47.59]]],
}


class TestOverpassParsing:
    """Test Overpass payload parsing."""

    def test_keeps_named_ways_with_geometry(self):
        records = parse_overpass_payload(OVERPASS_PAYLOAD)

        assert [r.name for r in records] == ["Main Street", "1st Avenue"]
        assert records[0].highway == "primary"
        assert records[0].lines == [[(-122.331, 47.60), (-122.329, 47.60)]]

    def test_non_finite_nodes_dropped(self):
        payload = {"elements": [
            overpass_way("Broken St", "residential", [(-122.33, 47.60), (float("nan"), 47.61)]),
        ]}
        assert parse_overpass_payload(payload) == []

    def test_empty_payload(self):
        assert parse_overpass_payload({}) == []

    def test_query_uses_expanded_bbox(self):
        boundary = Boundary(ring=[(0, 0), (1, 0), (1, 1), (0, 1)])
        query = build_overpass_query(boundary)

        assert query.startswith("[out:json][timeout:60];")
        assert "(-0.02,-0.02,1.02,1.02)" in query
        assert '["name"]' in query
        assert "motorway" in query
        assert query.endswith("out geom;")


class TestGeoJSONRoads:
    """Test GeoJSON road parsing."""

    def test_line_and_multiline_features(self):
        collection = {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "properties": {"name": "Main Street", "highway": "primary"},
                    "geometry": {"type": "LineString", "coordinates": [[0, 0, 12.5], [0, 1, 13.0]]},
                },
                {
                    "type": "Feature",
                    "properties": {"name": "Ring Road", "highway": "trunk"},
                    "geometry": {
                        "type": "MultiLineString",
                        "coordinates": [[[0, 0], [1, 0]], [[1, 0], [1, 1]]],
                    },
                },
                {
                    "type": "Feature",
                    "properties": {},
                    "geometry": {"type": "LineString", "coordinates": [[0, 0], [1, 1]]},
                },
                {
                    "type": "Feature",
                    "properties": {"name": "Bad Geometry"},
                    "geometry": {"type": "Point", "coordinates": [0, 0]},
                },
            ],
        }
        records = parse_geojson_roads(collection)

        assert [r.name for r in records] == ["Main Street", "Ring Road"]
        assert records[0].lines == [[(0.0, 0.0), (0.0, 1.0)]]
        assert len(records[1].lines) == 2

    def test_dispatch_rejects_unknown_payload(self):
        with pytest.raises(ValueError):
            parse_roads_payload({"type": "Feature"})

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "roads.json"
        path.write_text(json.dumps(OVERPASS_PAYLOAD))

        records = load_roads_from_file(path)
        assert len(records) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_roads_from_file(tmp_path / "missing.json")


class TestBoundaryLoading:
    """Test boundary validation and fallback rectangles."""

    def test_valid_polygon(self):
        assert is_valid_boundary(SQUARE)

    def test_invalid_boundaries(self):
        assert not is_valid_boundary(None)
        assert not is_valid_boundary({"type": "Point", "coordinates": [1, 1]})
        assert not is_valid_boundary({"type": "Polygon", "coordinates": [[[1, 1], [2, 2], [1, 1]]]})
        assert not is_valid_boundary({
            "type": "Polygon",
            "coordinates": [[[0, 0], [0, 0], [0, 0], [0, 0]]],
        })

    def test_city_fallback_size(self):
        rect = create_fallback_boundary(47.6, -122.33, "city")
        west, south, east, north = Boundary.from_geojson(rect).bbox()

        assert north - south == pytest.approx(0.24)
        assert east - west == pytest.approx(0.30)

    def test_unknown_place_type_uses_default(self):
        rect = create_fallback_boundary(47.6, -122.33, "hamlet")
        west, south, east, north = Boundary.from_geojson(rect).bbox()
        assert north - south == pytest.approx(0.08)
        assert east - west == pytest.approx(0.08)

    def test_resolve_prefers_valid_boundary(self):
        assert resolve_boundary(SQUARE, 10.0, 10.0) is SQUARE

    def test_resolve_falls_back(self):
        rect = resolve_boundary(None, 47.6, -122.33, "suburb")
        assert Boundary.from_geojson(rect).contains((-122.33, 47.6))
        assert resolve_boundary(None) is None

    def test_load_boundary_from_feature_collection(self, tmp_path):
        path = tmp_path / "area.geojson"
        path.write_text(json.dumps({
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "properties": {}, "geometry": {"type": "Point", "coordinates": [0, 0]}},
                {"type": "Feature", "properties": {}, "geometry": SQUARE},
            ],
        }))
        assert load_boundary_from_file(path) == SQUARE


class TestRulesets:
    """Test YAML ruleset loading."""

    def test_list_rulesets(self):
        names = [r["name"] for r in list_rulesets()]
        assert "default" in names
        assert "casual" in names

    def test_default_matches_builtin_constants(self):
        rules = load_ruleset("default")
        assert rules == EngineRules()

    def test_casual_ruleset(self):
        rules = load_ruleset("casual")
        assert rules.default_difficulty is DifficultyPolicy.ANY_ANY
        assert rules.catalog.classify_highway("motorway_link") is RoadClass.MAJOR

    def test_override(self):
        rules = load_ruleset("default", {"scoring": {"max_score": 500}})
        assert rules.scoring.max_score == 500
        assert rules.discovery.acceptance_distance_m == 5.0

    def test_missing_ruleset(self):
        with pytest.raises(FileNotFoundError):
            load_ruleset("does-not-exist")

    def test_descriptions_come_from_header_comment(self):
        descriptions = {r["name"]: r["description"] for r in list_rulesets()}
        assert descriptions["default"].startswith("Default rules")

    def test_ruleset_path(self):
        assert get_ruleset_path("casual").name == "casual.yaml"

    def test_acceptance_cannot_exceed_discovery(self):
        with pytest.raises(ValidationError, match="acceptance_distance_m"):
            EngineRules.from_yaml(
                "discovery:\n  discovery_distance_m: 10\n  acceptance_distance_m: 20\n"
            )

    def test_override_is_validated(self):
        with pytest.raises(ValidationError):
            load_ruleset("default", {"discovery": {"acceptance_distance_m": 80}})
