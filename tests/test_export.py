"""Tests for GeoJSON export."""

from crossroads.export.geojson import (
    boundary_to_geojson,
    candidate_to_geojson,
    catalog_to_geojson,
    guess_to_geojson,
)
from crossroads.models.boundary import Boundary
from crossroads.models.intersections import CrossingPoint, IntersectionCandidate
from crossroads.models.progress import FoundSets
from crossroads.models.roads import RawRoadRecord
from crossroads.solver.scoring import score_guess
from crossroads.streets.catalog import build_catalog


class TestCatalogExport:
    """Test street and boundary export."""

    def test_single_and_multi_segment_streets(self):
        catalog = build_catalog([
            RawRoadRecord(name="Main St", lines=[[(0.0, 0.0), (0.001, 0.0)]]),
            RawRoadRecord(name="Elm St", lines=[[(0.0, 0.001), (0.001, 0.001)], [(0.001, 0.001), (0.002, 0.001)]]),
        ])
        found = FoundSets()
        found.add_name("main st")

        collection = catalog_to_geojson(catalog, found)
        main, elm = collection["features"]

        assert main["geometry"]["type"] == "LineString"
        assert main["geometry"]["coordinates"] == [[0.0, 0.0], [0.001, 0.0]]
        assert main["properties"]["found"]
        assert elm["geometry"]["type"] == "MultiLineString"
        assert elm["properties"]["segments"] == 2
        assert not elm["properties"]["found"]

    def test_unusable_boundary_not_exported(self):
        assert boundary_to_geojson(Boundary(ring=[(0, 0), (1, 0), (0, 0)])) is None

    def test_boundary_feature(self):
        feature = boundary_to_geojson(Boundary(ring=[(0, 0), (1, 0), (1, 1), (0, 1)]))
        assert feature["geometry"]["type"] == "Polygon"
        assert len(feature["geometry"]["coordinates"][0]) == 5


class TestRoundExport:
    """Test target and guess export."""

    def test_candidate_and_guess(self):
        candidate = IntersectionCandidate(
            street_a="A St",
            street_b="B St",
            locations=[
                CrossingPoint(lat=47.60, lon=-122.33, approach_distance_m=1.0),
                CrossingPoint(lat=47.61, lon=-122.33, approach_distance_m=0.0),
            ],
        )
        locations = candidate_to_geojson(candidate)
        canonical_flags = [f["properties"]["canonical"] for f in locations["features"]]
        assert canonical_flags == [False, True]

        score = score_guess(47.6001, -122.33, candidate.locations)
        guess = guess_to_geojson(47.6001, -122.33, score)
        marker, line = guess["features"]
        assert marker["geometry"]["coordinates"] == [-122.33, 47.6001]
        assert line["geometry"]["type"] == "LineString"
