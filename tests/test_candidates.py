"""Tests for intersection discovery, candidate generation and guess scoring."""

import math
import random

import pytest

from crossroads.geometry.distance import EARTH_RADIUS_M, great_circle_distance_m
from crossroads.models.intersections import (
    CrossingPoint,
    DifficultyPolicy,
    IntersectionCandidate,
)
from crossroads.models.progress import FoundSets
from crossroads.models.roads import RawRoadRecord, RoadClass
from crossroads.models.rules import EngineRules
from crossroads.solver.candidates import (
    build_neighbor_pool,
    build_primary_pool,
    find_crossings,
    generate_candidate,
)
from crossroads.solver.scoring import score_guess
from crossroads.streets.catalog import build_catalog
from crossroads.streets.classification import StreetClassificationIndex

METERS_PER_DEGREE_LAT = EARTH_RADIUS_M * math.pi / 180


def road(name: str, *lines, highway: str = "residential") -> RawRoadRecord:
    return RawRoadRecord(name=name, lines=[list(line) for line in lines], highway=highway)


def setup(records):
    catalog = build_catalog(records)
    return catalog, StreetClassificationIndex(catalog)


# Perpendicular streets crossing at (47.60, -122.33)
MAIN_ST = [(-122.331, 47.60), (-122.329, 47.60)]
FIRST_AVE = [(-122.33, 47.599), (-122.33, 47.601)]


class TestFindCrossings:
    """Test raw crossing discovery between two streets."""

    def test_perpendicular_crossing(self):
        catalog, _ = setup([road("Main St", MAIN_ST), road("1st Ave", FIRST_AVE)])
        crossings = find_crossings(catalog.get("Main St"), catalog.get("1st Ave"))

        assert len(crossings) == 1
        assert crossings[0].lat == pytest.approx(47.60)
        assert crossings[0].lon == pytest.approx(-122.33)
        assert crossings[0].approach_distance_m == pytest.approx(0.0, abs=1e-6)

    def test_shared_vertex_is_deduplicated(self):
        """Two segment pairs meeting at one vertex give one crossing."""
        main = [(-122.331, 47.60), (-122.33, 47.60), (-122.329, 47.60)]
        catalog, _ = setup([road("Main St", main), road("1st Ave", FIRST_AVE)])

        crossings = find_crossings(catalog.get("Main St"), catalog.get("1st Ave"))
        assert len(crossings) == 1

    def test_distant_crossings_all_kept(self):
        avenue = [(-122.33, 47.59), (-122.33, 47.61)]
        catalog, _ = setup([
            road("Pine St", [(-122.331, 47.595), (-122.329, 47.595)]),
            road("Pine St", [(-122.331, 47.605), (-122.329, 47.605)]),
            road("1st Ave", avenue),
        ])

        crossings = find_crossings(catalog.get("Pine St"), catalog.get("1st Ave"))
        assert len(crossings) == 2
        for a in crossings:
            for b in crossings:
                if a is not b:
                    assert great_circle_distance_m(a.lat, a.lon, b.lat, b.lon) > 20

    def test_far_streets_do_not_cross(self):
        catalog, _ = setup([
            road("Main St", MAIN_ST),
            road("Far Ave", [(-122.30, 47.599), (-122.30, 47.601)]),
        ])
        assert find_crossings(catalog.get("Main St"), catalog.get("Far Ave")) == []

    def test_near_miss_found_within_discovery_distance(self):
        """A street ending ~22 m short still counts during discovery."""
        stub = [(-122.33, 47.6002), (-122.33, 47.602)]
        catalog, _ = setup([road("Main St", MAIN_ST), road("Stub Ave", stub)])

        crossings = find_crossings(catalog.get("Main St"), catalog.get("Stub Ave"))
        assert len(crossings) == 1
        assert crossings[0].approach_distance_m == pytest.approx(0.0002 * METERS_PER_DEGREE_LAT)


class TestPools:
    """Test primary and neighbor pool construction."""

    def test_primary_pool_requires_major_segment(self):
        catalog, index = setup([
            road("Main St", MAIN_ST, highway="primary"),
            road("1st Ave", FIRST_AVE),
        ])

        major_pool = build_primary_pool(catalog, index, DifficultyPolicy.MAJOR_MAJOR)
        assert [f.name for f in major_pool] == ["Main St"]
        assert build_primary_pool(catalog, index, DifficultyPolicy.MAJOR_ANY) == major_pool
        assert len(build_primary_pool(catalog, index, DifficultyPolicy.ANY_ANY)) == 2

    def test_neighbor_pool_excludes_same_core_name_and_found_pairs(self):
        catalog, _ = setup([
            road("Broadway", MAIN_ST),
            road("E Broadway", FIRST_AVE),
            road("1st Ave", FIRST_AVE),
            road("2nd Ave", FIRST_AVE),
        ])
        found = FoundSets()
        found.add_intersection("2nd Ave", "Broadway")

        pool = build_neighbor_pool(catalog, catalog.get("Broadway"), found, random.Random(0))
        assert [f.name for f in pool] == ["1st Ave"]

    def test_neighbor_pool_capped(self):
        catalog, _ = setup(
            [road("Main St", MAIN_ST)]
            + [road(f"Street {i}", FIRST_AVE) for i in range(10)]
        )
        pool = build_neighbor_pool(
            catalog, catalog.get("Main St"), FoundSets(), random.Random(0), max_neighbors=3
        )
        assert len(pool) == 3
        assert all(f.name != "Main St" for f in pool)


class TestGenerateCandidate:
    """Test full candidate generation under each difficulty."""

    def test_main_and_first(self):
        catalog, index = setup([
            road("Main St", MAIN_ST, highway="primary"),
            road("1st Ave", FIRST_AVE, highway="secondary"),
        ])

        candidate = generate_candidate(
            catalog, index, DifficultyPolicy.MAJOR_MAJOR, rng=random.Random(1)
        )

        assert candidate is not None
        assert {candidate.street_a, candidate.street_b} == {"Main St", "1st Ave"}
        assert len(candidate.locations) == 1
        assert candidate.canonical.lat == pytest.approx(47.60)
        assert candidate.canonical.lon == pytest.approx(-122.33)
        assert {candidate.class_a, candidate.class_b} == {RoadClass.PRIMARY, RoadClass.SECONDARY}
        assert not candidate.multiple_locations

    def test_residential_pair_only_for_all_all(self):
        catalog, index = setup([road("Oak St", MAIN_ST), road("Elm Ave", FIRST_AVE)])

        assert generate_candidate(catalog, index, DifficultyPolicy.MAJOR_MAJOR) is None
        assert generate_candidate(catalog, index, DifficultyPolicy.MAJOR_ANY) is None

        candidate = generate_candidate(
            catalog, index, DifficultyPolicy.ANY_ANY, rng=random.Random(3)
        )
        assert candidate is not None
        assert {candidate.street_a, candidate.street_b} == {"Oak St", "Elm Ave"}

    def test_class_checked_at_crossing_location(self):
        """A street that is only major far from the crossing is local there."""
        catalog, index = setup([
            road("Mixed Rd", MAIN_ST, highway="residential"),
            road("Mixed Rd", [(-122.320, 47.60), (-122.318, 47.60)], highway="primary"),
            road("1st Ave", FIRST_AVE, highway="primary"),
        ])

        assert generate_candidate(
            catalog, index, DifficultyPolicy.MAJOR_MAJOR, rng=random.Random(0)
        ) is None

        candidate = generate_candidate(
            catalog, index, DifficultyPolicy.MAJOR_ANY, rng=random.Random(0)
        )
        assert candidate is not None
        classes = {candidate.street_a: candidate.class_a, candidate.street_b: candidate.class_b}
        assert classes == {"Mixed Rd": RoadClass.RESIDENTIAL, "1st Ave": RoadClass.PRIMARY}

    def test_near_miss_not_offered(self):
        stub = [(-122.33, 47.6002), (-122.33, 47.602)]
        catalog, index = setup([road("Main St", MAIN_ST), road("Stub Ave", stub)])

        assert generate_candidate(catalog, index, DifficultyPolicy.ANY_ANY) is None

    def test_found_pair_skipped_in_either_order(self):
        catalog, index = setup([road("Main St", MAIN_ST), road("1st Ave", FIRST_AVE)])

        for pair in [("Main St", "1st Ave"), ("1st Ave", "Main St")]:
            found = FoundSets()
            found.add_intersection(*pair)
            assert generate_candidate(catalog, index, DifficultyPolicy.ANY_ANY, found=found) is None

    def test_same_core_name_never_paired(self):
        catalog, index = setup([road("Broadway", MAIN_ST), road("E Broadway", FIRST_AVE)])
        assert generate_candidate(catalog, index, DifficultyPolicy.ANY_ANY) is None

    def test_multiple_locations(self):
        catalog, index = setup([
            road("Pine St", [(-122.331, 47.595), (-122.329, 47.595)]),
            road("Pine St", [(-122.331, 47.605), (-122.329, 47.605)]),
            road("1st Ave", [(-122.33, 47.59), (-122.33, 47.61)]),
        ])

        candidate = generate_candidate(
            catalog, index, DifficultyPolicy.ANY_ANY, rng=random.Random(5)
        )
        assert candidate is not None
        assert candidate.location_count == 2
        assert candidate.multiple_locations
        assert candidate.label.endswith("(2 locations)")

    def test_empty_catalog(self):
        catalog, index = setup([])
        assert generate_candidate(catalog, index, DifficultyPolicy.ANY_ANY) is None

    def test_seeded_rounds_repeat(self):
        records = [road("Main St", MAIN_ST)] + [
            road(f"Street {i}", [(-122.331 + i * 0.0002, 47.599), (-122.331 + i * 0.0002, 47.601)])
            for i in range(1, 10)
        ]
        catalog, index = setup(records)

        first = generate_candidate(catalog, index, DifficultyPolicy.ANY_ANY, rng=random.Random(11))
        second = generate_candidate(catalog, index, DifficultyPolicy.ANY_ANY, rng=random.Random(11))
        assert first.key == second.key

    def test_tighter_acceptance_rule_rejects_more(self):
        stub = [(-122.33, 47.6002), (-122.33, 47.602)]
        catalog, index = setup([road("Main St", MAIN_ST), road("Stub Ave", stub)])
        rules = EngineRules().merge_override({"discovery": {"acceptance_distance_m": 30.0}})

        candidate = generate_candidate(catalog, index, DifficultyPolicy.ANY_ANY, rules=rules)
        assert candidate is not None


class TestScoreGuess:
    """Test location guess scoring."""

    LOCATION = CrossingPoint(lat=47.60, lon=-122.33)

    def test_near_guess(self):
        """A click ~11.5 m away loses 12 points after flooring."""
        lat = 47.60 + 11.5 / METERS_PER_DEGREE_LAT
        result = score_guess(lat, -122.33, [self.LOCATION])

        assert result.distance_m == pytest.approx(11.5, abs=0.01)
        assert result.score == 988

    def test_perfect_guess(self):
        result = score_guess(47.60, -122.33, [self.LOCATION])
        assert result.score == 1000
        assert result.distance_m == 0.0

    def test_far_guess_scores_zero(self):
        result = score_guess(47.62, -122.33, [self.LOCATION])
        assert result.distance_m > 1000
        assert result.score == 0

    def test_nearest_location_counts(self):
        other = CrossingPoint(lat=47.61, lon=-122.33)
        result = score_guess(47.6099, -122.33, [self.LOCATION, other])
        assert result.nearest == other
        assert result.score > 980

    def test_no_locations(self):
        assert score_guess(47.60, -122.33, []) is None

    @pytest.mark.parametrize("lat, lon", [
        (math.nan, -122.33),
        (47.60, math.inf),
        (-math.inf, math.nan),
    ])
    def test_non_finite_guess_is_not_scored(self, lat, lon):
        assert score_guess(lat, lon, [self.LOCATION]) is None


class TestCandidateModel:
    """Test candidate model helpers."""

    def test_canonical_is_tightest_location(self):
        candidate = IntersectionCandidate(
            street_a="A St",
            street_b="B St",
            locations=[
                CrossingPoint(lat=0.0, lon=0.0, approach_distance_m=3.0),
                CrossingPoint(lat=1.0, lon=1.0, approach_distance_m=0.5),
            ],
        )
        assert candidate.canonical.lat == 1.0
        assert candidate.key == "A St|B St"
        assert candidate.model_dump()["location_count"] == 2

    def test_requires_location(self):
        with pytest.raises(ValueError):
            IntersectionCandidate(street_a="A St", street_b="B St", locations=[])

    def test_policy_accepts(self):
        from crossroads.models.roads import ClassCategory

        major, local = ClassCategory.MAJOR, ClassCategory.LOCAL
        assert DifficultyPolicy.MAJOR_MAJOR.accepts(major, major)
        assert not DifficultyPolicy.MAJOR_MAJOR.accepts(major, local)
        assert DifficultyPolicy.MAJOR_ANY.accepts(local, major)
        assert not DifficultyPolicy.MAJOR_ANY.accepts(local, local)
        assert DifficultyPolicy.ANY_ANY.accepts(local, local)
