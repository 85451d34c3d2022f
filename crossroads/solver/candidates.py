"""Randomized intersection candidate search.

One round works street-first:
1. Shuffle the pool of primary streets allowed by the difficulty
2. For each of the first MAX_PRIMARY_ATTEMPTS primaries, probe up to
   MAX_NEIGHBORS other streets for crossings
3. Keep crossings that are close enough and whose classes *at that
   location* satisfy the difficulty policy
4. Return a random intersecting neighbor of the first primary that has one

The search scans segment pairs; there is no spatial index.
"""

import logging
import random
from dataclasses import dataclass
from itertools import islice

from ..geometry.distance import great_circle_distance_m
from ..geometry.segments import closest_points_between_segments, segment_midpoint
from ..models.intersections import CrossingPoint, DifficultyPolicy, IntersectionCandidate
from ..models.progress import FoundSets
from ..models.roads import RoadFeature
from ..models.rules import (
    ACCEPTANCE_DISTANCE_M,
    DEDUP_RADIUS_M,
    DISCOVERY_DISTANCE_M,
    MAX_NEIGHBORS,
    MAX_PRIMARY_ATTEMPTS,
    EngineRules,
)
from ..streets.catalog import RoadCatalog
from ..streets.classification import StreetClassificationIndex

logger = logging.getLogger(__name__)

__all__ = [
    "MAX_PRIMARY_ATTEMPTS",
    "MAX_NEIGHBORS",
    "DISCOVERY_DISTANCE_M",
    "DEDUP_RADIUS_M",
    "ACCEPTANCE_DISTANCE_M",
    "IntersectingNeighbor",
    "find_crossings",
    "refine_crossings",
    "build_primary_pool",
    "build_neighbor_pool",
    "find_intersecting_neighbors",
    "generate_candidate",
]


@dataclass
class IntersectingNeighbor:
    """A street that crosses the primary street, with its valid crossings."""

    feature: RoadFeature
    crossings: list[CrossingPoint]


def find_crossings(
    feature_a: RoadFeature,
    feature_b: RoadFeature,
    max_distance_m: float = DISCOVERY_DISTANCE_M,
    dedup_radius_m: float = DEDUP_RADIUS_M,
) -> list[CrossingPoint]:
    """All places where two streets come within `max_distance_m`.

    Every segment pair of A is compared against every segment pair of B.
    The crossing location is the midpoint of the two closest points. A
    crossing within `dedup_radius_m` of one already kept is dropped, so the
    first pair scanned wins.

    Args:
        feature_a: First street
        feature_b: Second street
        max_distance_m: Max approach distance to count as a crossing
        dedup_radius_m: Minimum spacing between kept crossings

    Returns:
        Crossings in scan order
    """
    crossings: list[CrossingPoint] = []

    for line_a in feature_a.lines:
        for line_b in feature_b.lines:
            for i in range(len(line_a) - 1):
                for j in range(len(line_b) - 1):
                    point_a, point_b = closest_points_between_segments(
                        line_a[i], line_a[i + 1], line_b[j], line_b[j + 1]
                    )
                    distance = great_circle_distance_m(
                        point_a[1], point_a[0], point_b[1], point_b[0]
                    )
                    if distance > max_distance_m:
                        continue

                    lon, lat = segment_midpoint(point_a, point_b)
                    is_duplicate = any(
                        great_circle_distance_m(c.lat, c.lon, lat, lon) <= dedup_radius_m
                        for c in crossings
                    )
                    if not is_duplicate:
                        crossings.append(CrossingPoint(
                            lat=lat, lon=lon, approach_distance_m=distance
                        ))

    return crossings


def refine_crossings(
    crossings: list[CrossingPoint],
    street_a: str,
    street_b: str,
    index: StreetClassificationIndex,
    policy: DifficultyPolicy,
    acceptance_distance_m: float = ACCEPTANCE_DISTANCE_M,
) -> list[CrossingPoint]:
    """Crossings that are tight enough and satisfy the difficulty policy.

    Both streets are classified at each crossing location, not by their
    overall class.
    """
    valid = []
    for crossing in crossings:
        if crossing.approach_distance_m > acceptance_distance_m:
            continue

        category_a = index.category_at(street_a, crossing.lat, crossing.lon)
        category_b = index.category_at(street_b, crossing.lat, crossing.lon)
        if policy.accepts(category_a, category_b):
            valid.append(crossing)

    return valid


def build_primary_pool(
    catalog: RoadCatalog,
    index: StreetClassificationIndex,
    policy: DifficultyPolicy,
) -> list[RoadFeature]:
    """Streets a round may start from.

    Policies that need a major street only start from streets with at least
    one major-category segment.
    """
    if policy.requires_major_primary:
        return [f for f in catalog if index.has_major_segment(f.name)]
    return catalog.features


def build_neighbor_pool(
    catalog: RoadCatalog,
    primary: RoadFeature,
    found: FoundSets,
    rng: random.Random,
    max_neighbors: int = MAX_NEIGHBORS,
) -> list[RoadFeature]:
    """Streets to probe against `primary`.

    Excludes streets that normalize to the same key as the primary
    ("E Broadway" vs "Broadway") and pairs already found in either order,
    then samples at most `max_neighbors`.
    """
    primary_key = catalog.normalized_name(primary.name)
    pool = [
        f for f in catalog
        if f.name != primary.name
        and catalog.normalized_name(f.name) != primary_key
        and not found.has_intersection(primary.name, f.name)
    ]

    if len(pool) > max_neighbors:
        pool = rng.sample(pool, max_neighbors)

    return pool


def find_intersecting_neighbors(
    primary: RoadFeature,
    catalog: RoadCatalog,
    index: StreetClassificationIndex,
    policy: DifficultyPolicy,
    found: FoundSets,
    rng: random.Random,
    rules: EngineRules,
) -> list[IntersectingNeighbor]:
    """Neighbors of `primary` with at least one valid crossing."""
    discovery = rules.discovery
    neighbors = build_neighbor_pool(
        catalog, primary, found, rng, rules.search.max_neighbors
    )

    intersecting = []
    for neighbor in neighbors:
        crossings = find_crossings(
            primary,
            neighbor,
            max_distance_m=discovery.discovery_distance_m,
            dedup_radius_m=discovery.dedup_radius_m,
        )
        if not crossings:
            continue

        valid = refine_crossings(
            crossings,
            primary.name,
            neighbor.name,
            index,
            policy,
            acceptance_distance_m=discovery.acceptance_distance_m,
        )
        if valid:
            intersecting.append(IntersectingNeighbor(feature=neighbor, crossings=valid))

    logger.debug(
        f"  - Checked {len(neighbors)} streets against {primary.name}, "
        f"found {len(intersecting)} valid intersections"
    )
    return intersecting


def generate_candidate(
    catalog: RoadCatalog,
    index: StreetClassificationIndex,
    policy: DifficultyPolicy,
    found: FoundSets | None = None,
    rng: random.Random | None = None,
    rules: EngineRules | None = None,
) -> IntersectionCandidate | None:
    """Run one round of the intersection search.

    Args:
        catalog: Loaded road catalog
        index: Classification index built from the same catalog
        policy: Active difficulty policy
        found: Already found streets/intersections (pairs are skipped)
        rng: Random source (module-level random by default)
        rules: Engine rules (thresholds and search limits)

    Returns:
        IntersectionCandidate, or None when no intersection could be found
    """
    found = found or FoundSets()
    rng = rng or random.Random()
    rules = rules or EngineRules()

    if catalog.is_empty:
        return None

    logger.info(f"Generating intersection (difficulty: {policy.value})...")

    pool = build_primary_pool(catalog, index, policy)
    if not pool:
        logger.info(f"No suitable primary streets for difficulty {policy.value}")
        return None

    shuffled = list(pool)
    rng.shuffle(shuffled)
    attempts = rules.search.max_primary_attempts

    for primary in islice(shuffled, attempts):
        logger.debug(f"Trying primary street: {primary.name} (overall: {primary.overall_class.value})")

        intersecting = find_intersecting_neighbors(
            primary, catalog, index, policy, found, rng, rules
        )
        if not intersecting:
            continue

        choice = rng.choice(intersecting)
        canonical = min(choice.crossings, key=lambda c: c.approach_distance_m)
        candidate = IntersectionCandidate(
            street_a=primary.name,
            street_b=choice.feature.name,
            locations=choice.crossings,
            class_a=index.classify_at(primary.name, canonical.lat, canonical.lon),
            class_b=index.classify_at(choice.feature.name, canonical.lat, canonical.lon),
        )

        logger.info(
            f"Selected intersection: {candidate.label} "
            f"({canonical.approach_distance_m:.1f}m apart)"
        )
        return candidate

    logger.info(
        f"Could not find a valid intersection after trying "
        f"{min(attempts, len(shuffled))} primary streets"
    )
    return None
