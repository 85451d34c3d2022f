"""Intersection search and guess scoring."""

from .candidates import (
    ACCEPTANCE_DISTANCE_M,
    DEDUP_RADIUS_M,
    DISCOVERY_DISTANCE_M,
    MAX_NEIGHBORS,
    MAX_PRIMARY_ATTEMPTS,
    IntersectingNeighbor,
    build_neighbor_pool,
    build_primary_pool,
    find_crossings,
    find_intersecting_neighbors,
    generate_candidate,
    refine_crossings,
)
from .scoring import score_guess

__all__ = [
    # Limits
    "MAX_PRIMARY_ATTEMPTS",
    "MAX_NEIGHBORS",
    "DISCOVERY_DISTANCE_M",
    "DEDUP_RADIUS_M",
    "ACCEPTANCE_DISTANCE_M",
    # Candidate search
    "IntersectingNeighbor",
    "find_crossings",
    "refine_crossings",
    "build_primary_pool",
    "build_neighbor_pool",
    "find_intersecting_neighbors",
    "generate_candidate",
    # Scoring
    "score_guess",
]
