"""Pydantic models for crossroads."""

from .boundary import Boundary, GeoJSONPolygon
from .intersections import (
    CrossingPoint,
    DifficultyPolicy,
    GuessScore,
    IntersectionCandidate,
    intersection_key,
)
from .progress import FoundSets, ProgressStats
from .roads import ClassCategory, RawRoadRecord, RoadClass, RoadFeature, RoadSegment
from .rules import (
    CatalogRules,
    DiscoveryRules,
    EngineRules,
    ScoringRules,
    SearchRules,
)

__all__ = [
    # Roads
    "RoadClass",
    "ClassCategory",
    "RoadSegment",
    "RoadFeature",
    "RawRoadRecord",
    # Area
    "Boundary",
    "GeoJSONPolygon",
    # Intersections
    "DifficultyPolicy",
    "CrossingPoint",
    "IntersectionCandidate",
    "GuessScore",
    "intersection_key",
    # Progress
    "FoundSets",
    "ProgressStats",
    # Rules
    "EngineRules",
    "DiscoveryRules",
    "SearchRules",
    "ScoringRules",
    "CatalogRules",
]
