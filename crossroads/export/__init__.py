"""Export utilities for crossroads."""

from .geojson import (
    boundary_to_geojson,
    candidate_to_geojson,
    catalog_to_geojson,
    feature_to_geojson,
    guess_to_geojson,
)

__all__ = [
    "catalog_to_geojson",
    "feature_to_geojson",
    "boundary_to_geojson",
    "candidate_to_geojson",
    "guess_to_geojson",
]
