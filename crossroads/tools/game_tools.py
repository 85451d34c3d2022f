"""MCP tool request/response schemas."""

from typing import Any

from pydantic import BaseModel, Field

from ..models.intersections import DifficultyPolicy, IntersectionCandidate
from ..session import GameSession


class FallbackPlace(BaseModel):
    """Place used to build a rectangular boundary when none is supplied."""

    lat: float = Field(..., ge=-90, le=90, description="Place latitude")
    lon: float = Field(..., ge=-180, le=180, description="Place longitude")
    place_type: str | None = Field(
        default=None, description="Geocoder place type: city, town, village, suburb, ..."
    )


class LoadAreaRequest(BaseModel):
    """Complete request for loading a playable area."""

    roads: dict[str, Any] = Field(
        ...,
        description="Overpass 'out geom' response or GeoJSON FeatureCollection of named lines",
    )
    boundary: dict[str, Any] | None = Field(
        default=None, description="GeoJSON Polygon or MultiPolygon of the playable area"
    )
    fallback: FallbackPlace | None = Field(
        default=None, description="Used when the boundary is missing or invalid"
    )
    ruleset: str = Field(default="default", description="Ruleset name to load")
    rules_override: dict[str, Any] | None = Field(
        default=None, description="JSON merge patch applied to the ruleset"
    )
    difficulty: DifficultyPolicy | None = Field(
        default=None, description="Initial difficulty (defaults to the ruleset's)"
    )
    seed: int | None = Field(default=None, ge=0, description="Random seed for reproducible rounds")


class AreaSummary(BaseModel):
    """Summary returned after an area is loaded."""

    street_count: int = Field(..., ge=0)
    total_length_m: float = Field(..., ge=0)
    class_distribution: dict[str, int] = Field(default_factory=dict)
    boundary_applied: bool = False
    boundary_rejected: int = Field(default=0, ge=0)
    difficulty: DifficultyPolicy

    @classmethod
    def from_session(cls, session: GameSession) -> "AreaSummary":
        catalog = session.catalog
        return cls(
            street_count=len(catalog),
            total_length_m=round(catalog.total_length_m, 1),
            class_distribution=catalog.class_distribution(),
            boundary_applied=catalog.stats.boundary_applied,
            boundary_rejected=catalog.stats.boundary_rejected,
            difficulty=session.difficulty,
        )


def candidate_summary(candidate: IntersectionCandidate) -> dict[str, Any]:
    """Target description without revealing the answer locations."""
    return {
        "street_a": candidate.street_a,
        "street_b": candidate.street_b,
        "label": candidate.label,
        "location_count": candidate.location_count,
        "multiple_locations": candidate.multiple_locations,
        "instructions": (
            "Click near any intersection of these streets"
            if candidate.multiple_locations
            else "Click on the map to place your guess"
        ),
    }
