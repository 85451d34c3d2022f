"""Playable area boundary model."""

from functools import cached_property
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from ..geometry.polygon_ops import (
    close_ring,
    is_usable_ring,
    outer_ring,
    point_in_polygon,
    ring_bounds,
)


class GeoJSONPolygon(BaseModel):
    """GeoJSON Polygon geometry in (lon, lat).

    Coordinates are a list of linear rings (first is exterior, rest are holes).
    """

    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[tuple[float, float]]] = Field(
        ..., description="List of rings, each ring is a list of [lon, lat] coordinates"
    )

    @field_validator("coordinates")
    @classmethod
    def validate_rings(cls, v: list[list[tuple[float, float]]]) -> list[list[tuple[float, float]]]:
        """Validate that at least one ring exists and rings are closed."""
        if not v:
            raise ValueError("Polygon must have at least one ring (exterior)")
        for ring in v:
            if len(ring) < 4:
                raise ValueError("Ring must have at least 4 points (closed polygon)")
            if ring[0] != ring[-1]:
                raise ValueError("Ring must be closed (first point == last point)")
        return v

    @property
    def exterior(self) -> list[tuple[float, float]]:
        return self.coordinates[0]


class Boundary(BaseModel):
    """The single active polygon of the playable area.

    Only the outer ring is kept. A boundary that cannot be used for
    containment (too few points, non-finite or zero-area ring) still loads,
    but `contains` then answers True for every point.
    """

    ring: list[tuple[float, float]] = Field(
        default_factory=list, description="Closed outer ring as (lon, lat)"
    )

    @field_validator("ring")
    @classmethod
    def close(cls, v: list[tuple[float, float]]) -> list[tuple[float, float]]:
        return close_ring(v)

    @classmethod
    def from_geojson(cls, geojson: dict[str, Any] | None) -> "Boundary | None":
        """Build from a GeoJSON Polygon or MultiPolygon (largest part wins)."""
        ring = outer_ring(geojson)
        if not ring:
            return None
        return cls(ring=ring)

    @cached_property
    def is_usable(self) -> bool:
        return is_usable_ring(self.ring)

    def contains(self, point: tuple[float, float]) -> bool:
        """Ray-casting containment; unusable boundaries contain everything."""
        if not self.is_usable:
            return True
        return point_in_polygon(point, self.ring)

    def bbox(self, expansion: float = 0.0) -> tuple[float, float, float, float]:
        """(west, south, east, north) with optional expansion in degrees."""
        return ring_bounds(self.ring, expansion)

    @property
    def center(self) -> tuple[float, float]:
        west, south, east, north = self.bbox()
        return ((west + east) / 2, (south + north) / 2)

    def to_geojson(self) -> GeoJSONPolygon:
        return GeoJSONPolygon(coordinates=[self.ring])
