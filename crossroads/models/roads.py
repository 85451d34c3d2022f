"""Road classification and road feature models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RoadClass(str, Enum):
    """Functional road class, declared from highest to lowest priority."""

    MAJOR = "major"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    RESIDENTIAL = "residential"

    @property
    def priority(self) -> int:
        """Position in the class order (0 = highest priority)."""
        return list(RoadClass).index(self)

    @property
    def category(self) -> "ClassCategory":
        return ClassCategory.of(self)

    @classmethod
    def highest(cls, classes) -> "RoadClass":
        """Highest-priority class among `classes` (Residential if empty)."""
        best = cls.RESIDENTIAL
        for road_class in classes:
            if road_class.priority < best.priority:
                best = road_class
        return best


class ClassCategory(str, Enum):
    """Binary view of RoadClass used for difficulty gating."""

    MAJOR = "major"
    LOCAL = "local"

    @classmethod
    def of(cls, road_class: Any) -> "ClassCategory":
        """Collapse a road class (or its string value) into a category.

        Anything that is not one of the four upper classes is local.
        """
        value = road_class.value if isinstance(road_class, RoadClass) else road_class
        if value in _MAJOR_CATEGORY_VALUES:
            return cls.MAJOR
        return cls.LOCAL


_MAJOR_CATEGORY_VALUES = frozenset({
    RoadClass.MAJOR.value,
    RoadClass.PRIMARY.value,
    RoadClass.SECONDARY.value,
    RoadClass.TERTIARY.value,
})


class RoadSegment(BaseModel):
    """A contiguous stretch of a named road sharing one source tag."""

    model_config = ConfigDict(frozen=True)

    polyline: tuple[tuple[float, float], ...] = Field(
        ..., description="Ordered (lon, lat) vertices"
    )
    road_class: RoadClass = Field(
        default=RoadClass.RESIDENTIAL, description="Functional class of this stretch"
    )
    length_m: float = Field(default=0.0, ge=0, description="Length in meters")
    highway: str = Field(default="", description="Source road type tag")

    @field_validator("polyline")
    @classmethod
    def validate_polyline(cls, v: tuple[tuple[float, float], ...]) -> tuple[tuple[float, float], ...]:
        """A segment needs at least two vertices."""
        if len(v) < 2:
            raise ValueError("Road segment must have at least 2 points")
        return v

    @property
    def is_major(self) -> bool:
        return self.road_class.category is ClassCategory.MAJOR


class RoadFeature(BaseModel):
    """All segments sharing one street name inside the loaded area."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Street name as it appears in source data")
    segments: tuple[RoadSegment, ...] = Field(..., description="Segments of this street")
    overall_class: RoadClass = Field(
        default=RoadClass.RESIDENTIAL, description="Highest class among the segments"
    )
    total_length_m: float = Field(default=0.0, ge=0, description="Sum of segment lengths")

    @field_validator("segments")
    @classmethod
    def validate_segments(cls, v: tuple[RoadSegment, ...]) -> tuple[RoadSegment, ...]:
        if not v:
            raise ValueError("Road feature must have at least 1 segment")
        return v

    @classmethod
    def from_segments(cls, name: str, segments: list[RoadSegment]) -> "RoadFeature":
        """Build a feature, deriving overall class and total length."""
        return cls(
            name=name,
            segments=tuple(segments),
            overall_class=RoadClass.highest(s.road_class for s in segments),
            total_length_m=sum(s.length_m for s in segments),
        )

    @property
    def lines(self) -> list[tuple[tuple[float, float], ...]]:
        """Segment polylines in order."""
        return [s.polyline for s in self.segments]

    @property
    def has_major_segment(self) -> bool:
        return any(s.is_major for s in self.segments)


class RawRoadRecord(BaseModel):
    """One source road record (e.g. an OSM way) before grouping by name.

    Geometry may be supplied as `lines` (list of coordinate lists), as a
    GeoJSON `geometry` (LineString or MultiLineString) or as bare
    `coordinates`. It is always stored as a list of lines.
    """

    name: str = Field(..., description="Street name")
    lines: list[list[tuple[float, float]]] = Field(
        default_factory=list, description="Polylines as lists of (lon, lat)"
    )
    highway: str = Field(default="", description="Source road type tag, e.g. 'primary'")

    @model_validator(mode="before")
    @classmethod
    def normalize_geometry(cls, data: Any) -> Any:
        """Accept single or multi line geometry and store it as multi."""
        if not isinstance(data, dict) or "lines" in data:
            return data

        data = dict(data)
        geometry = data.pop("geometry", None)
        coordinates = data.pop("coordinates", None)

        if geometry is not None:
            geom_type = geometry.get("type")
            coordinates = geometry.get("coordinates") or []
            if geom_type == "LineString":
                data["lines"] = [_trim_coords(coordinates)]
            elif geom_type == "MultiLineString":
                data["lines"] = [_trim_coords(line) for line in coordinates]
            else:
                raise ValueError(f"Unsupported road geometry type: {geom_type}")
        elif coordinates is not None:
            if coordinates and _is_coordinate(coordinates[0]):
                data["lines"] = [_trim_coords(coordinates)]
            else:
                data["lines"] = [_trim_coords(line) for line in coordinates]

        return data

    @classmethod
    def from_geojson_feature(cls, feature: dict[str, Any]) -> "RawRoadRecord":
        """Build a record from a GeoJSON Feature with name/highway properties."""
        properties = feature.get("properties") or {}
        return cls(
            name=properties.get("name", ""),
            highway=properties.get("highway") or properties.get("type") or "",
            geometry=feature.get("geometry") or {},
        )


def _is_coordinate(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) >= 2
        and not isinstance(value[0], (list, tuple))
    )


def _trim_coords(line: list) -> list[tuple[float, float]]:
    """Drop altitude or extra ordinates from each vertex."""
    return [(p[0], p[1]) for p in line if len(p) >= 2]
