"""Intersection candidate, difficulty and guess result models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .roads import ClassCategory, RoadClass


class DifficultyPolicy(str, Enum):
    """Which class combinations are acceptable at a crossing."""

    MAJOR_MAJOR = "major-major"
    MAJOR_ANY = "major-all"
    ANY_ANY = "all-all"

    @property
    def requires_major_primary(self) -> bool:
        """Whether the primary street pool is limited to streets with major segments."""
        return self is not DifficultyPolicy.ANY_ANY

    def accepts(self, category_a: ClassCategory, category_b: ClassCategory) -> bool:
        """Check a pair of categories found at one crossing location."""
        if self is DifficultyPolicy.MAJOR_MAJOR:
            return category_a is ClassCategory.MAJOR and category_b is ClassCategory.MAJOR
        if self is DifficultyPolicy.MAJOR_ANY:
            return category_a is ClassCategory.MAJOR or category_b is ClassCategory.MAJOR
        return True


def intersection_key(street_a: str, street_b: str) -> str:
    """Key used to record a found street pair."""
    return f"{street_a}|{street_b}"


class CrossingPoint(BaseModel):
    """One physical location where two streets meet within tolerance."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., description="Latitude of the crossing")
    lon: float = Field(..., description="Longitude of the crossing")
    approach_distance_m: float = Field(
        default=0.0, ge=0, description="Distance between the two streets at this location"
    )


class IntersectionCandidate(BaseModel):
    """A pair of streets offered as the target of one round."""

    street_a: str = Field(..., description="Primary street name")
    street_b: str = Field(..., description="Crossing street name")
    locations: list[CrossingPoint] = Field(
        ..., description="All valid answer locations for this pair"
    )
    class_a: RoadClass = Field(
        default=RoadClass.RESIDENTIAL, description="Class of street A at the canonical location"
    )
    class_b: RoadClass = Field(
        default=RoadClass.RESIDENTIAL, description="Class of street B at the canonical location"
    )

    @field_validator("locations")
    @classmethod
    def validate_locations(cls, v: list[CrossingPoint]) -> list[CrossingPoint]:
        if not v:
            raise ValueError("Intersection candidate must have at least one location")
        return v

    @property
    def canonical(self) -> CrossingPoint:
        """Display location: the crossing with the smallest approach distance."""
        return min(self.locations, key=lambda loc: loc.approach_distance_m)

    @property
    def key(self) -> str:
        return intersection_key(self.street_a, self.street_b)

    @computed_field
    @property
    def location_count(self) -> int:
        return len(self.locations)

    @computed_field
    @property
    def multiple_locations(self) -> bool:
        return len(self.locations) > 1

    @property
    def label(self) -> str:
        """Human readable target, e.g. 'Main St & 1st Ave (2 locations)'."""
        text = f"{self.street_a} & {self.street_b}"
        if self.multiple_locations:
            text += f" ({self.location_count} locations)"
        return text


class GuessScore(BaseModel):
    """Result of scoring a location guess."""

    distance_m: float = Field(..., ge=0, description="Distance to the nearest valid location")
    score: int = Field(..., ge=0, description="Points awarded for this guess")
    nearest: CrossingPoint = Field(..., description="Valid location closest to the guess")
