"""Found-street / found-intersection tracking and progress metrics."""

from dataclasses import dataclass, field

from pydantic import BaseModel, Field, computed_field

from .intersections import intersection_key


@dataclass
class FoundSets:
    """Names and intersections the player has found in the current area.

    Street names are stored lower-cased. Intersection keys are stored as
    "A|B" in the order they were recorded and looked up in either order.
    """

    names: set[str] = field(default_factory=set)
    intersections: set[str] = field(default_factory=set)

    def has_name(self, name: str) -> bool:
        return name.lower() in self.names

    def add_name(self, name: str) -> bool:
        """Record a street name. Returns False if it was already found."""
        key = name.lower()
        if key in self.names:
            return False
        self.names.add(key)
        return True

    def remove_name(self, name: str) -> bool:
        key = name.lower()
        if key not in self.names:
            return False
        self.names.discard(key)
        return True

    def has_intersection(self, street_a: str, street_b: str) -> bool:
        return (
            intersection_key(street_a, street_b) in self.intersections
            or intersection_key(street_b, street_a) in self.intersections
        )

    def add_intersection(self, street_a: str, street_b: str) -> None:
        self.intersections.add(intersection_key(street_a, street_b))

    def clear(self) -> None:
        self.names.clear()
        self.intersections.clear()


class ProgressStats(BaseModel):
    """Progress metrics for the presentation layer."""

    found_count: int = Field(default=0, ge=0, description="Streets found")
    total_count: int = Field(default=0, ge=0, description="Streets in the loaded area")
    found_length_m: float = Field(default=0.0, ge=0, description="Length of found streets")
    total_length_m: float = Field(default=0.0, ge=0, description="Length of all streets")
    intersections_found: int = Field(default=0, ge=0, description="Intersections guessed")
    intersection_score: int = Field(default=0, ge=0, description="Accumulated guess score")
    average_accuracy_m: float = Field(
        default=0.0, ge=0, description="Mean distance of location guesses"
    )

    @computed_field
    @property
    def count_percentage(self) -> float:
        if self.total_count == 0:
            return 0.0
        return round(self.found_count / self.total_count * 100, 2)

    @computed_field
    @property
    def distance_percentage(self) -> float:
        if self.total_length_m <= 0:
            return 0.0
        return round(self.found_length_m / self.total_length_m * 100, 2)
