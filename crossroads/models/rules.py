"""Engine rules: thresholds, search limits and the road classification table."""

from typing import Dict

from pydantic import BaseModel, Field, model_validator

from .intersections import DifficultyPolicy
from .roads import RoadClass

# Behaviour-defining limits of the intersection search
MAX_PRIMARY_ATTEMPTS = 50
MAX_NEIGHBORS = 200
DISCOVERY_DISTANCE_M = 50.0
DEDUP_RADIUS_M = 20.0
ACCEPTANCE_DISTANCE_M = 5.0

MAX_GUESS_SCORE = 1000
BOUNDARY_SAMPLE_DIVISIONS = 5

DEFAULT_HIGHWAY_CLASSES: Dict[str, RoadClass] = {
    "motorway": RoadClass.MAJOR,
    "trunk": RoadClass.MAJOR,
    "primary": RoadClass.PRIMARY,
    "secondary": RoadClass.SECONDARY,
    "tertiary": RoadClass.TERTIARY,
}


class DiscoveryRules(BaseModel):
    """Distance thresholds used when looking for crossings."""

    discovery_distance_m: float = Field(
        default=DISCOVERY_DISTANCE_M,
        gt=0,
        description="Max approach distance for a crossing during discovery",
    )
    acceptance_distance_m: float = Field(
        default=ACCEPTANCE_DISTANCE_M,
        gt=0,
        description="Max approach distance for a crossing to be offered",
    )
    dedup_radius_m: float = Field(
        default=DEDUP_RADIUS_M,
        ge=0,
        description="Crossings closer than this to a kept one are duplicates",
    )

    @model_validator(mode="after")
    def check_acceptance_within_discovery(self) -> "DiscoveryRules":
        if self.acceptance_distance_m > self.discovery_distance_m:
            raise ValueError("acceptance_distance_m cannot exceed discovery_distance_m")
        return self


class SearchRules(BaseModel):
    """Bounds on the randomized candidate search."""

    max_primary_attempts: int = Field(
        default=MAX_PRIMARY_ATTEMPTS, ge=1, description="Primary streets tried per round"
    )
    max_neighbors: int = Field(
        default=MAX_NEIGHBORS, ge=1, description="Neighbor streets probed per primary street"
    )


class ScoringRules(BaseModel):
    """Location guess scoring."""

    max_score: int = Field(
        default=MAX_GUESS_SCORE, ge=1, description="Points for a perfect guess (1 point per meter lost)"
    )


class CatalogRules(BaseModel):
    """How raw road records become classified road features."""

    boundary_sample_divisions: int = Field(
        default=BOUNDARY_SAMPLE_DIVISIONS,
        ge=1,
        description="A road is sampled every len/N points when checking the boundary",
    )
    highway_classes: Dict[str, RoadClass] = Field(
        default_factory=lambda: dict(DEFAULT_HIGHWAY_CLASSES),
        description="Source road type tag to road class; unlisted tags are residential",
    )

    def classify_highway(self, highway: str | None) -> RoadClass:
        """Road class for a source road type tag."""
        if not highway:
            return RoadClass.RESIDENTIAL
        return self.highway_classes.get(highway, RoadClass.RESIDENTIAL)


class EngineRules(BaseModel):
    """Complete rule set for the street engine.

    Rules can be overridden at load time via JSON merge patch.
    """

    discovery: DiscoveryRules = Field(default_factory=DiscoveryRules)
    search: SearchRules = Field(default_factory=SearchRules)
    scoring: ScoringRules = Field(default_factory=ScoringRules)
    catalog: CatalogRules = Field(default_factory=CatalogRules)
    default_difficulty: DifficultyPolicy = Field(
        default=DifficultyPolicy.MAJOR_MAJOR, description="Difficulty of a new session"
    )

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "EngineRules":
        """Load rules from YAML string."""
        import yaml
        data = yaml.safe_load(yaml_content) or {}
        return cls(**data)

    def merge_override(self, override: Dict) -> "EngineRules":
        """Merge override dict into these rules (JSON merge patch semantics)."""
        import json
        base = json.loads(self.model_dump_json())
        _deep_merge(base, override)
        return EngineRules(**base)


def _deep_merge(base: Dict, override: Dict) -> None:
    """Deep merge override into base dict (modifies base in place)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
