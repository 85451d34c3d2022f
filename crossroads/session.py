"""Game session: owns the road catalog, classification index and found sets.

A session is created per loaded area. Loading a new area builds a complete
new catalog and index before replacing the old ones, so a failed load
leaves the previous area playable.
"""

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .models.boundary import Boundary
from .models.intersections import DifficultyPolicy, GuessScore, IntersectionCandidate
from .models.progress import FoundSets, ProgressStats
from .models.roads import RawRoadRecord, RoadFeature
from .models.rules import EngineRules
from .solver.candidates import generate_candidate
from .solver.scoring import score_guess
from .streets.catalog import RoadCatalog, build_catalog
from .streets.classification import StreetClassificationIndex
from .streets.matcher import find_matching_streets, split_guess_input
from .streets.naming import ordinal_name

logger = logging.getLogger(__name__)


@dataclass
class StreetGuessResult:
    """Outcome of one typed street entry."""

    entry: str
    matches: list[RoadFeature] = field(default_factory=list)
    newly_found: list[str] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return bool(self.matches)

    @property
    def message(self) -> str:
        if not self.matches:
            return "Street not found. Try a different name or spelling."
        if not self.newly_found:
            return f'You already found all streets for "{self.entry}"!'
        return f'Found {len(self.matches)} street(s) for "{self.entry}"!'


@dataclass
class LocationGuessResult:
    """Outcome of a location guess for the active intersection."""

    candidate: IntersectionCandidate
    score: GuessScore


class GameSession:
    """Explicit owner of all mutable game state for one player."""

    def __init__(
        self,
        rules: EngineRules | None = None,
        seed: int | None = None,
        difficulty: DifficultyPolicy | str | None = None,
    ):
        """Initialize an empty session.

        Args:
            rules: Engine rules (defaults to built-in defaults)
            seed: Optional seed for reproducible rounds
            difficulty: Initial difficulty (defaults to the rules' default)
        """
        self.rules = rules or EngineRules()
        self.rng = random.Random(seed)
        self._difficulty = DifficultyPolicy(difficulty or self.rules.default_difficulty)

        self.catalog = RoadCatalog([])
        self.index = StreetClassificationIndex(self.catalog)
        self.found = FoundSets()
        self.current: IntersectionCandidate | None = None

        self.intersection_score = 0
        self.guess_distances: list[float] = []

    @property
    def difficulty(self) -> DifficultyPolicy:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, value: DifficultyPolicy | str) -> None:
        # Takes effect from the next round; the current target is kept
        self._difficulty = DifficultyPolicy(value)

    @property
    def is_loaded(self) -> bool:
        return not self.catalog.is_empty

    @property
    def boundary(self) -> Boundary | None:
        return self.catalog.boundary

    # ------------------------------------------------------------------
    # Area lifecycle
    # ------------------------------------------------------------------

    def load_area(
        self,
        records: Iterable[RawRoadRecord],
        boundary: Boundary | dict[str, Any] | None = None,
    ) -> RoadCatalog:
        """Replace the loaded area and clear all progress.

        Args:
            records: Raw road records
            boundary: Playable area (GeoJSON Polygon/MultiPolygon or Boundary)

        Returns:
            The new catalog
        """
        catalog = build_catalog(records, boundary, self.rules)
        index = StreetClassificationIndex(catalog)

        self.catalog = catalog
        self.index = index
        self.reset()

        logger.info(
            f"Loaded area with {len(catalog)} streets, "
            f"{catalog.total_length_m / 1000:.1f} km total"
        )
        return catalog

    def reset(self) -> None:
        """Clear found streets, found intersections and scores."""
        self.found.clear()
        self.current = None
        self.intersection_score = 0
        self.guess_distances = []

    # ------------------------------------------------------------------
    # Intersection mode
    # ------------------------------------------------------------------

    def next_intersection(self) -> IntersectionCandidate | None:
        """Start a new round. None means no intersection is available."""
        self.current = generate_candidate(
            self.catalog,
            self.index,
            self._difficulty,
            found=self.found,
            rng=self.rng,
            rules=self.rules,
        )
        return self.current

    def submit_location_guess(self, lat: float, lon: float) -> LocationGuessResult | None:
        """Score a guess for the active intersection and finish the round.

        Returns None when there is no active intersection or the guess is not
        a finite coordinate. The round stays open in that case.
        """
        candidate = self.current
        if candidate is None:
            return None

        result = score_guess(lat, lon, candidate.locations, self.rules.scoring.max_score)
        if result is None:
            return None

        self.found.add_intersection(candidate.street_a, candidate.street_b)
        self.intersection_score += result.score
        self.guess_distances.append(result.distance_m)
        self.current = None

        logger.info(
            f"Guess for {candidate.label}: {result.distance_m:.0f}m, {result.score} points"
        )
        return LocationGuessResult(candidate=candidate, score=result)

    # ------------------------------------------------------------------
    # Street mode
    # ------------------------------------------------------------------

    def submit_street_guess(self, text: str) -> list[StreetGuessResult]:
        """Check comma separated street names typed by the player."""
        results = []
        for entry in split_guess_input(text):
            matches = find_matching_streets(self.catalog, entry)
            newly_found = [f.name for f in matches if self.found.add_name(f.name)]
            results.append(StreetGuessResult(entry=entry, matches=matches, newly_found=newly_found))
        return results

    def remove_street(self, name: str) -> bool:
        """Forget a found street. Returns False if it was not found."""
        return self.found.remove_name(name)

    def autofill_numbered_streets(self, start: int, end: int) -> list[str]:
        """Mark every numbered street from `start` to `end` as found.

        Returns:
            Names newly marked as found

        Raises:
            ValueError: If the range is empty
        """
        if start > end:
            raise ValueError(f"Invalid number range for autofill: {start}-{end}")

        added = []
        for n in range(start, end + 1):
            for feature in find_matching_streets(self.catalog, ordinal_name(n)):
                if self.found.add_name(feature.name):
                    added.append(feature.name)

        logger.info(f"Autofill {start}-{end}: {len(added)} new numbered streets")
        return added

    def found_street_names(self) -> list[str]:
        """Display names of found streets in catalog order."""
        return [f.name for f in self.catalog if self.found.has_name(f.name)]

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def progress(self) -> ProgressStats:
        found_features = [f for f in self.catalog if self.found.has_name(f.name)]
        average = (
            sum(self.guess_distances) / len(self.guess_distances)
            if self.guess_distances else 0.0
        )
        return ProgressStats(
            found_count=len(found_features),
            total_count=len(self.catalog),
            found_length_m=sum(f.total_length_m for f in found_features),
            total_length_m=self.catalog.total_length_m,
            intersections_found=len(self.found.intersections),
            intersection_score=self.intersection_score,
            average_accuracy_m=average,
        )
