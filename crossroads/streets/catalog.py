"""Road catalog construction.

Groups raw road records by street name inside the playable boundary and
turns them into classified, immutable RoadFeatures.
"""

import logging
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from ..geometry.distance import LonLat, is_finite_point, polyline_length_m
from ..geometry.polygon_ops import point_in_polygon
from ..models.boundary import Boundary
from ..models.roads import RawRoadRecord, RoadFeature, RoadSegment
from ..models.rules import EngineRules
from .naming import normalize_street_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogStats:
    """Counters collected while building a catalog."""

    total_lines: int = 0
    kept_lines: int = 0
    boundary_rejected: int = 0
    invalid_rejected: int = 0
    boundary_applied: bool = False


class RoadCatalog:
    """Immutable name -> RoadFeature mapping for one loaded area."""

    def __init__(
        self,
        features: Iterable[RoadFeature],
        boundary: Boundary | None = None,
        stats: CatalogStats | None = None,
    ):
        self._features: dict[str, RoadFeature] = {f.name: f for f in features}
        self._normalized: dict[str, str] = {
            name: normalize_street_name(name) for name in self._features
        }
        self.boundary = boundary
        self.stats = stats or CatalogStats()

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self) -> Iterator[RoadFeature]:
        return iter(self._features.values())

    def __contains__(self, name: object) -> bool:
        return name in self._features

    def get(self, name: str) -> RoadFeature | None:
        return self._features.get(name)

    @property
    def features(self) -> list[RoadFeature]:
        return list(self._features.values())

    @property
    def names(self) -> list[str]:
        return list(self._features)

    @property
    def is_empty(self) -> bool:
        return not self._features

    def normalized_name(self, name: str) -> str:
        """Cached normalization key for a catalog name."""
        key = self._normalized.get(name)
        if key is None:
            key = normalize_street_name(name)
        return key

    @property
    def total_length_m(self) -> float:
        return sum(f.total_length_m for f in self._features.values())

    def class_distribution(self) -> dict[str, int]:
        """Number of features per overall class."""
        distribution: dict[str, int] = {}
        for feature in self._features.values():
            key = feature.overall_class.value
            distribution[key] = distribution.get(key, 0) + 1
        return distribution


def sample_points(coords: list[LonLat], divisions: int) -> list[LonLat]:
    """Representative points of a polyline for boundary checks.

    Every `len // divisions`-th vertex starting at the first, plus the last.
    """
    step = max(1, len(coords) // divisions)
    points = coords[::step]
    points.append(coords[-1])
    return points


def _coerce_boundary(boundary: Boundary | dict[str, Any] | None) -> Boundary | None:
    if boundary is None or isinstance(boundary, Boundary):
        return boundary
    return Boundary.from_geojson(boundary)


def build_catalog(
    records: Iterable[RawRoadRecord],
    boundary: Boundary | dict[str, Any] | None = None,
    rules: EngineRules | None = None,
) -> RoadCatalog:
    """Build a road catalog from raw road records.

    Each polyline of each record becomes one segment. A polyline is dropped
    if it has fewer than 2 finite points, a non-positive length, or no
    sample point inside the boundary. A boundary that cannot be used for
    containment disables filtering instead of rejecting every road.

    Args:
        records: Raw road records (e.g. parsed OSM ways)
        boundary: Boundary model or GeoJSON Polygon/MultiPolygon
        rules: Engine rules (classification table, sampling)

    Returns:
        RoadCatalog with one feature per street name, in first-seen order
    """
    rules = rules or EngineRules()
    boundary = _coerce_boundary(boundary)

    apply_boundary = boundary is not None and boundary.is_usable
    if boundary is not None and not apply_boundary:
        logger.warning("Boundary polygon is malformed, treating all roads as inside")

    divisions = rules.catalog.boundary_sample_divisions
    groups: dict[str, list[RoadSegment]] = {}

    total_lines = 0
    kept_lines = 0
    boundary_rejected = 0
    invalid_rejected = 0

    for record in records:
        if not record.name:
            continue

        road_class = rules.catalog.classify_highway(record.highway)

        for line in record.lines:
            total_lines += 1
            coords = [(float(p[0]), float(p[1])) for p in line if is_finite_point(p)]
            if len(coords) < 2:
                invalid_rejected += 1
                continue

            if apply_boundary and not any(
                point_in_polygon(p, boundary.ring) for p in sample_points(coords, divisions)
            ):
                boundary_rejected += 1
                continue

            length = polyline_length_m(coords)
            if not math.isfinite(length) or length <= 0:
                invalid_rejected += 1
                continue

            groups.setdefault(record.name, []).append(RoadSegment(
                polyline=tuple(coords),
                road_class=road_class,
                length_m=length,
                highway=record.highway,
            ))
            kept_lines += 1

    features = [RoadFeature.from_segments(name, segments) for name, segments in groups.items()]

    stats = CatalogStats(
        total_lines=total_lines,
        kept_lines=kept_lines,
        boundary_rejected=boundary_rejected,
        invalid_rejected=invalid_rejected,
        boundary_applied=apply_boundary,
    )
    catalog = RoadCatalog(features, boundary=boundary, stats=stats)

    logger.info(
        f"Built catalog with {len(catalog)} streets from {kept_lines}/{total_lines} lines "
        f"({boundary_rejected} outside boundary, {invalid_rejected} invalid)"
    )
    logger.debug(f"Street class distribution: {catalog.class_distribution()}")

    return catalog
