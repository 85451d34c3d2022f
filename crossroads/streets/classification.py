"""Location-specific street classification.

A street can change class along its length (a residential stretch that
becomes a primary road). The index answers "what class is this street at
this point" by finding the street's nearest segment.
"""

import math

from ..geometry.distance import distance_to_polyline_m
from ..models.roads import ClassCategory, RoadClass, RoadSegment
from .catalog import RoadCatalog


class StreetClassificationIndex:
    """Street name -> ordered classified segments, built once per catalog."""

    def __init__(self, catalog: RoadCatalog):
        self._segments: dict[str, tuple[RoadSegment, ...]] = {
            feature.name: feature.segments for feature in catalog
        }

    def __contains__(self, name: object) -> bool:
        return name in self._segments

    def segments(self, name: str) -> tuple[RoadSegment, ...]:
        return self._segments.get(name, ())

    def nearest_segment(self, name: str, lat: float, lon: float) -> RoadSegment | None:
        """Segment of `name` closest to (lat, lon), or None if unknown."""
        closest = None
        closest_distance = math.inf
        for segment in self._segments.get(name, ()):
            distance = distance_to_polyline_m(lat, lon, segment.polyline)
            if distance < closest_distance:
                closest_distance = distance
                closest = segment
        return closest

    def classify_at(self, name: str, lat: float, lon: float) -> RoadClass:
        """Class of `name` at a location.

        Unknown streets default to residential rather than failing.
        """
        segment = self.nearest_segment(name, lat, lon)
        if segment is None:
            return RoadClass.RESIDENTIAL
        return segment.road_class

    def category_at(self, name: str, lat: float, lon: float) -> ClassCategory:
        return self.classify_at(name, lat, lon).category

    def has_major_segment(self, name: str) -> bool:
        return any(s.is_major for s in self._segments.get(name, ()))
