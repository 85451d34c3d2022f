"""Location guess scoring."""

import logging
import math
from collections.abc import Sequence

from ..geometry.distance import great_circle_distance_m, is_finite_point
from ..models.intersections import CrossingPoint, GuessScore
from ..models.rules import MAX_GUESS_SCORE

logger = logging.getLogger(__name__)


def score_guess(
    lat: float,
    lon: float,
    locations: Sequence[CrossingPoint],
    max_score: int = MAX_GUESS_SCORE,
) -> GuessScore | None:
    """Score a click against the valid locations of the current target.

    The nearest location counts. One point is lost per meter, so a perfect
    hit earns `max_score` and anything `max_score` meters away earns 0.

    Args:
        lat: Guess latitude
        lon: Guess longitude
        locations: Valid crossing locations of the active candidate
        max_score: Points for a perfect guess

    Returns:
        GuessScore, or None if there are no locations to score against or
        the guess is not a finite coordinate
    """
    if not locations:
        return None
    if not is_finite_point((lon, lat)):
        logger.warning(f"Ignoring non-finite guess ({lat}, {lon})")
        return None

    nearest = locations[0]
    nearest_distance = math.inf
    for location in locations:
        distance = great_circle_distance_m(lat, lon, location.lat, location.lon)
        if distance < nearest_distance:
            nearest_distance = distance
            nearest = location

    score = max(0, math.floor(max_score - nearest_distance))
    return GuessScore(distance_m=nearest_distance, score=score, nearest=nearest)
