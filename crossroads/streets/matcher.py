"""Resolve free-text player input to road features."""

import logging

from ..models.roads import RoadFeature
from .catalog import RoadCatalog
from .naming import normalize_street_name

logger = logging.getLogger(__name__)


def find_matching_streets(catalog: RoadCatalog, text: str | None) -> list[RoadFeature]:
    """All streets the player's input refers to.

    Case-insensitive exact name matches win. Otherwise every street whose
    normalized name equals the normalized input matches, so "5th" finds
    both "5th Avenue" and "5th Avenue South".

    Args:
        catalog: Loaded road catalog
        text: Player input

    Returns:
        Matching features (empty list when nothing matches)
    """
    if not text:
        return []

    text = text.strip()
    if not text:
        return []

    text_lower = text.lower()
    exact = [f for f in catalog if f.name.lower() == text_lower]
    if exact:
        return exact

    key = normalize_street_name(text)
    matches = [f for f in catalog if catalog.normalized_name(f.name) == key]

    logger.debug(f"'{text}' -> '{key}': {len(matches)} normalized match(es)")
    return matches


def split_guess_input(text: str | None) -> list[str]:
    """Split comma separated input into trimmed, non-empty entries."""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]
