"""Street catalog, classification, naming and matching."""

from .catalog import CatalogStats, RoadCatalog, build_catalog, sample_points
from .classification import StreetClassificationIndex
from .matcher import find_matching_streets, split_guess_input
from .naming import normalize_street_name, ordinal_name, ordinal_suffix

__all__ = [
    # Catalog
    "RoadCatalog",
    "CatalogStats",
    "build_catalog",
    "sample_points",
    # Classification
    "StreetClassificationIndex",
    # Naming
    "normalize_street_name",
    "ordinal_name",
    "ordinal_suffix",
    # Matching
    "find_matching_streets",
    "split_guess_input",
]
