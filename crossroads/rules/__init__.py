"""Engine ruleset loading."""

from .loader import (
    get_ruleset_path,
    list_rulesets,
    load_ruleset,
)

__all__ = [
    "get_ruleset_path",
    "list_rulesets",
    "load_ruleset",
]
