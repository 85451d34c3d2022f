"""Bundled engine rulesets.

Each ruleset is a YAML file under ``crossroads/rulesets``. The first line
may be a ``#`` comment, which is shown as the ruleset description.
"""

import logging
from pathlib import Path

from ..models.rules import EngineRules

logger = logging.getLogger(__name__)

RULESETS_DIR = Path(__file__).parent.parent / "rulesets"


def get_ruleset_path(name: str = "default") -> Path:
    """Resolve a ruleset name to its bundled YAML file.

    Raises:
        FileNotFoundError: No ruleset of that name is bundled
    """
    path = RULESETS_DIR / f"{name}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"No ruleset named '{name}' in {RULESETS_DIR}")
    return path


def _describe(path: Path) -> str:
    try:
        header = path.read_text().splitlines()[:1]
    except OSError as e:
        logger.debug(f"Skipping description of {path.name}: {e}")
        header = []
    if header and header[0].startswith("#"):
        return header[0].lstrip("#").strip()
    return path.stem


def list_rulesets() -> list[dict[str, str]]:
    """Names and descriptions of the bundled rulesets, sorted by name."""
    if not RULESETS_DIR.is_dir():
        logger.warning(f"No rulesets directory at {RULESETS_DIR}")
        return []

    return [
        {"name": path.stem, "description": _describe(path)}
        for path in sorted(RULESETS_DIR.glob("*.yaml"))
    ]


def load_ruleset(name: str = "default", override: dict | None = None) -> EngineRules:
    """Read a bundled ruleset and apply an optional merge-patch override.

    Args:
        name: Ruleset name, without the .yaml extension
        override: Nested dict merged over the file's values

    Returns:
        Validated EngineRules
    """
    rules = EngineRules.from_yaml(get_ruleset_path(name).read_text())

    if override:
        rules = rules.merge_override(override)
        logger.debug(f"Ruleset '{name}' loaded with overrides for {sorted(override)}")

    return rules
