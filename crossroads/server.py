"""FastMCP server for the street discovery game.

Exposes MCP tools for loading a play area, naming streets, and locating
intersections. State lives in a single in-memory game session.
"""

import logging
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP

from .export.geojson import candidate_to_geojson, catalog_to_geojson, guess_to_geojson
from .loaders.boundary_loader import load_boundary_from_file, resolve_boundary
from .loaders.overpass_loader import load_roads_from_file, parse_roads_payload
from .models.intersections import DifficultyPolicy
from .rules.loader import load_ruleset
from .session import GameSession
from .tools.game_tools import AreaSummary, LoadAreaRequest, candidate_summary

# Configure logging to stderr (required for MCP stdio transport)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

mcp = FastMCP(
    name="crossroads_mcp",
    instructions="Street discovery game over OpenStreetMap data. "
    "Use crossroads_load_area to load roads, crossroads_guess_street to name streets, "
    "and crossroads_next_intersection / crossroads_submit_guess to play intersection rounds.",
)

_session = GameSession()


def get_session() -> GameSession:
    return _session


def _load_session(request: LoadAreaRequest) -> GameSession:
    """Build a fully loaded session; the active one is untouched on failure."""
    rules = load_ruleset(request.ruleset, request.rules_override)
    records = parse_roads_payload(request.roads)

    fallback = request.fallback
    boundary = resolve_boundary(
        request.boundary,
        lat=fallback.lat if fallback else None,
        lon=fallback.lon if fallback else None,
        place_type=fallback.place_type if fallback else None,
    )

    session = GameSession(rules=rules, seed=request.seed, difficulty=request.difficulty)
    session.load_area(records, boundary)
    return session


def _not_loaded_error() -> dict[str, Any]:
    return {
        "isError": True,
        "error": "No area loaded",
        "suggestion": "Call crossroads_load_area first",
    }


@mcp.tool(
    annotations={
        "readOnlyHint": False,  # Replaces the active session
        "destructiveHint": True,  # Clears all progress
        "idempotentHint": True,  # Same payload and seed give the same game
        "openWorldHint": False,
    }
)
async def crossroads_load_area(
    roads: dict[str, Any],
    boundary: dict[str, Any] | None = None,
    fallback_lat: float | None = None,
    fallback_lon: float | None = None,
    place_type: str | None = None,
    ruleset: str = "default",
    rules_override: dict[str, Any] | None = None,
    difficulty: str | None = None,
    seed: int | None = None,
) -> dict[str, Any]:
    """Load a play area from road data and an optional boundary.

    Args:
        roads: Overpass 'out geom' response or GeoJSON FeatureCollection of named lines
        boundary: GeoJSON Polygon/MultiPolygon of the area
        fallback_lat: Place latitude for a fallback rectangle when boundary is invalid
        fallback_lon: Place longitude for a fallback rectangle
        place_type: Place type used to size the fallback rectangle
        ruleset: Ruleset name (see ruleset_list)
        rules_override: Optional rule overrides
        difficulty: major-major, major-all or all-all
        seed: Random seed for reproducible rounds

    Returns:
        Dict with street counts, lengths and class distribution
    """
    global _session

    try:
        fallback = None
        if fallback_lat is not None and fallback_lon is not None:
            fallback = {"lat": fallback_lat, "lon": fallback_lon, "place_type": place_type}

        request = LoadAreaRequest(
            roads=roads,
            boundary=boundary,
            fallback=fallback,
            ruleset=ruleset,
            rules_override=rules_override,
            difficulty=difficulty,
            seed=seed,
        )
        _session = _load_session(request)
        return AreaSummary.from_session(_session).model_dump(mode="json")

    except FileNotFoundError:
        return {
            "isError": True,
            "error": f"Ruleset '{ruleset}' not found",
            "suggestion": "Use ruleset_list to see available rulesets",
        }
    except Exception as e:
        logger.exception("Area load failed")
        return {
            "isError": True,
            "error": str(e),
            "suggestion": "Check roads is an Overpass response or GeoJSON FeatureCollection",
        }


@mcp.tool(
    annotations={
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def crossroads_load_area_from_files(
    roads_path: str,
    boundary_path: str | None = None,
    ruleset: str = "default",
    difficulty: str | None = None,
    seed: int | None = None,
) -> dict[str, Any]:
    """Load a play area from JSON files on disk.

    Args:
        roads_path: Overpass JSON or GeoJSON road file
        boundary_path: GeoJSON file holding the area polygon
        ruleset: Ruleset name
        difficulty: major-major, major-all or all-all
        seed: Random seed

    Returns:
        Same summary as crossroads_load_area
    """
    global _session

    try:
        records = load_roads_from_file(roads_path)
        boundary = load_boundary_from_file(boundary_path) if boundary_path else None

        session = GameSession(rules=load_ruleset(ruleset), seed=seed, difficulty=difficulty)
        session.load_area(records, boundary)
        _session = session
        return AreaSummary.from_session(session).model_dump(mode="json")

    except FileNotFoundError as e:
        return {
            "isError": True,
            "error": f"File not found: {e}",
            "suggestion": "Check the file paths and ruleset name",
        }
    except Exception as e:
        logger.exception(f"Failed to load area from {roads_path}")
        return {
            "isError": True,
            "error": str(e),
            "suggestion": "Check the files are valid JSON",
        }


@mcp.tool(
    annotations={
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def crossroads_set_difficulty(difficulty: str) -> dict[str, Any]:
    """Change which road classes may form intersections (next round onwards).

    Args:
        difficulty: major-major, major-all or all-all
    """
    try:
        _session.difficulty = difficulty
    except ValueError:
        return {
            "isError": True,
            "error": f"Unknown difficulty '{difficulty}'",
            "suggestion": f"Use one of: {', '.join(p.value for p in DifficultyPolicy)}",
        }
    return {"difficulty": _session.difficulty.value}


@mcp.tool(
    annotations={
        "readOnlyHint": False,  # Sets the active round
        "destructiveHint": False,
        "idempotentHint": False,  # Random target each call
        "openWorldHint": False,
    }
)
async def crossroads_next_intersection() -> dict[str, Any]:
    """Pick a random intersection for the player to locate.

    Returns:
        Dict with the two street names and the number of valid locations,
        or available=False when none can be generated
    """
    if not _session.is_loaded:
        return _not_loaded_error()

    candidate = _session.next_intersection()
    if candidate is None:
        return {
            "available": False,
            "message": "No intersections found. Try changing the difficulty or loading a larger area.",
        }
    return {"available": True, **candidate_summary(candidate)}


@mcp.tool(
    annotations={
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False,
    }
)
async def crossroads_submit_guess(lat: float, lon: float) -> dict[str, Any]:
    """Score a map click against the active intersection.

    Args:
        lat: Guess latitude
        lon: Guess longitude

    Returns:
        Dict with distance_m, score, the nearest valid location and map features
    """
    if _session.current is None:
        return {
            "isError": True,
            "error": "No active intersection",
            "suggestion": "Call crossroads_next_intersection first",
        }

    result = _session.submit_location_guess(lat, lon)
    if result is None:
        return {
            "isError": True,
            "error": "Guess could not be scored",
            "suggestion": "Check lat/lon are finite numbers",
        }

    score = result.score
    return {
        "street_a": result.candidate.street_a,
        "street_b": result.candidate.street_b,
        "distance_m": round(score.distance_m, 1),
        "score": score.score,
        "nearest": {"lat": score.nearest.lat, "lon": score.nearest.lon},
        "total_score": _session.intersection_score,
        "locations": candidate_to_geojson(result.candidate),
        "guess": guess_to_geojson(lat, lon, score),
    }


@mcp.tool(
    annotations={
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,  # Re-entering a found street changes nothing
        "openWorldHint": False,
    }
)
async def crossroads_guess_street(text: str) -> dict[str, Any]:
    """Check one or more comma separated street names.

    Args:
        text: Player input, e.g. "Main St, 5th Ave"

    Returns:
        Dict with per-entry results and updated progress
    """
    if not _session.is_loaded:
        return _not_loaded_error()

    results = _session.submit_street_guess(text)
    return {
        "results": [
            {
                "entry": r.entry,
                "matched": r.matched,
                "matches": [f.name for f in r.matches],
                "newly_found": r.newly_found,
                "message": r.message,
            }
            for r in results
        ],
        "progress": _session.progress().model_dump(),
    }


@mcp.tool(
    annotations={
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def crossroads_autofill_numbered(start: int = 1, end: int = 20) -> dict[str, Any]:
    """Mark numbered streets (1st, 2nd, ...) in a range as found.

    Args:
        start: First number
        end: Last number (inclusive)
    """
    if not _session.is_loaded:
        return _not_loaded_error()

    try:
        added = _session.autofill_numbered_streets(start, end)
    except ValueError as e:
        return {
            "isError": True,
            "error": str(e),
            "suggestion": "Use start <= end",
        }
    return {"added": added, "count": len(added), "progress": _session.progress().model_dump()}


@mcp.tool(
    annotations={
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def crossroads_progress() -> dict[str, Any]:
    """Current found counts, percentages and intersection score."""
    return {
        "difficulty": _session.difficulty.value,
        "found_streets": _session.found_street_names(),
        "progress": _session.progress().model_dump(),
    }


@mcp.tool(
    annotations={
        "readOnlyHint": False,
        "destructiveHint": True,  # Clears progress
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def crossroads_reset() -> dict[str, Any]:
    """Clear found streets, found intersections and scores. The area stays loaded."""
    _session.reset()
    return {"reset": True, "progress": _session.progress().model_dump()}


@mcp.tool(
    annotations={
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def crossroads_export_geojson(include_boundary: bool = True) -> dict[str, Any]:
    """Export the loaded streets as GeoJSON, flagged by found status.

    Args:
        include_boundary: Include the area polygon as the first feature
    """
    if not _session.is_loaded:
        return _not_loaded_error()
    return catalog_to_geojson(_session.catalog, _session.found, include_boundary)


@mcp.tool(
    annotations={
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def ruleset_list() -> dict[str, Any]:
    """List available engine rulesets.

    Returns:
        Dict with rulesets array containing {name, description} objects
    """
    from .rules.loader import list_rulesets

    try:
        rulesets = list_rulesets()
        return {
            "rulesets": rulesets,
            "count": len(rulesets),
        }
    except Exception as e:
        logger.exception("Failed to list rulesets")
        return {
            "isError": True,
            "error": str(e),
            "rulesets": [],
        }


@mcp.tool(
    annotations={
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def ruleset_get(
    name: str = "default",
) -> dict[str, Any]:
    """Get a ruleset configuration and JSON schema.

    Args:
        name: Ruleset name (use ruleset_list to see available options)

    Returns:
        Dict with name, rules (configuration), and schema (JSON Schema)
    """
    try:
        rules = load_ruleset(name)
        return {
            "name": name,
            "rules": rules.model_dump(mode="json"),
            "schema": rules.model_json_schema(),
        }
    except FileNotFoundError:
        return {
            "isError": True,
            "error": f"Ruleset '{name}' not found",
            "suggestion": "Use ruleset_list to see available rulesets",
        }
    except Exception as e:
        logger.exception(f"Failed to load ruleset '{name}'")
        return {
            "isError": True,
            "error": str(e),
            "suggestion": "Check ruleset YAML syntax",
        }


def run_server():
    """Run the MCP server over stdio."""
    mcp.run()


def main():
    """Main entry point."""
    run_server()


if __name__ == "__main__":
    main()
