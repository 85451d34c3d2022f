"""MCP tool schemas for crossroads."""

from .game_tools import (
    AreaSummary,
    FallbackPlace,
    LoadAreaRequest,
    candidate_summary,
)

__all__ = [
    "LoadAreaRequest",
    "FallbackPlace",
    "AreaSummary",
    "candidate_summary",
]
