"""Crossroads - street discovery and intersection game engine.

This package provides:
- Road catalog building from OpenStreetMap data with boundary filtering
- Street name normalization and guess matching
- Intersection generation by difficulty and distance scoring
- MCP tools for playing a session

Core functionality can be imported without MCP server dependencies:
    from crossroads.session import GameSession
    from crossroads.solver import generate_candidate

To get the MCP server instance:
    from crossroads import get_mcp
    mcp = get_mcp()
"""

__version__ = "0.1.0"


def get_mcp():
    """Get the MCP server instance (lazy import to avoid coupling).

    Returns:
        FastMCP: The configured MCP server instance.
    """
    from .server import mcp
    return mcp


def get_session_class():
    """Get the GameSession class for direct use."""
    from .session import GameSession
    return GameSession


__all__ = ["get_mcp", "get_session_class", "__version__"]
