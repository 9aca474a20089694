"""Tool registration for the fetchmcp server."""

from fetchmcp.state import TypedFastMCP
from fetchmcp.tools.fetch import register_fetch

__all__ = ["register_all", "register_fetch"]


def register_all(server: TypedFastMCP) -> None:
    """Register every tool on the server."""
    register_fetch(server)
