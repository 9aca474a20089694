"""fetchmcp - readable web fetching over MCP.

A Model Context Protocol server with a single `fetch` tool that retrieves
a URL and returns its main content as Markdown.
"""

from fetchmcp.config import Settings, settings

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "__version__",
    "settings",
]
