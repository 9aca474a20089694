"""Pytest configuration for integration tests.

These tests require a running server on the HTTP transport and network
access.
Run: MCP_TRANSPORT=http fetchmcp (in one terminal)
Then: pytest -m integration tests/integration (in another terminal)
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastmcp import Client

from fetchmcp.config import settings


@pytest.fixture
async def mcp_client() -> AsyncGenerator[Client[Any]]:
    """Provide an MCP client connected to the server."""
    async with Client(f"http://{settings.host}:{settings.port}{settings.mcp_http_path}") as client:
        yield client
