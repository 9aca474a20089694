"""MCP server exposing the fetch tool over stdio or streamable HTTP."""

import asyncio
import signal
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fetchmcp import __version__
from fetchmcp.config import settings
from fetchmcp.exceptions import TransportError
from fetchmcp.logger import logger, setup_logging
from fetchmcp.middleware.redis_middleware import RedisLoggingMiddleware
from fetchmcp.state import ServerState, TypedFastMCP, shutdown_resources
from fetchmcp.tools import register_all
from fetchmcp.transports import ServerHandle, Transport

SERVER_NAME = "fetchmcp"


@asynccontextmanager
async def lifespan(app: TypedFastMCP) -> AsyncIterator[dict[str, Any]]:
    """Manage application lifespan: create server state and clean it up."""
    state = ServerState(settings)
    await state.start()

    # Attach state to the typed mcp object
    app.state = state

    # Initialize middleware if present
    for middleware in app.middleware:
        if hasattr(middleware, "startup"):
            await middleware.startup()

    try:
        yield {"state": state}
    finally:
        await shutdown_resources(app)


def create_server() -> TypedFastMCP:
    """Build a server instance with every tool registered.

    Returns:
        A new server; nothing is shared between instances.

    """
    server = TypedFastMCP(SERVER_NAME, version=__version__, lifespan=lifespan)
    if settings.redis_url:
        server.add_middleware(RedisLoggingMiddleware(redis_url=settings.redis_url))
    register_all(server)
    return server


def main() -> None:
    """Run the MCP server on the transport selected by MCP_TRANSPORT."""
    setup_logging()

    try:
        transport = Transport.parse(settings.mcp_transport)
    except TransportError as e:
        logger.error("Startup failed: %s", e)
        sys.exit(1)

    # uvicorn re-raises the signal it caught once it has shut down; with
    # this handler SIGTERM ends the process like SIGINT instead of killing it
    signal.signal(signal.SIGTERM, signal.default_int_handler)

    handle = ServerHandle(create_server(), transport, settings)
    try:
        asyncio.run(handle.serve())
    except KeyboardInterrupt:
        logger.info("Interrupted, fetchmcp server stopped")
    except SystemExit as e:
        if not e.code:
            raise
        logger.error("fetchmcp server exited with status %s", e.code)
        sys.exit(1)
    except Exception:
        logger.exception("fetchmcp server terminated by a fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
