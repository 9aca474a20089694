"""Server state: the long-lived collaborators shared by tool calls."""

from typing import Any

from fastmcp import FastMCP

from fetchmcp.config import Settings
from fetchmcp.handler import FetchHandler
from fetchmcp.logger import logger
from fetchmcp.page_fetcher import PageFetcher
from fetchmcp.parser.parser import Parser


class TypedFastMCP(FastMCP):
    """Typed FastMCP subclass with server state attribute.

    This allows proper type checking for the state attribute
    instead of using type: ignore comments.
    """

    state: "ServerState | None"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize TypedFastMCP with state set to None."""
        super().__init__(*args, **kwargs)
        self.state = None


class ServerState:
    """Encapsulates the server dependencies and their lifecycle.

    Created when the server starts and stopped once when it shuts down.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the server state.

        Args:
            settings: Application settings.

        """
        self.settings = settings
        self.page_fetcher = PageFetcher(
            timeout=settings.fetch_timeout,
            user_agent=settings.fetch_user_agent,
            follow_redirects=settings.fetch_follow_redirects,
        )
        self.parser = Parser(settings)
        self.handler = FetchHandler(self.page_fetcher, self.parser)
        self._stopped = False

    async def start(self) -> None:
        """Startup logic for server resources."""
        logger.info("Starting fetchmcp server resources...")

    async def stop(self) -> None:
        """Release server resources. Safe to call more than once."""
        if self._stopped:
            return
        self._stopped = True
        logger.info("Stopping fetchmcp server resources...")
        await self.page_fetcher.close()


def get_state(server: TypedFastMCP) -> ServerState:
    """Get the server state, failing if the lifespan has not started it."""
    if server.state is None:
        raise RuntimeError("Server state not initialized")
    return server.state


async def shutdown_resources(server: TypedFastMCP) -> None:
    """Shut down middleware and stop the server state.

    Runs once per started lifespan: later calls find no state and return.
    """
    state = server.state
    if state is None:
        return
    server.state = None

    for middleware in server.middleware:
        if hasattr(middleware, "shutdown"):
            await middleware.shutdown()

    await state.stop()
