"""Transport selection and process lifecycle for the MCP server."""

import asyncio
import os
import signal
from enum import Enum

from fetchmcp.config import Settings
from fetchmcp.exceptions import TransportError
from fetchmcp.logger import logger
from fetchmcp.state import TypedFastMCP, shutdown_resources

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Transport(str, Enum):
    """Supported MCP transports."""

    STDIO = "stdio"
    HTTP = "http"

    @classmethod
    def parse(cls, value: str) -> "Transport":
        """Parse a transport name (case-insensitive).

        Raises:
            TransportError: If the name is not a supported transport.

        """
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            msg = f"Unknown transport: {value!r}. Use 'stdio' or 'http'."
            raise TransportError(msg) from e


class ServerHandle:
    """Owns a running server: serves one transport and shuts it down once.

    Under stdio, SIGINT/SIGTERM call shutdown(), which cancels the serving
    task so the server lifespan tears down its resources. The stdin reader
    is a worker thread that cancellation cannot interrupt, so if the task is
    still running after MCP_SHUTDOWN_GRACE_SECONDS the resources are torn
    down here and the process exits with status 0. Under HTTP, uvicorn owns
    the signals and runs the same teardown when it stops.
    """

    def __init__(self, server: TypedFastMCP, transport: Transport, settings: Settings) -> None:
        """Initialize the handle.

        Args:
            server: Server with its tools registered.
            transport: Transport to serve.
            settings: Application settings (HTTP bind address, port, path).

        """
        self.server = server
        self.transport = transport
        self._settings = settings
        self._task: asyncio.Task[None] | None = None
        self._watchdog: asyncio.Task[None] | None = None
        self._shutdown_requested = False
        self._installed_signals: list[signal.Signals] = []

    @property
    def shutdown_requested(self) -> bool:
        """Whether shutdown() has been called."""
        return self._shutdown_requested

    async def serve(self) -> None:
        """Run the transport until it finishes or shutdown() is called."""
        self._task = asyncio.create_task(self._run_transport())
        if self.transport is Transport.STDIO:
            self._install_signal_handlers()

        try:
            await self._task
        except asyncio.CancelledError:
            if not self._shutdown_requested:
                raise
            logger.info("fetchmcp server stopped")
        finally:
            self._remove_signal_handlers()
            if self._watchdog is not None:
                self._watchdog.cancel()

    def shutdown(self) -> None:
        """Stop serving. Calls after the first one do nothing."""
        if self._shutdown_requested:
            return
        self._shutdown_requested = True
        logger.info("Shutting down fetchmcp server...")
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        if self.transport is Transport.STDIO:
            self._watchdog = asyncio.get_running_loop().create_task(self._exit_if_stuck())

    async def _exit_if_stuck(self) -> None:
        if self._task is None:
            return
        grace = self._settings.mcp_shutdown_grace_seconds
        await asyncio.wait({self._task}, timeout=grace)
        if self._task.done():
            return

        logger.warning("stdio transport still waiting on stdin after %.1fs, forcing exit", grace)
        await shutdown_resources(self.server)
        logger.info("fetchmcp server stopped")
        os._exit(0)

    async def _run_transport(self) -> None:
        if self.transport is Transport.STDIO:
            logger.info("Serving MCP over stdio")
            await self.server.run_async(transport="stdio", show_banner=False)
            return

        logger.info(
            "HTTP server listening on %s:%d%s",
            self._settings.host,
            self._settings.port,
            self._settings.mcp_http_path,
        )
        await self.server.run_async(
            transport="http",
            show_banner=False,
            host=self._settings.host,
            port=self._settings.port,
            path=self._settings.mcp_http_path,
            stateless_http=self._settings.mcp_stateless_http,
        )

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.shutdown)
            except (NotImplementedError, RuntimeError):
                # Platforms without loop signal support keep default handling
                logger.debug("Cannot install handler for %s", sig.name)
                continue
            self._installed_signals.append(sig)

    def _remove_signal_handlers(self) -> None:
        if not self._installed_signals:
            return
        loop = asyncio.get_running_loop()
        for sig in self._installed_signals:
            loop.remove_signal_handler(sig)
        self._installed_signals.clear()
