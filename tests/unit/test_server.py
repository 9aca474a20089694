"""Unit tests for MCP server."""

import signal
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from fetchmcp.config import Settings
from fetchmcp.exceptions import TransportError
from fetchmcp.handler import FetchHandler
from fetchmcp.middleware.redis_middleware import RedisLoggingMiddleware
from fetchmcp.server import SERVER_NAME, create_server, lifespan, main
from fetchmcp.state import ServerState, TypedFastMCP, get_state, shutdown_resources
from fetchmcp.transports import Transport


class TestTypedFastMCP:
    """Test TypedFastMCP class."""

    def test_init_sets_state_to_none(self) -> None:
        """Test that TypedFastMCP initializes state to None."""
        mcp = TypedFastMCP("test-server")
        assert mcp.state is None
        assert mcp.name == "test-server"


class TestServerState:
    """Test ServerState class."""

    def test_init_wires_collaborators(self, app_settings: Settings) -> None:
        """Test that the handler shares the state's fetcher and parser."""
        state = ServerState(app_settings)

        assert state.settings is app_settings
        assert isinstance(state.handler, FetchHandler)
        assert state.handler._page_fetcher is state.page_fetcher
        assert state.handler._parser is state.parser

    async def test_stop_closes_page_fetcher_once(self, app_settings: Settings) -> None:
        """Test that stop releases the HTTP client and is idempotent."""
        state = ServerState(app_settings)
        with patch.object(state.page_fetcher, "close", new_callable=AsyncMock) as mock_close:
            await state.start()
            await state.stop()
            await state.stop()

            mock_close.assert_awaited_once()


class TestShutdownResources:
    """Test shutdown_resources."""

    async def test_stops_middleware_and_state_once(self) -> None:
        """Test that teardown runs once and detaches the state."""
        server = MagicMock()
        middleware = AsyncMock()
        state = AsyncMock()
        server.middleware = [middleware]
        server.state = state

        await shutdown_resources(server)
        await shutdown_resources(server)

        middleware.shutdown.assert_awaited_once()
        state.stop.assert_awaited_once()
        assert server.state is None

    async def test_without_state_does_nothing(self) -> None:
        """Test that a server whose lifespan never started is left alone."""
        server = MagicMock()
        middleware = AsyncMock()
        server.middleware = [middleware]
        server.state = None

        await shutdown_resources(server)

        middleware.shutdown.assert_not_awaited()


class TestGetState:
    """Test get_state helper."""

    def test_get_state_returns_state_when_initialized(self) -> None:
        """Test that get_state returns state when initialized."""
        mock_mcp = MagicMock()
        mock_state = MagicMock()
        mock_mcp.state = mock_state

        assert get_state(mock_mcp) == mock_state

    def test_get_state_raises_when_not_initialized(self) -> None:
        """Test that get_state raises RuntimeError when not initialized."""
        mock_mcp = MagicMock()
        mock_mcp.state = None

        with pytest.raises(RuntimeError, match="Server state not initialized"):
            get_state(mock_mcp)


class TestLifespan:
    """Test lifespan context manager."""

    async def test_lifespan_initializes_and_cleans_up(self) -> None:
        """Test that lifespan initializes state and cleans up properly."""
        mock_app = MagicMock()
        mock_app.middleware = []
        mock_app.state = None

        with patch("fetchmcp.server.ServerState") as mock_state_class:
            mock_state = AsyncMock()
            mock_state_class.return_value = mock_state

            async with lifespan(mock_app) as context:
                mock_state.start.assert_called_once()
                assert mock_app.state == mock_state
                assert context["state"] == mock_state

            mock_state.stop.assert_called_once()
            assert mock_app.state is None

    async def test_lifespan_with_middleware_lifecycle(self) -> None:
        """Test that lifespan calls middleware startup/shutdown."""
        mock_app = MagicMock()
        mock_middleware = AsyncMock()
        mock_app.middleware = [mock_middleware]
        mock_app.state = None

        with patch("fetchmcp.server.ServerState") as mock_state_class:
            mock_state_class.return_value = AsyncMock()

            async with lifespan(mock_app):
                mock_middleware.startup.assert_called_once()

            mock_middleware.shutdown.assert_called_once()

    async def test_lifespan_cleans_up_after_error(self) -> None:
        """Test that resources are released when the server body fails."""
        mock_app = MagicMock()
        mock_app.middleware = []

        with patch("fetchmcp.server.ServerState") as mock_state_class:
            mock_state = AsyncMock()
            mock_state_class.return_value = mock_state

            with pytest.raises(RuntimeError):
                async with lifespan(mock_app):
                    raise RuntimeError("transport failed")

            mock_state.stop.assert_called_once()


class TestCreateServer:
    """Test server construction."""

    def test_create_server_without_redis(self) -> None:
        """Test that no middleware is added when REDIS_URL is empty."""
        with patch("fetchmcp.server.settings") as mock_settings:
            mock_settings.redis_url = ""
            server = create_server()

        assert isinstance(server, TypedFastMCP)
        assert server.name == SERVER_NAME
        assert not any(isinstance(m, RedisLoggingMiddleware) for m in server.middleware)

    def test_create_server_with_redis(self) -> None:
        """Test that the Redis middleware is added when REDIS_URL is set."""
        with patch("fetchmcp.server.settings") as mock_settings:
            mock_settings.redis_url = "redis://localhost:6379"
            server = create_server()

        assert any(isinstance(m, RedisLoggingMiddleware) for m in server.middleware)

    def test_servers_are_independent(self) -> None:
        """Test that each call builds a separate server."""
        assert create_server() is not create_server()


class TestMain:
    """Test the process entry point."""

    @pytest.fixture(autouse=True)
    def mock_signal(self) -> Iterator[MagicMock]:
        """Keep main() from replacing the test process's SIGTERM handler."""
        with patch("fetchmcp.server.signal.signal") as mock_signal:
            yield mock_signal

    @patch("fetchmcp.server.setup_logging")
    def test_unknown_transport_exits_with_error(self, mock_setup: MagicMock) -> None:
        """Test that an unknown transport name exits with status 1."""
        with (
            patch("fetchmcp.server.settings") as mock_settings,
            patch("fetchmcp.server.ServerHandle") as mock_handle,
        ):
            mock_settings.mcp_transport = "carrier-pigeon"

            with pytest.raises(SystemExit) as exc_info:
                main()

            assert exc_info.value.code == 1
            mock_handle.assert_not_called()

    @patch("fetchmcp.server.setup_logging")
    def test_serves_selected_transport(self, mock_setup: MagicMock) -> None:
        """Test that main serves the configured transport."""
        with (
            patch("fetchmcp.server.settings") as mock_settings,
            patch("fetchmcp.server.ServerHandle") as mock_handle,
        ):
            mock_settings.mcp_transport = "HTTP"
            mock_settings.redis_url = ""
            mock_handle.return_value.serve = AsyncMock()

            main()

            assert mock_handle.call_args.args[1] is Transport.HTTP
            mock_handle.return_value.serve.assert_awaited_once()

    @patch("fetchmcp.server.setup_logging")
    def test_fatal_error_exits_with_error(self, mock_setup: MagicMock) -> None:
        """Test that a failure while serving exits with status 1."""
        with (
            patch("fetchmcp.server.settings") as mock_settings,
            patch("fetchmcp.server.ServerHandle") as mock_handle,
        ):
            mock_settings.mcp_transport = "stdio"
            mock_settings.redis_url = ""
            mock_handle.return_value.serve = AsyncMock(side_effect=OSError("address in use"))

            with pytest.raises(SystemExit) as exc_info:
                main()

            assert exc_info.value.code == 1

    @patch("fetchmcp.server.setup_logging")
    def test_sigterm_handled_like_sigint(
        self, mock_setup: MagicMock, mock_signal: MagicMock
    ) -> None:
        """Test that SIGTERM is routed to the KeyboardInterrupt handler before serving."""
        with (
            patch("fetchmcp.server.settings") as mock_settings,
            patch("fetchmcp.server.ServerHandle") as mock_handle,
        ):
            mock_settings.mcp_transport = "http"
            mock_settings.redis_url = ""
            mock_handle.return_value.serve = AsyncMock()

            main()

        mock_signal.assert_any_call(signal.SIGTERM, signal.default_int_handler)

    @patch("fetchmcp.server.setup_logging")
    def test_server_exit_status_becomes_1(self, mock_setup: MagicMock) -> None:
        """Test that a non-zero SystemExit from the server is logged and mapped to 1."""
        with (
            patch("fetchmcp.server.settings") as mock_settings,
            patch("fetchmcp.server.ServerHandle") as mock_handle,
            patch("fetchmcp.server.logger") as mock_logger,
        ):
            mock_settings.mcp_transport = "http"
            mock_settings.redis_url = ""
            mock_handle.return_value.serve = AsyncMock(side_effect=SystemExit(3))

            with pytest.raises(SystemExit) as exc_info:
                main()

            assert exc_info.value.code == 1
            mock_logger.error.assert_called_once_with(
                "fetchmcp server exited with status %s", 3
            )

    @patch("fetchmcp.server.setup_logging")
    def test_clean_server_exit_is_passed_on(self, mock_setup: MagicMock) -> None:
        """Test that SystemExit(0) from the server is not turned into a failure."""
        with (
            patch("fetchmcp.server.settings") as mock_settings,
            patch("fetchmcp.server.ServerHandle") as mock_handle,
        ):
            mock_settings.mcp_transport = "http"
            mock_settings.redis_url = ""
            mock_handle.return_value.serve = AsyncMock(side_effect=SystemExit(0))

            with pytest.raises(SystemExit) as exc_info:
                main()

            assert exc_info.value.code == 0


class TestTransportParse:
    """Test transport name parsing used by main."""

    def test_transport_error_message(self) -> None:
        """Test the message for an unsupported transport."""
        with pytest.raises(TransportError, match="Use 'stdio' or 'http'"):
            Transport.parse("sse")
