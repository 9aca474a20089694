import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import MiddlewareContext
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent

from fetchmcp.config import settings
from fetchmcp.middleware.redis_middleware import RedisLoggingMiddleware

KEY_PARTS_COUNT = 3  # prefix:timestamp:unique_id
UNIQUE_ID_LENGTH = 8  # 4-byte hex = 8 characters
REDIS_URL = "redis://redis:6379"


def make_context() -> MagicMock:
    """Middleware context for a fetch call."""
    context = MagicMock(spec=MiddlewareContext)
    context.message = MagicMock()
    context.message.name = "fetch"
    context.message.arguments = {"url": "https://example.com/"}
    return context


@pytest.mark.asyncio
async def test_middleware_no_redis() -> None:
    """Test middleware when Redis is not configured."""
    middleware = RedisLoggingMiddleware(redis_url="")
    await middleware.startup()

    context = MagicMock(spec=MiddlewareContext)
    call_next = AsyncMock(return_value="ok")

    result = await middleware.on_call_tool(context, call_next)

    assert result == "ok"
    call_next.assert_called_once_with(context)
    assert middleware.redis_client is None


@pytest.mark.asyncio
async def test_middleware_with_redis() -> None:
    """Test middleware when Redis is configured and working."""
    with patch("fetchmcp.middleware.redis_middleware.Redis.from_url") as mock_from_url:
        mock_redis = AsyncMock()
        mock_from_url.return_value = mock_redis

        middleware = RedisLoggingMiddleware(redis_url=REDIS_URL)
        await middleware.startup()

        tool_result = ToolResult(
            content=[TextContent(type="text", text='{"title":null}')],
            structured_content={"title": None},
        )
        call_next = AsyncMock(return_value=tool_result)

        result = await middleware.on_call_tool(make_context(), call_next)

        assert result is tool_result
        mock_from_url.assert_called_once_with(REDIS_URL)

        args, _ = mock_redis.setex.call_args
        key, ttl, payload = args
        data = json.loads(payload)

        key_parts = key.split(":")
        assert len(key_parts) == KEY_PARTS_COUNT
        assert key_parts[0] == settings.redis_key_prefix
        assert key_parts[1].isdigit()
        assert len(key_parts[2]) == UNIQUE_ID_LENGTH

        assert ttl == settings.redis_expiration_seconds
        assert data == {
            "tool": "fetch",
            "params": {"url": "https://example.com/"},
            "response": '{"title":null}',
            "is_error": False,
        }


@pytest.mark.asyncio
async def test_middleware_stores_failed_calls() -> None:
    """Test that tool errors are stored and re-raised."""
    with patch("fetchmcp.middleware.redis_middleware.Redis.from_url") as mock_from_url:
        mock_redis = AsyncMock()
        mock_from_url.return_value = mock_redis

        middleware = RedisLoggingMiddleware(redis_url=REDIS_URL)
        await middleware.startup()

        call_next = AsyncMock(side_effect=ToolError('{"error":"boom","url":"x"}'))

        with pytest.raises(ToolError):
            await middleware.on_call_tool(make_context(), call_next)

        data = json.loads(mock_redis.setex.call_args.args[2])
        assert data["is_error"] is True
        assert data["response"] == '{"error":"boom","url":"x"}'


@pytest.mark.asyncio
async def test_middleware_redis_error() -> None:
    """Test that a Redis failure does not fail the tool call."""
    with patch("fetchmcp.middleware.redis_middleware.Redis.from_url") as mock_from_url:
        mock_redis = AsyncMock()
        mock_redis.setex.side_effect = Exception("Redis down")
        mock_from_url.return_value = mock_redis

        middleware = RedisLoggingMiddleware(redis_url=REDIS_URL)
        await middleware.startup()

        call_next = AsyncMock(return_value="response")

        with patch("fetchmcp.middleware.redis_middleware.logger") as mock_logger:
            result = await middleware.on_call_tool(make_context(), call_next)

            assert result == "response"
            mock_logger.exception.assert_called_once()


@pytest.mark.asyncio
async def test_middleware_shutdown_closes_client() -> None:
    """Test that shutdown closes the connection and drops the client."""
    with patch("fetchmcp.middleware.redis_middleware.Redis.from_url") as mock_from_url:
        mock_redis = AsyncMock()
        mock_from_url.return_value = mock_redis

        middleware = RedisLoggingMiddleware(redis_url=REDIS_URL)
        await middleware.startup()
        await middleware.shutdown()

        mock_redis.aclose.assert_awaited_once()
        assert middleware.redis_client is None


def test_response_text_for_plain_values() -> None:
    """Test response rendering for non-ToolResult values."""
    assert RedisLoggingMiddleware._response_text({"a": 1}) == json.dumps({"a": 1}, indent=2)
    assert RedisLoggingMiddleware._response_text("text") == "text"


def test_response_text_falls_back_to_structured_content() -> None:
    """Test that structured content is used when there is no text."""
    result = ToolResult(content=[], structured_content={"url": "x"})

    assert RedisLoggingMiddleware._response_text(result) == json.dumps({"url": "x"}, indent=2)
