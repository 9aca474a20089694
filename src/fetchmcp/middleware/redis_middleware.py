"""Redis middleware for keeping a log of fetch requests and responses."""

import json
import secrets
import time
from typing import Any

from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools.tool import ToolResult
from redis.asyncio import Redis

from fetchmcp.config import settings
from fetchmcp.logger import logger


class RedisLoggingMiddleware(Middleware):
    """Middleware that stores tool arguments and responses in Redis.

    Entries expire after REDIS_EXPIRATION_SECONDS. Failed calls are stored
    too, with the error text as the response.
    """

    def __init__(self, redis_url: str = "") -> None:
        """Initialize the middleware.

        The connection is opened in startup() and closed in shutdown(),
        driven by the server lifespan.

        Args:
            redis_url: Redis connection URL; empty disables the middleware.

        """
        self._redis_url = redis_url
        self.redis_client: Redis | None = None

    async def startup(self) -> None:
        """Open the Redis connection."""
        if self._redis_url and self.redis_client is None:
            self.redis_client = Redis.from_url(self._redis_url)
            logger.info("Redis request logging enabled")

    async def shutdown(self) -> None:
        """Close the Redis connection."""
        if self.redis_client is not None:
            await self.redis_client.aclose()
            self.redis_client = None

    async def on_call_tool(self, context: MiddlewareContext, call_next: Any) -> Any:
        """Process the tool call and store params and response in Redis.

        Args:
            context: The middleware context
            call_next: Function to process the next middleware or tool

        Returns:
            The result from the tool execution

        """
        if self.redis_client is None:
            return await call_next(context)

        try:
            result = await call_next(context)
        except ToolError as e:
            await self._store(context, str(e), is_error=True)
            raise

        await self._store(context, self._response_text(result), is_error=False)
        return result

    async def _store(self, context: MiddlewareContext, response: str, is_error: bool) -> None:
        if self.redis_client is None:
            return
        log_data = {
            "tool": context.message.name,
            "params": context.message.arguments,
            "response": response,
            "is_error": is_error,
        }
        # prefix:timestamp:random suffix, so calls in the same second don't collide
        key = f"{settings.redis_key_prefix}:{int(time.time())}:{secrets.token_hex(4)}"
        try:
            await self.redis_client.setex(
                key,
                settings.redis_expiration_seconds,
                json.dumps(log_data),
            )
        except Exception:
            # Logging to Redis is a side effect; the tool call still succeeds
            logger.exception("Failed to store data in Redis")

    @staticmethod
    def _response_text(result: Any) -> str:
        if isinstance(result, ToolResult):
            contents = [
                item.text if hasattr(item, "text") else str(item) for item in result.content
            ]
            response = "\n".join(contents)
            if result.structured_content and not response:
                response = json.dumps(result.structured_content, indent=2)
            return response
        if isinstance(result, list | dict):
            return json.dumps(result, indent=2)
        return str(result)
