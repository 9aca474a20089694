"""The fetch tool: retrieve a URL and return its readable content."""

from typing import Annotated, NoReturn

from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent, ToolAnnotations
from pydantic import Field

from fetchmcp.config import settings
from fetchmcp.handler import format_metadata
from fetchmcp.logger import logger
from fetchmcp.models import (
    DEFAULT_MAX_LENGTH,
    DEFAULT_START_INDEX,
    AbsoluteUrl,
    FetchFailure,
    FetchParams,
    FetchSuccess,
    MaxLength,
    StartIndex,
)
from fetchmcp.state import TypedFastMCP, get_state
from fetchmcp.timing import timeit

TOOL_NAME = "fetch"


def log_tool_call(tool_name: str, details: str) -> None:
    """Log a tool call.

    Args:
        tool_name: Name of the tool being called
        details: Details about the tool call (e.g., URL)

    """
    logger.info("[TOOL CALLED] %s: %s", tool_name, details)


def to_tool_result(outcome: FetchSuccess, include_metadata: bool) -> ToolResult:
    """Build the MCP response for a successful fetch.

    The first text block is the JSON payload; the metadata footer, when
    requested and available, follows as a second block.
    """
    content = [TextContent(type="text", text=outcome.model_dump_json())]
    if include_metadata and outcome.metadata is not None:
        content.append(TextContent(type="text", text=format_metadata(outcome.url, outcome.metadata)))
    return ToolResult(content=content, structured_content=outcome.model_dump())


def raise_for_failure(outcome: FetchFailure) -> NoReturn:
    """Report a failed fetch as an MCP error result carrying {error, url}.

    Raises:
        ToolError: Always.

    """
    raise ToolError(outcome.model_dump_json())


def register_fetch(server: TypedFastMCP) -> None:
    """Attach the fetch tool to a server.

    Args:
        server: Server whose tool table receives the fetch tool.

    """

    @server.tool(
        name=TOOL_NAME,
        title="Fetch URL",
        description=settings.tool_fetch_desc,
        output_schema=FetchSuccess.model_json_schema(mode="serialization"),
        annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True),
    )
    @timeit("fetch tool")
    async def fetch(
        url: Annotated[AbsoluteUrl, Field(description=settings.arg_fetch_url_desc)],
        max_length: Annotated[
            MaxLength, Field(description=settings.arg_fetch_max_length_desc)
        ] = DEFAULT_MAX_LENGTH,
        start_index: Annotated[
            StartIndex, Field(description=settings.arg_fetch_start_index_desc)
        ] = DEFAULT_START_INDEX,
        raw: Annotated[bool, Field(strict=True, description=settings.arg_fetch_raw_desc)] = False,
    ) -> ToolResult:
        """Fetch a URL and return its content as Markdown (or raw text)."""
        log_tool_call(TOOL_NAME, f"URL: {url}")
        state = get_state(server)
        params = FetchParams(url=url, max_length=max_length, start_index=start_index, raw=raw)

        outcome = await state.handler.handle(params)
        if isinstance(outcome, FetchFailure):
            raise_for_failure(outcome)
        return to_tool_result(outcome, include_metadata=state.settings.include_metadata)
