"""Fetch handler: one GET, optional extraction, windowing."""

from fetchmcp.exceptions import FetchMCPError
from fetchmcp.logger import logger
from fetchmcp.models import FetchFailure, FetchOutcome, FetchParams, FetchSuccess
from fetchmcp.page_fetcher import PageFetcher
from fetchmcp.parser.parser import ExtractionOptions, ExtractionResult, Parser

PLACEHOLDER = "N/A"

# Extraction options used for every tool call
EXTRACTION_OPTIONS = ExtractionOptions(debug=False, markdown=True)


def window(text: str, start_index: int, max_length: int) -> str:
    """Return at most max_length characters of text starting at start_index.

    Indices past the end yield a shorter or empty string, never an error.
    """
    return text[start_index:start_index + max_length]


def format_metadata(url: str, result: ExtractionResult) -> str:
    """Render the metadata footer block for an extraction result."""

    def _value(value: object) -> str:
        if value is None or value == "":
            return PLACEHOLDER
        return str(value)

    lines = [
        "\n\n---\n\n**Metadata:**",
        f"**URL:** {url}",
        f"**Title:** {_value(result.title)}",
        f"**Author:** {_value(result.author)}",
        f"**Published:** {_value(result.published)}",
        f"**Word Count:** {_value(result.word_count)}",
        f"**Domain:** {_value(result.domain)}",
        f"**Parse Time:** {_value(result.parse_time)}ms",
        f"**Description:** {_value(result.description)}",
    ]
    return "\n".join(lines)


class FetchHandler:
    """Performs the request/response cycle of the fetch tool.

    Every failure is turned into a FetchFailure; handle() never raises.
    """

    def __init__(self, page_fetcher: PageFetcher, parser: Parser) -> None:
        """Initialize the handler.

        Args:
            page_fetcher: Client used to retrieve documents.
            parser: Extraction pipeline for non-raw requests.

        """
        self._page_fetcher = page_fetcher
        self._parser = parser

    async def handle(self, params: FetchParams) -> FetchOutcome:
        """Fetch a URL and return its windowed content.

        Args:
            params: Validated tool arguments.

        Returns:
            FetchSuccess with the content window, or FetchFailure.

        """
        try:
            return await self._fetch(params)
        except FetchMCPError as e:
            logger.warning("Fetching %s failed: %s", params.url, e)
            return FetchFailure(error=str(e), url=params.url)
        except Exception as e:
            logger.exception("Unexpected error while fetching %s", params.url)
            return FetchFailure(error=str(e) or type(e).__name__, url=params.url)

    async def _fetch(self, params: FetchParams) -> FetchSuccess:
        page = await self._page_fetcher.fetch_text(params.url)
        logger.debug(
            "Got HTTP %d (%s) for %s from %s",
            page.status_code,
            page.content_type or "no content type",
            params.url,
            page.url,
        )

        if params.raw:
            return FetchSuccess(
                title=None,
                url=params.url,
                content=window(page.text, params.start_index, params.max_length),
            )

        # Relative links resolve against where the page ended up
        result = await self._parser.parse(page.text, page.url, EXTRACTION_OPTIONS)
        return FetchSuccess(
            title=result.title or None,
            url=params.url,
            content=window(result.content, params.start_index, params.max_length),
            metadata=result,
        )
