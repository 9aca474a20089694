"""HTML to Markdown conversion backed by crawl4ai."""

from typing import Any

from crawl4ai import DefaultMarkdownGenerator, PruningContentFilter

from fetchmcp.config import Settings
from fetchmcp.exceptions import MarkdownGeneratorError

# crawl4ai reports conversion failures in place of the Markdown
CRAWL4AI_ERROR_PREFIXES = (
    "Error converting HTML to markdown:",
    "Error generating fit markdown:",
    "Error in markdown generation:",
)


class MarkdownGenerator:
    """Renders the selected content region as Markdown.

    html2text options are fixed at construction. The pruning filter is
    created per call because debug extraction turns it off.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the markdown generator with settings.

        Args:
            settings: Application settings containing markdown generation configuration.

        """
        self._settings = settings
        self._options: dict[str, Any] = {
            "ignore_images": settings.crawl4ai_ignore_images,
            "ignore_links": settings.crawl4ai_ignore_links,
            "escape_html": settings.crawl4ai_escape_html,
            "body_width": settings.crawl4ai_body_width,
            "include_sup_sub": settings.crawl4ai_include_sup_sub,
            "single_line_break": settings.crawl4ai_single_line_break,
        }

    def convert(self, html: str, base_url: str = "", prune: bool = True) -> str:
        """Convert an HTML fragment to Markdown.

        Pruned output is preferred; when pruning drops everything the
        unpruned Markdown is returned instead.

        Args:
            html: HTML content to convert.
            base_url: URL used by crawl4ai to resolve relative links.
            prune: Apply PruningContentFilter (also needs MARKDOWN_PRUNING_ENABLED).

        Returns:
            Markdown text without surrounding whitespace.

        Raises:
            MarkdownGeneratorError: If conversion fails or yields nothing.

        """
        content_filter = self._pruning_filter() if prune else None
        generator = DefaultMarkdownGenerator(content_filter=content_filter, options=self._options)

        try:
            result = generator.generate_markdown(
                input_html=html,
                base_url=base_url,
                content_filter=content_filter,
                citations=False,
            )
        except Exception as e:
            raise MarkdownGeneratorError(f"Markdown generation failed: {e}") from e

        markdown = str(result.fit_markdown or result.raw_markdown or "")
        if markdown.startswith(CRAWL4AI_ERROR_PREFIXES):
            raise MarkdownGeneratorError(markdown.strip())
        if not markdown:
            raise MarkdownGeneratorError("Markdown generation produced no content")
        return markdown.strip()

    def _pruning_filter(self) -> PruningContentFilter | None:
        if not self._settings.markdown_pruning_enabled:
            return None
        return PruningContentFilter(
            threshold=self._settings.crawl4ai_pruning_threshold,
            threshold_type=self._settings.crawl4ai_threshold_type,
            min_word_threshold=self._settings.crawl4ai_min_word_threshold,
        )
