"""Main parser module that orchestrates the extraction pipeline."""

import asyncio
import logging
from typing import NamedTuple

from bs4 import BeautifulSoup

from fetchmcp.config import Settings
from fetchmcp.logger import logger
from fetchmcp.parser.document import parse_document
from fetchmcp.parser.filter import Filter
from fetchmcp.parser.markdown_generator import MarkdownGenerator
from fetchmcp.parser.protocols import HtmlConverter
from fetchmcp.parser.scraper import PageScraper
from fetchmcp.timing import timer


class ExtractionOptions(NamedTuple):
    """Options for a single extraction run."""

    debug: bool = False
    markdown: bool = True


class ExtractionResult(NamedTuple):
    """Main content of a page plus its metadata.

    parse_time is in milliseconds.
    """

    title: str | None
    author: str | None
    published: str | None
    word_count: int
    domain: str
    description: str | None
    parse_time: float
    content: str


class Parser:
    """Coordinates DOM parsing, filtering and Markdown conversion.

    Pipeline: HTML -> resolved DOM -> boilerplate removal + metadata
    -> main content selection -> Markdown conversion.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the parser with settings.

        Args:
            settings: Application settings containing all configuration.

        """
        self._settings = settings
        self._scraper = PageScraper(settings)
        self._filter = Filter(settings)
        self._markdown_generator: HtmlConverter = MarkdownGenerator(settings)

    async def parse(
        self,
        html: str,
        base_url: str,
        options: ExtractionOptions | None = None,
    ) -> ExtractionResult:
        """Extract the main content of an HTML document.

        The work is CPU-bound and runs in a worker thread.

        Args:
            html: Raw HTML text.
            base_url: URL the document was fetched from.
            options: Extraction options (defaults: no debug, Markdown output).

        Returns:
            ExtractionResult with content and metadata.

        Raises:
            ScraperError: If crawl4ai cannot process the document.
            FilterError: If a content filter fails.
            MarkdownGeneratorError: If Markdown conversion fails.

        """
        return await asyncio.to_thread(
            self._run_pipeline, html, base_url, options or ExtractionOptions()
        )

    def _run_pipeline(
        self, html: str, base_url: str, options: ExtractionOptions
    ) -> ExtractionResult:
        """Run the parse -> select -> clean -> markdown pipeline for one document."""
        stage_level = logging.INFO if options.debug else logging.DEBUG

        with timer(f"Parsing {base_url}", logging.DEBUG) as watch:
            # 1. Resolve links, then strip boilerplate and read metadata from the whole page
            document_html = str(parse_document(html, base_url))
            page = self._scraper.scrape(document_html, base_url)

            # 2. Look for the main content region in the untouched document;
            #    a matched region is cleaned on its own, otherwise the whole page is used
            logger.log(stage_level, "[FILTERING STARTED] for %s", base_url)
            selected_html = self._filter.apply_all(document_html) if page.html else None
            if selected_html is None:
                logger.log(stage_level, "No main region found for %s, using page body", base_url)
                region_html = _body_of(page.html)
            else:
                region_html = _body_of(self._scraper.scrape(selected_html, base_url).html)
            region_html = self._filter.clean(region_html)

            region_text = BeautifulSoup(region_html, "html.parser").get_text(" ", strip=True)
            word_count = len(region_text.split())

            # 3. Convert to Markdown
            if not region_text:
                content = ""
            elif options.markdown:
                logger.log(stage_level, "[MARKDOWN GENERATION STARTED] for %s", base_url)
                content = self._markdown_generator.convert(
                    region_html, base_url=base_url, prune=not options.debug
                )
            else:
                content = region_html.strip()

        logger.log(
            stage_level,
            "Extracted %d words (%d characters) from %s",
            word_count,
            len(content),
            base_url,
        )

        metadata = page.metadata
        return ExtractionResult(
            title=metadata.title,
            author=metadata.author,
            published=metadata.published,
            word_count=word_count,
            domain=metadata.domain,
            description=metadata.description,
            parse_time=watch.elapsed_ms,
            content=content,
        )


def _body_of(html: str) -> str:
    """Return the inner HTML of <body>, or the whole fragment if there is none.

    A document whose body was stripped away entirely yields "".
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    if soup.body is not None:
        return soup.body.decode_contents()
    return "" if soup.html is not None else html
