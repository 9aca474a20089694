"""Boilerplate stripping and metadata extraction with crawl4ai."""

from typing import Any, NamedTuple
from urllib.parse import urlparse

from crawl4ai import WebScrapingStrategy

from fetchmcp.config import Settings
from fetchmcp.exceptions import ScraperError
from fetchmcp.logger import logger


class PageMetadata(NamedTuple):
    """Descriptive fields of a document."""

    title: str | None
    author: str | None
    published: str | None
    description: str | None
    domain: str


class ScrapedPage(NamedTuple):
    """A document with its boilerplate removed.

    html is a whole document (<html><head>...<body>...), or empty when
    the input was empty.
    """

    html: str
    metadata: PageMetadata


def domain_of(url: str) -> str:
    """Return the URL host without a leading 'www.' (empty if there is none)."""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return host.removeprefix("www.")


def _first(metadata: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = metadata.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class PageScraper:
    """Removes excluded tags and selectors and reads the page metadata.

    Wraps crawl4ai's WebScrapingStrategy, which works on an HTML string
    without a browser. Metadata is read from <head> after exclusion, so
    the excluded tag list must never contain head elements (meta, title).
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the scraper.

        Args:
            settings: Application settings containing boilerplate configuration.

        """
        self._strategy = WebScrapingStrategy()
        self._excluded_tags = [
            tag.strip() for tag in settings.boilerplate_excluded_tags.split(",") if tag.strip()
        ]
        self._excluded_selector = settings.boilerplate_selectors.strip()

    def scrape(self, html: str, url: str) -> ScrapedPage:
        """Clean one document.

        Args:
            html: Document or fragment to clean.
            url: URL the document was fetched from.

        Returns:
            ScrapedPage with the cleaned document and its metadata.

        Raises:
            ScraperError: If crawl4ai cannot process the document.

        """
        if not html.strip():
            return ScrapedPage("", self._metadata({}, url))

        try:
            result = self._strategy.scrap(
                url,
                html,
                excluded_tags=self._excluded_tags,
                excluded_selector=self._excluded_selector,
                word_count_threshold=1,
            )
        except Exception as e:
            raise ScraperError(f"Scraping {url} failed: {e}") from e

        if not result.success:
            raise ScraperError(f"Scraping {url} failed: document could not be parsed")

        logger.debug(
            "Scraped %s: %d internal and %d external links kept",
            url,
            len(result.links.internal),
            len(result.links.external),
        )
        return ScrapedPage(result.cleaned_html, self._metadata(result.metadata, url))

    @staticmethod
    def _metadata(metadata: dict[str, Any], url: str) -> PageMetadata:
        return PageMetadata(
            title=_first(metadata, "title", "og:title", "twitter:title"),
            author=_first(metadata, "author", "article:author"),
            published=_first(metadata, "article:published_time"),
            description=_first(metadata, "description", "og:description", "twitter:description"),
            domain=domain_of(url),
        )
