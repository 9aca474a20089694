"""Main content region selection by CSS selector."""

from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

from fetchmcp.config import Settings
from fetchmcp.logger import logger

if TYPE_CHECKING:
    from bs4.element import Tag


def word_count(element: "Tag") -> int:
    """Count whitespace-separated words in an element's text."""
    return len(element.get_text(" ", strip=True).split())


class CssSelectorFilter:
    """Picks the element most likely to hold the page's main content.

    Selectors are tried in priority order. When one matches several
    elements (a listing page with many <article> teasers) the wordiest
    wins, and it must still reach CSS_SELECTOR_MIN_WORDS.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the CSS selector filter.

        Args:
            settings: Application settings containing CSS selector configuration.

        """
        self._selectors = self._parse_selector_list(settings.css_selector_priority_list)
        self._min_words = settings.css_selector_min_words

    def apply(self, html: str) -> str | None:
        """Return the HTML of the selected region, or None if nothing qualifies."""
        soup = BeautifulSoup(html, "html.parser")

        for selector in self._selectors:
            best = max(soup.select(selector), key=word_count, default=None)
            if best is None:
                continue

            words = word_count(best)
            if words < self._min_words:
                logger.debug("Selector '%s' too short (%d words), trying next", selector, words)
                continue

            logger.debug("Selector '%s' picked a region with %d words", selector, words)
            return str(best)

        return None

    @staticmethod
    def _parse_selector_list(selector_str: str) -> list[str]:
        """Split the comma-separated selector setting, dropping blanks."""
        return [s.strip() for s in selector_str.split(",") if s.strip()]
