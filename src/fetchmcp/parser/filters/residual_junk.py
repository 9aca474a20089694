"""Removal of UI leftovers that survive boilerplate stripping."""

from typing import TYPE_CHECKING, ClassVar

from bs4 import BeautifulSoup

from fetchmcp.config import Settings
from fetchmcp.logger import logger

if TYPE_CHECKING:
    from bs4.element import Tag

HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")


def letter_ratio(text: str) -> float:
    """Share of letters among the non-whitespace characters of text."""
    chars = "".join(text.split())
    if not chars:
        return 1.0
    return sum(char.isalpha() for char in chars) / len(chars)


class ResidualJunkFilter:
    """Strips tooltips, icon labels, counters and repeated snippets.

    Only layout containers (div, span, section...) are candidates. Text
    blocks, media, and anything nested inside a text block are kept.
    Disabled unless JUNK_FILTER_ENABLED is set.
    """

    # Never removed themselves
    PROTECTED_TAGS: ClassVar[frozenset[str]] = frozenset({
        *HEADINGS, "p", "li", "td", "th", "dt", "dd", "figcaption",
        "code", "pre", "blockquote", "table", "ul", "ol",
        "html", "body", "article", "main",
        "img", "picture", "figure", "video", "audio", "source", "br", "hr",
    })
    # Everything below these is kept too
    TEXT_CONTAINERS: ClassVar[frozenset[str]] = frozenset({
        *HEADINGS, "p", "li", "td", "th", "dt", "dd", "code", "pre", "blockquote",
    })
    # A container holding one of these is content, not junk
    TEXT_BLOCK_TAGS: ClassVar[list[str]] = [*HEADINGS, "p", "li", "pre", "blockquote", "table"]
    MEDIA_TAGS: ClassVar[list[str]] = ["img", "picture", "video", "audio", "figure"]

    def __init__(self, settings: Settings) -> None:
        """Initialize the residual junk filter."""
        self._enabled = settings.junk_filter_enabled
        self._min_letter_ratio = settings.junk_filter_letter_ratio_threshold

    def apply(self, html: str) -> str | None:
        """Remove junk containers; returns None if no text is left."""
        if not self._enabled:
            return html

        soup = BeautifulSoup(html, "html.parser")
        seen_snippets: set[str] = set()
        removed: dict[str, int] = {}

        for element in soup.find_all():
            # Already gone with a removed ancestor
            if element.parent is None or not self._is_candidate(element):
                continue

            reason = self._junk_reason(element, seen_snippets)
            if reason:
                element.decompose()
                removed[reason] = removed.get(reason, 0) + 1

        if removed:
            logger.debug("ResidualJunkFilter removed %s", removed)

        return str(soup) if soup.get_text(strip=True) else None

    def _is_candidate(self, element: "Tag") -> bool:
        if element.name in self.PROTECTED_TAGS:
            return False
        return not any(parent.name in self.TEXT_CONTAINERS for parent in element.parents)

    def _junk_reason(self, element: "Tag", seen_snippets: set[str]) -> str | None:
        """Say why element is junk, or None to keep it. Checks run in order."""
        if element.get("role") == "tooltip":
            return "tooltip"

        if element.find(self.TEXT_BLOCK_TAGS):
            return None

        text = element.get_text(" ", strip=True)
        if not text:
            return None if element.find(self.MEDIA_TAGS) else "empty"

        # Icon labels, "Share", "Menu", counters
        if " " not in text:
            return "single word"

        if letter_ratio(text) < self._min_letter_ratio:
            return "low letter ratio"

        # Repeats are only judged on leaves so a parent and its child don't collide
        if any(child.get_text(strip=True) for child in element.find_all(recursive=False)):
            return None
        if text in seen_snippets:
            return "duplicate"
        seen_snippets.add(text)
        return None
