"""Structural interfaces shared by the parser stages."""

from typing import Protocol


class ContentFilter(Protocol):
    """A single HTML-to-HTML stage of the extraction pipeline.

    Cleaners (residual junk) return the page minus the parts
    they strip; selectors return just the region they picked. Either kind
    returns None when no text would be left.
    """

    def apply(self, html: str) -> str | None:
        """Filter an HTML document or fragment."""
        ...


class HtmlConverter(Protocol):
    """Turns the selected HTML region into the text handed to the client."""

    def convert(self, html: str, base_url: str = "", prune: bool = True) -> str:
        """Convert an HTML fragment; base_url resolves relative links."""
        ...
