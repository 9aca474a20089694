"""HTML filtering module."""

from fetchmcp.config import Settings
from fetchmcp.exceptions import FilterError
from fetchmcp.parser.filters.css_selector import CssSelectorFilter
from fetchmcp.parser.filters.residual_junk import ResidualJunkFilter
from fetchmcp.parser.protocols import ContentFilter


class Filter:
    """Applies content filters to isolate the main content of a page.

    Two groups of filters:
    - cleaners run in sequence, each one stripping unwanted elements;
    - selectors are tried in order and the first match wins.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the filter with settings.

        Args:
            settings: Application settings containing filter configuration.

        """
        self._settings = settings
        self._cleaners = self._initialize_cleaners()
        self._filters = self._initialize_filters()

    def _initialize_cleaners(self) -> list[ContentFilter]:
        """Initialize cleaning filters in application order."""
        return [
            ResidualJunkFilter(self._settings),
        ]

    def _initialize_filters(self) -> list[ContentFilter]:
        """Initialize main-content selectors in priority order."""
        return [
            CssSelectorFilter(self._settings),
        ]

    def clean(self, html: str) -> str:
        """Run every cleaner over the HTML.

        Args:
            html: HTML content to clean.

        Returns:
            Cleaned HTML, or an empty string once a cleaner leaves no text.

        Raises:
            FilterError: If a cleaner fails.

        """
        for cleaner in self._cleaners:
            try:
                result = cleaner.apply(html)
            except Exception as e:
                raise FilterError(f"{type(cleaner).__name__} failed: {e}") from e
            if result is None:
                return ""
            html = result
        return html

    def apply_all(self, html: str) -> str | None:
        """Apply selectors sequentially until one matches.

        Args:
            html: HTML content to filter.

        Returns:
            String containing the main content HTML or None if no selector matched.

        Raises:
            FilterError: If a selector fails.

        """
        for content_filter in self._filters:
            try:
                result = content_filter.apply(html)
            except Exception as e:
                raise FilterError(f"{type(content_filter).__name__} failed: {e}") from e
            if result:
                return result

        return None
