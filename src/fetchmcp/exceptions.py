"""fetchmcp custom exceptions."""


class FetchMCPError(Exception):
    """Base exception for all fetchmcp errors."""


class FetchError(FetchMCPError):
    """Errors while retrieving a document over HTTP."""


class ParserError(FetchMCPError):
    """Errors while parsing content."""


class FilterError(ParserError):
    """Errors while filtering content."""


class MarkdownGeneratorError(ParserError):
    """Errors while generating Markdown output."""


class TransportError(FetchMCPError):
    """Errors while selecting or starting a server transport."""


class ScraperError(ParserError):
    """Errors while stripping boilerplate from a document."""
