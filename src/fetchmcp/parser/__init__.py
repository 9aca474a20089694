"""Parser package for web content extraction and markdown conversion.

This package provides a pipeline for extracting the main content from
web pages and converting it to clean Markdown format.
"""

from fetchmcp.exceptions import FilterError, ScraperError
from fetchmcp.parser.document import parse_document
from fetchmcp.parser.filter import Filter
from fetchmcp.parser.markdown_generator import MarkdownGenerator
from fetchmcp.parser.parser import ExtractionOptions, ExtractionResult, Parser
from fetchmcp.parser.protocols import ContentFilter, HtmlConverter
from fetchmcp.parser.scraper import PageMetadata, PageScraper

__all__ = [
    "ContentFilter",
    "ExtractionOptions",
    "ExtractionResult",
    "Filter",
    "FilterError",
    "HtmlConverter",
    "MarkdownGenerator",
    "PageMetadata",
    "PageScraper",
    "Parser",
    "ScraperError",
    "parse_document",
]
