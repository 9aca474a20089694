"""Content filters for HTML extraction."""

from fetchmcp.parser.filters.css_selector import CssSelectorFilter
from fetchmcp.parser.filters.residual_junk import ResidualJunkFilter

__all__ = [
    "CssSelectorFilter",
    "ResidualJunkFilter",
]
