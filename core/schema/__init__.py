"""
Query surface over per-theme dependency graphs.
"""

from .css_schema import CssSchema, normalize_property_name
from .formatting import format_hover_markdown

__all__ = [
    "CssSchema",
    "normalize_property_name",
    "format_hover_markdown",
]
