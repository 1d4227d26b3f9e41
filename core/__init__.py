"""
varsu core package

CSS custom property resolution across themes: parsing, dependency graphs,
and completion/hover queries.
"""

__version__ = "1.0.0"
__author__ = "varsu contributors"

from .models import PropertyMetadata, CompletionEntry, VariableDetails, ThemeValue, SchemaConfig, ThemeConfig
from .schema import CssSchema

__all__ = [
    "PropertyMetadata",
    "CompletionEntry",
    "VariableDetails",
    "ThemeValue",
    "SchemaConfig",
    "ThemeConfig",
    "CssSchema",
]
