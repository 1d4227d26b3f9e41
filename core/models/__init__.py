"""
Core data models for varsu

Dataclasses for properties, graph nodes and query results; Pydantic models
for configuration.
"""

from .variables import (
    PropertyMetadata,
    GraphNode,
    CircularDependency,
    CompletionEntry,
    ThemeValue,
    VariableDetails,
)
from .config import ThemeConfig, SchemaConfig, FetchConfig, GlobalSettings

__all__ = [
    # Variables
    "PropertyMetadata",
    "GraphNode",
    "CircularDependency",
    "CompletionEntry",
    "ThemeValue",
    "VariableDetails",

    # Configuration
    "ThemeConfig",
    "SchemaConfig",
    "FetchConfig",
    "GlobalSettings",
]
