"""
Per-theme dependency graphs of CSS custom properties.
"""

from .builder import ThemeGraphBuilder
from .dependency_graph import DependencyGraph
from .references import VarReference, find_var_references, referenced_names, substitute_references

__all__ = [
    "ThemeGraphBuilder",
    "DependencyGraph",
    "VarReference",
    "find_var_references",
    "referenced_names",
    "substitute_references",
]
