"""
Custom property models.

Defines the per-theme property metadata, the dependency graph node and the
records returned by completion and hover queries.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Dict, Any


@dataclass(frozen=True)
class PropertyMetadata:
    """A custom property declaration as written in one theme's rule block"""
    name: str
    raw_value: str
    description: Optional[str] = None
    deprecated: bool = False
    deprecated_description: Optional[str] = None
    line: int = 0  # 1-based declaration line, 0 when unknown

    def __post_init__(self):
        """Validate property name"""
        if not self.name.startswith("--"):
            raise ValueError(f"Custom property name must start with '--': {self.name!r}")


@dataclass
class GraphNode:
    """
    A property inside a dependency graph.

    Edges are property names pointing into the owning graph's node map,
    never direct node references.
    """
    metadata: PropertyMetadata
    resolved_value: str
    depends_on: List[str] = field(default_factory=list)
    dependents: Set[str] = field(default_factory=set)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def raw_value(self) -> str:
        return self.metadata.raw_value

    @property
    def is_substituted(self) -> bool:
        """True when at least one reference was replaced"""
        return self.resolved_value != self.metadata.raw_value


@dataclass(frozen=True)
class CircularDependency:
    """A reference from `source` to `target` that closes a cycle"""
    source: str
    target: str

    @property
    def is_self_reference(self) -> bool:
        return self.source == self.target


@dataclass
class CompletionEntry:
    """One completion suggestion merged across themes"""
    label: str
    documentation: str
    detail: Optional[str] = None
    deprecated: bool = False


@dataclass(frozen=True)
class ThemeValue:
    """A property's value in one theme"""
    theme_name: str
    value: str
    original_value: str


@dataclass
class VariableDetails:
    """Hover details for a property across all themes defining it"""
    name: str
    description: Optional[str] = None
    deprecated: bool = False
    deprecated_description: Optional[str] = None
    themes: List[ThemeValue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "name": self.name,
            "description": self.description,
            "deprecated": self.deprecated,
            "deprecatedDescription": self.deprecated_description,
            "perThemeValues": [
                {
                    "themeName": theme.theme_name,
                    "value": theme.value,
                    "originalValue": theme.original_value,
                }
                for theme in self.themes
            ],
        }
