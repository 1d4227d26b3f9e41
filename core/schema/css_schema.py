"""
CSS variable schema.

Owns one resolved dependency graph per configured theme and answers
completion and hover queries across all of them.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..graph.builder import ThemeGraphBuilder
from ..graph.dependency_graph import DependencyGraph
from ..models.config import SchemaConfig
from ..models.variables import CompletionEntry, ThemeValue, VariableDetails
from ..parser.base import ParseError
from ..source.fetcher import RemoteSourceFetcher, SourceFetchError
from .formatting import format_completion_theme_block, format_deprecation, join_sections

logger = logging.getLogger(__name__)


def normalize_property_name(name: str) -> str:
    """
    Normalize user input to a custom property name.

    All leading hyphens are stripped and `--` is prefixed, so `color`,
    `-color` and `--color` are the same query and an empty input matches
    every property.
    """
    return "--" + (name or "").lstrip("-")


@dataclass
class _CompletionDraft:
    label: str
    detail: Optional[str]
    deprecation: Optional[str]
    deprecated: bool
    theme_blocks: List[str] = field(default_factory=list)

    def to_entry(self) -> CompletionEntry:
        return CompletionEntry(
            label=self.label,
            detail=self.detail,
            deprecated=self.deprecated,
            documentation=join_sections([self.deprecation, *self.theme_blocks]),
        )


class CssSchema:
    """
    Completion and hover data for the custom properties of one stylesheet.

    Until `load` finishes every query behaves as if no theme were
    configured: completions are empty and details are None.
    """

    def __init__(
        self,
        config: SchemaConfig,
        fetcher: Optional[RemoteSourceFetcher] = None,
        builder: Optional[ThemeGraphBuilder] = None
    ):
        self.config = config
        self._fetcher = fetcher or RemoteSourceFetcher()
        self._builder = builder or ThemeGraphBuilder()

        # Keys are theme names in configured order; replaced as a whole
        self._theme_graphs: Dict[str, DependencyGraph] = {}

    @property
    def source_url(self) -> str:
        return self.config.source_url

    @property
    def is_loaded(self) -> bool:
        return bool(self._theme_graphs)

    @property
    def theme_names(self) -> List[str]:
        """Names of themes with a published graph"""
        return list(self._theme_graphs)

    def get_graph(self, theme_name: str) -> Optional[DependencyGraph]:
        return self._theme_graphs.get(theme_name)

    async def load(self) -> bool:
        """
        Fetch the stylesheet and build every theme graph.

        Failures are logged once and leave the schema empty.

        Returns:
            True when graphs were published
        """
        try:
            css = await self._fetcher.fetch(self.source_url)
            self.load_css(css)
        except (SourceFetchError, ParseError) as e:
            logger.error(f"Failed to load css schema from \"{self.source_url}\": {e}")
            return False

        logger.info(
            f"Loaded css schema from \"{self.source_url}\": "
            f"{len(self._theme_graphs)} themes"
        )
        return True

    def load_css(self, css: str) -> None:
        """Build every theme graph from CSS text and publish them together"""
        stylesheet = self._builder.parse(css)

        graphs: Dict[str, DependencyGraph] = {}
        for theme in self.config.themes:
            graphs[theme.name] = self._builder.build_from_stylesheet(stylesheet, theme.selector)

        self._theme_graphs = graphs

    def get_completions(self, partial_name: str) -> List[CompletionEntry]:
        """
        Completion entries for properties starting with `partial_name`.

        Entries are merged by name across themes. Detail and deprecation
        come from the first theme defining the property; every defining
        theme adds a documentation block with its value.
        """
        prefix = normalize_property_name(partial_name)
        drafts: Dict[str, _CompletionDraft] = {}

        for theme_name, graph in self._theme_graphs.items():
            for name in graph.names_with_prefix(prefix):
                node = graph.nodes[name]
                draft = drafts.get(name)

                if draft is None:
                    metadata = node.metadata
                    draft = _CompletionDraft(
                        label=name,
                        detail=metadata.description,
                        deprecated=metadata.deprecated,
                        deprecation=format_deprecation(
                            metadata.deprecated, metadata.deprecated_description
                        ),
                    )
                    drafts[name] = draft

                draft.theme_blocks.append(
                    format_completion_theme_block(theme_name, node.raw_value, node.resolved_value)
                )

        return [draft.to_entry() for draft in drafts.values()]

    def get_variable_details(self, name: str) -> Optional[VariableDetails]:
        """
        Per-theme values of a property.

        Returns:
            VariableDetails with metadata from the first defining theme,
            or None when no theme defines the property
        """
        property_name = normalize_property_name(name)
        details: Optional[VariableDetails] = None

        for theme_name, graph in self._theme_graphs.items():
            node = graph.get(property_name)
            if node is None:
                continue

            if details is None:
                details = VariableDetails(
                    name=property_name,
                    description=node.metadata.description,
                    deprecated=node.metadata.deprecated,
                    deprecated_description=node.metadata.deprecated_description,
                )

            details.themes.append(ThemeValue(
                theme_name=theme_name,
                value=node.resolved_value,
                original_value=node.raw_value,
            ))

        return details
