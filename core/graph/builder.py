"""
Theme graph construction.

Collects the custom properties declared in the rule blocks of one theme
selector, attaches their comment annotations and resolves them into a
DependencyGraph.
"""

import logging
from typing import List, Optional

from ..models.variables import PropertyMetadata
from ..parser.base import ParseResult
from ..parser.css_parser import CSSParser
from ..parser.metadata import extract_metadata, index_annotated_comments
from .dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


class ThemeGraphBuilder:
    """Builds one DependencyGraph per theme selector"""

    def __init__(self, parser: Optional[CSSParser] = None):
        self._parser = parser

    @property
    def parser(self) -> CSSParser:
        # Grammar loading is deferred until something is actually parsed
        if self._parser is None:
            self._parser = CSSParser()
        return self._parser

    def parse(self, css: str) -> ParseResult:
        return self.parser.parse(css)

    def build(self, css: str, selector: str) -> DependencyGraph:
        """
        Parse CSS text and build the graph for `selector`.

        Args:
            css: Stylesheet source
            selector: Theme selector, compared to rule selectors as text

        Returns:
            Resolved dependency graph (empty when no rule matches)
        """
        return self.build_from_stylesheet(self.parse(css), selector)

    def build_from_stylesheet(self, stylesheet: ParseResult, selector: str) -> DependencyGraph:
        """Build the graph for `selector` from an already parsed stylesheet"""
        properties = self.collect_properties(stylesheet, selector)
        graph = DependencyGraph(properties)

        logger.debug(
            f"Built graph for '{selector}': {len(graph)} properties, "
            f"{len(graph.circular_dependencies)} circular references"
        )
        return graph

    def collect_properties(self, stylesheet: ParseResult, selector: str) -> List[PropertyMetadata]:
        """
        Collect custom property declarations of matching rules in source order.

        Args:
            stylesheet: Parsed stylesheet
            selector: Theme selector

        Returns:
            PropertyMetadata list, duplicates included
        """
        annotated_comments = index_annotated_comments(stylesheet.comments)
        properties = []

        for rule in stylesheet.rules_for_selector(selector):
            for declaration in rule.custom_properties():
                annotations = extract_metadata(annotated_comments, declaration.start_line)
                properties.append(PropertyMetadata(
                    name=declaration.property,
                    raw_value=declaration.value,
                    description=annotations.description,
                    deprecated=annotations.deprecated,
                    deprecated_description=annotations.deprecated_description,
                    line=declaration.start_line,
                ))

        return properties
