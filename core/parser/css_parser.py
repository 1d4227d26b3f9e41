"""
CSS parser using Tree-sitter for custom property extraction.

Extracts top-level rules with their declarations and every comment of a
stylesheet, keeping source lines so comments can be paired with the
declarations they document.
"""

import logging
from typing import List, Optional

import tree_sitter

from .base import (
    CssComment,
    CssDeclaration,
    CssRule,
    ParseResult,
    normalize_selector,
    normalize_whitespace,
)
from .tree_sitter_base import TreeSitterBase

logger = logging.getLogger(__name__)


class CSSParser(TreeSitterBase):
    """
    Stylesheet parser built on the Tree-sitter CSS grammar.

    Features:
    - Top-level rule sets with canonical selector text
    - Declarations with whitespace-normalized values
    - Block comments with start and end lines
    """

    # Declaration children that are not part of the value
    NON_VALUE_NODES = {":", ";", "important", "comment", "property_name"}

    def __init__(self):
        super().__init__("css")
        logger.debug("CSS parser initialized")

    def parse(self, css: str) -> ParseResult:
        """
        Parse CSS text.

        Args:
            css: Stylesheet source

        Returns:
            ParseResult with top-level rules and all comments
        """
        return self.parse_source(css)

    def build_result(self, tree: tree_sitter.Tree, source: bytes) -> ParseResult:
        result = ParseResult(
            rules=self._extract_rules(tree, source),
            comments=self._extract_comments(tree, source),
        )

        logger.debug(
            f"Extracted {len(result.rules)} rules and {len(result.comments)} comments"
        )
        return result

    def _extract_rules(self, tree: tree_sitter.Tree, source: bytes) -> List[CssRule]:
        """Extract top-level rule sets (rules nested in at-rules are skipped)"""
        rules = []

        for rule_node in self.find_children_by_type(tree.root_node, "rule_set"):
            selectors_node = self.find_child_by_type(rule_node, "selectors")
            block_node = self.find_child_by_type(rule_node, "block")
            if not selectors_node or not block_node:
                continue

            selector = normalize_selector(self.get_node_text(selectors_node, source))
            if not selector:
                continue

            declarations = []
            for decl_node in self.find_children_by_type(block_node, "declaration"):
                declaration = self._extract_declaration(decl_node, source)
                if declaration is not None:
                    declarations.append(declaration)

            rules.append(CssRule(selector=selector, declarations=declarations))

        return rules

    def _extract_declaration(
        self,
        decl_node: tree_sitter.Node,
        source: bytes
    ) -> Optional[CssDeclaration]:
        """Build a declaration record from a declaration node"""
        property_node = self.find_child_by_type(decl_node, "property_name")
        if not property_node:
            return None

        property_name = self.get_node_text(property_node, source).strip()
        if not property_name:
            return None

        # Everything after the colon up to `!important` or the semicolon
        value_nodes = []
        colon_found = False
        for child in decl_node.children:
            if child.type == ":":
                colon_found = True
                continue
            if colon_found and child.type not in self.NON_VALUE_NODES:
                value_nodes.append(child)

        value = ""
        if value_nodes:
            value = normalize_whitespace(self.get_span_text(
                value_nodes[0].start_byte, value_nodes[-1].end_byte, source
            ))

        return CssDeclaration(
            property=property_name,
            value=value,
            start_line=decl_node.start_point[0] + 1,
        )

    def _extract_comments(self, tree: tree_sitter.Tree, source: bytes) -> List[CssComment]:
        """Extract every `/* */` comment with its line span"""
        comments = []

        for comment_node in self.find_nodes_by_type(tree, ["comment"]):
            text = self.get_node_text(comment_node, source)
            if not text.startswith("/*"):
                continue

            body = text[2:]
            if body.endswith("*/"):
                body = body[:-2]

            comments.append(CssComment(
                text=body,
                start_line=comment_node.start_point[0] + 1,
                end_line=comment_node.end_point[0] + 1,
            ))

        return comments
