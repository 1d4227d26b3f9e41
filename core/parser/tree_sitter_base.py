"""
Base Tree-sitter functionality for the stylesheet parser.

Provides grammar loading, source parsing, syntax error collection and
AST traversal utilities used by the CSS parser.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List, Iterator

import tree_sitter

from .base import ParseResult, TreeSitterError

logger = logging.getLogger(__name__)


class TreeSitterBase(ABC):
    """
    Base class for Tree-sitter parsers with common functionality.

    Loads the grammar for a language, parses in-memory source and offers
    AST traversal helpers. Subclasses implement `build_result`.
    """

    # Grammar packages by language name
    LANGUAGE_MODULES = {
        "css": "tree_sitter_css",
    }

    MAX_SYNTAX_ERRORS = 50  # Maximum syntax errors to report

    def __init__(self, language: str):
        self.language = language
        self.parser = tree_sitter.Parser()

        try:
            self._setup_language()
        except TreeSitterError:
            raise
        except Exception as e:
            logger.error(f"Failed to setup {language} parser: {e}")
            raise TreeSitterError(f"Cannot initialize {language} parser: {e}") from e

    def _setup_language(self) -> None:
        """Initialize Tree-sitter language for this parser"""
        if self.language not in self.LANGUAGE_MODULES:
            raise TreeSitterError(f"Unsupported language: {self.language}")

        module_name = self.LANGUAGE_MODULES[self.language]

        try:
            language_module = __import__(module_name)
        except ImportError as e:
            raise TreeSitterError(
                f"Tree-sitter language module '{module_name}' not installed. "
                f"Install with: pip install {module_name.replace('_', '-')}"
            ) from e

        # module.language() returns a PyCapsule that needs wrapping
        self.tree_sitter_language = tree_sitter.Language(language_module.language())
        self.parser.language = self.tree_sitter_language
        logger.debug(f"Successfully loaded {self.language} Tree-sitter language")

    def parse_source(self, content: str) -> ParseResult:
        """
        Parse source text and build a result with syntax error information.

        Args:
            content: Source text

        Returns:
            ParseResult populated by `build_result`
        """
        start = time.perf_counter()
        source = content.encode("utf-8")

        tree = self.parser.parse(source)
        result = self.build_result(tree, source)

        for error in self._extract_syntax_errors(tree, source):
            result.add_syntax_error(error)

        result.parse_time = time.perf_counter() - start
        result.source_size = len(source)

        logger.debug(
            f"Parsed {result.source_size} bytes of {self.language} in "
            f"{result.parse_time * 1000:.1f}ms with {len(result.syntax_errors)} syntax errors"
        )

        return result

    @abstractmethod
    def build_result(self, tree: tree_sitter.Tree, source: bytes) -> ParseResult:
        """Extract language records from the AST"""
        pass

    def _extract_syntax_errors(
        self,
        tree: tree_sitter.Tree,
        source: bytes
    ) -> List[Dict[str, Any]]:
        """
        Extract syntax errors from Tree-sitter AST.

        Args:
            tree: Tree-sitter AST
            source: Encoded source

        Returns:
            List of syntax error dictionaries
        """
        errors: List[Dict[str, Any]] = []

        if not tree.root_node.has_error:
            return errors

        for node in self.walk_tree(tree):
            if len(errors) >= self.MAX_SYNTAX_ERRORS:
                break

            if node.type == "ERROR" or node.is_missing:
                errors.append({
                    "type": "SYNTAX_ERROR" if node.type == "ERROR" else "MISSING_NODE",
                    "line": node.start_point[0] + 1,
                    "column": node.start_point[1],
                    "text": self.get_node_text(node, source)[:200],
                    "parent_type": node.parent.type if node.parent else None,
                })

        return errors

    def walk_tree(self, tree: tree_sitter.Tree) -> Iterator[tree_sitter.Node]:
        """
        Walk Tree-sitter AST depth-first.

        Uses an explicit stack so deeply nested sources cannot exhaust
        the interpreter recursion limit.

        Args:
            tree: Tree-sitter AST

        Yields:
            AST nodes in depth-first order
        """
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_nodes_by_type(
        self,
        tree: tree_sitter.Tree,
        node_types: List[str]
    ) -> List[tree_sitter.Node]:
        """
        Find all nodes of specified types.

        Args:
            tree: Tree-sitter AST
            node_types: List of node type names to find

        Returns:
            List of matching nodes in document order
        """
        return [node for node in self.walk_tree(tree) if node.type in node_types]

    def get_node_text(self, node: tree_sitter.Node, source: bytes) -> str:
        """
        Get text content of a Tree-sitter node.

        Tree-sitter reports byte offsets, so slicing happens on the encoded
        source before decoding.
        """
        return self.get_span_text(node.start_byte, node.end_byte, source)

    def get_span_text(self, start_byte: int, end_byte: int, source: bytes) -> str:
        """Decode a byte span of the source"""
        return source[start_byte:end_byte].decode("utf-8", errors="replace")

    def find_child_by_type(
        self,
        node: tree_sitter.Node,
        child_type: str
    ) -> Optional[tree_sitter.Node]:
        """
        Find first child node of specified type.

        Args:
            node: Parent node
            child_type: Type of child to find

        Returns:
            First matching child node or None
        """
        for child in node.children:
            if child.type == child_type:
                return child
        return None

    def find_children_by_type(
        self,
        node: tree_sitter.Node,
        child_type: str
    ) -> List[tree_sitter.Node]:
        """Find all child nodes of specified type"""
        return [child for child in node.children if child.type == child_type]
