"""
Tree-sitter based stylesheet parsing.

Extracts top-level rules, declarations and comments from CSS source and
reads `@description` / `@deprecated` annotations from comments.

Example:
    from core.parser import CSSParser

    result = CSSParser().parse(":root { --gap: 4px; }")
    for rule in result.rules_for_selector(":root"):
        print([d.property for d in rule.custom_properties()])
"""

from .base import CssComment, CssDeclaration, CssRule, ParseResult, ParseError, TreeSitterError
from .css_parser import CSSParser
from .metadata import CommentMetadata, extract_metadata, index_annotated_comments, parse_annotations

__all__ = [
    "CSSParser",
    "CssComment",
    "CssDeclaration",
    "CssRule",
    "ParseResult",
    "ParseError",
    "TreeSitterError",
    "CommentMetadata",
    "extract_metadata",
    "index_annotated_comments",
    "parse_annotations",
]
