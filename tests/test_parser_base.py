"""
Unit tests for parser base records and Tree-sitter setup.
"""

import pytest

from core.parser.base import (
    CssDeclaration,
    CssRule,
    ParseResult,
    TreeSitterError,
    normalize_selector,
)
from core.parser.tree_sitter_base import TreeSitterBase


class RecordingParser(TreeSitterBase):
    """Minimal concrete parser"""

    def build_result(self, tree, source):
        return ParseResult()


class TestParseResult:
    """Test ParseResult functionality"""

    def test_success_tracks_syntax_errors(self):
        """Test success flag"""
        result = ParseResult()
        assert result.success

        result.add_syntax_error({"type": "SYNTAX_ERROR", "line": 1})
        assert not result.success

    def test_rules_for_selector(self):
        """Test selectors compare by canonical text"""
        result = ParseResult(rules=[
            CssRule(selector=".a,.b", declarations=[]),
            CssRule(selector=".a", declarations=[]),
        ])

        assert len(result.rules_for_selector(".a ,  .b")) == 1
        assert len(result.rules_for_selector(".a")) == 1
        assert result.rules_for_selector(".b") == []


class TestNormalizeSelector:
    """Test canonical selector text"""

    @pytest.mark.parametrize("selector,expected", [
        (".a ,  .b", ".a,.b"),
        (".a,.b", ".a,.b"),
        (".a > .b", ".a>.b"),
        (".a  +\n.b ~ .c", ".a+.b~.c"),
        (".theme-dark   .inner", ".theme-dark .inner"),
        ("  :root  ", ":root"),
    ])
    def test_normalize_selector(self, selector, expected):
        """Test spacing around separators and combinators"""
        assert normalize_selector(selector) == expected


class TestCssRecords:
    """Test rule and declaration records"""

    def test_custom_properties_filter(self):
        """Test only -- declarations are custom properties"""
        rule = CssRule(
            selector=":root",
            declarations=[
                CssDeclaration(property="--a", value="1", start_line=2),
                CssDeclaration(property="color", value="red", start_line=3),
            ],
        )

        assert [d.property for d in rule.custom_properties()] == ["--a"]


class TestTreeSitterBase:
    """Test grammar loading"""

    def test_unsupported_language(self):
        """Test unknown languages raise TreeSitterError"""
        with pytest.raises(TreeSitterError):
            RecordingParser("cobol")

    def test_base_is_abstract(self):
        """Test the base cannot be instantiated without build_result"""
        with pytest.raises(TypeError):
            TreeSitterBase("css")

    def test_parse_source_metrics(self):
        """Test size and timing are filled in after build_result"""
        result = RecordingParser("css").parse_source(":root{}")

        assert result.source_size == len(":root{}")
        assert result.parse_time >= 0
