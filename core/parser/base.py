"""
Parse result structures and error types for the stylesheet parser.

Defines the rule, declaration and comment records extracted from CSS source,
along with the parse result container and parser exceptions.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Iterator
import re


_WHITESPACE_RUN = re.compile(r"\s+")
_SELECTOR_SEPARATOR = re.compile(r"\s*([,>+~])\s*")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and trim both ends"""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def normalize_selector(selector: str) -> str:
    """
    Canonical selector text used to compare theme selectors with rules.

    Whitespace runs collapse and spaces around list separators and
    combinators are dropped, so `.a , .b` and `.a,.b` compare equal.
    """
    return _SELECTOR_SEPARATOR.sub(r"\1", normalize_whitespace(selector))


@dataclass(frozen=True)
class CssComment:
    """A `/* ... */` comment with the text between the delimiters"""
    text: str
    start_line: int  # 1-based
    end_line: int  # 1-based


@dataclass(frozen=True)
class CssDeclaration:
    """A single `property: value` declaration inside a rule block"""
    property: str
    value: str
    start_line: int  # 1-based

    @property
    def is_custom_property(self) -> bool:
        return self.property.startswith("--")


@dataclass(frozen=True)
class CssRule:
    """A top-level qualified rule: canonical selector text plus its declarations"""
    selector: str
    declarations: List[CssDeclaration]

    def custom_properties(self) -> Iterator[CssDeclaration]:
        """Yield custom property declarations in source order"""
        for declaration in self.declarations:
            if declaration.is_custom_property:
                yield declaration


@dataclass
class ParseResult:
    """
    Result of parsing a stylesheet.

    Contains the top-level rules and every comment found in the source,
    along with timing and syntax error information.
    """
    rules: List[CssRule] = field(default_factory=list)
    comments: List[CssComment] = field(default_factory=list)

    # Performance metrics
    parse_time: float = 0.0  # Seconds
    source_size: int = 0  # Bytes

    # Error tracking
    syntax_errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if parsing completed without syntax errors"""
        return len(self.syntax_errors) == 0

    def rules_for_selector(self, selector: str) -> List[CssRule]:
        """
        Find rules whose selector text equals the given selector.

        Comparison is plain string equality of canonical selector text, so
        a selector list such as `.a, .b` never matches `.a`.
        """
        wanted = normalize_selector(selector)
        return [rule for rule in self.rules if rule.selector == wanted]

    def add_syntax_error(self, error: Dict[str, Any]) -> None:
        """Add a syntax error"""
        self.syntax_errors.append(error)


# Error types for parser exceptions
class ParseError(Exception):
    """Base class for parsing errors"""
    pass


class TreeSitterError(ParseError):
    """Raised when the Tree-sitter grammar cannot be loaded or used"""
    pass
