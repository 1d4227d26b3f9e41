"""
`var()` reference scanning and substitution.

A reference is `var(--name)` or `var(--name, fallback)`. Names are
case-sensitive and made of ASCII letters, digits, `-` and `_`. The whole
`var(...)` span, fallback included, is replaced as one unit.
"""

import re
from dataclasses import dataclass
from typing import List, Mapping

VAR_REFERENCE_PATTERN = re.compile(r"var\(\s*(--[A-Za-z0-9_-]+)\s*")


@dataclass(frozen=True)
class VarReference:
    """A `var()` occurrence inside a value"""
    name: str
    start: int
    end: int  # exclusive, just past the closing parenthesis
    has_fallback: bool = False


def _closing_paren(value: str, start: int) -> int:
    """Index of the parenthesis closing the group open at `start`, or -1"""
    depth = 1
    for index in range(start, len(value)):
        char = value[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def find_var_references(value: str) -> List[VarReference]:
    """
    Find every `var()` reference in a value, outer references first.

    References nested in another reference's fallback are reported too.
    Malformed occurrences (`var(--a b)`, unbalanced parentheses) are skipped.
    """
    references = []

    for match in VAR_REFERENCE_PATTERN.finditer(value):
        after_name = match.end()
        if after_name >= len(value):
            continue

        if value[after_name] == ")":
            references.append(VarReference(match.group(1), match.start(), after_name + 1))
        elif value[after_name] == ",":
            close = _closing_paren(value, after_name + 1)
            if close != -1:
                references.append(
                    VarReference(match.group(1), match.start(), close + 1, has_fallback=True)
                )

    return references


def referenced_names(value: str) -> List[str]:
    """Unique referenced property names in first-occurrence order"""
    names: List[str] = []
    for reference in find_var_references(value):
        if reference.name not in names:
            names.append(reference.name)
    return names


def substitute_references(value: str, replacements: Mapping[str, str]) -> str:
    """
    Replace references whose name is in `replacements`.

    References without a replacement are kept verbatim. A reference inside
    an already replaced span is dropped together with that span.
    """
    parts = []
    cursor = 0

    for reference in find_var_references(value):
        if reference.start < cursor or reference.name not in replacements:
            continue
        parts.append(value[cursor:reference.start])
        parts.append(replacements[reference.name])
        cursor = reference.end

    parts.append(value[cursor:])
    return "".join(parts)
