"""
Completion and hover payloads.

Pure functions from a schema and the current line to lsprotocol types.
"""

import re
from typing import List, Optional, Tuple

from lsprotocol import types as lsp

from config.defaults import DEFAULT_SETTINGS
from core.models.variables import CompletionEntry
from core.schema.css_schema import CssSchema
from core.schema.formatting import format_hover_markdown

# Characters that open a completion request
TRIGGER_CHARACTERS = DEFAULT_SETTINGS["editor"]["completion_trigger_characters"]

# Text after the last `var(` before the cursor
VAR_COMPLETION_PATTERN = re.compile(r".*var\(([^)]+)?$")

PROPERTY_TOKEN_PATTERN = re.compile(r"--[A-Za-z0-9_-]+")


def completion_prefix(line: str, character: int) -> Optional[str]:
    """
    Partial property name being typed inside `var(`.

    Returns:
        The partial name ("" right after `var(`), or None outside `var(`
    """
    match = VAR_COMPLETION_PATTERN.match(line[:character])
    if match is None:
        return None
    return (match.group(1) or "").strip()


def property_at(line: str, character: int) -> Optional[Tuple[str, int, int]]:
    """`--name` token touching the cursor as (name, start, end)"""
    for match in PROPERTY_TOKEN_PATTERN.finditer(line):
        if match.start() <= character <= match.end():
            return match.group(0), match.start(), match.end()
    return None


def to_completion_item(entry: CompletionEntry) -> lsp.CompletionItem:
    return lsp.CompletionItem(
        label=entry.label,
        kind=lsp.CompletionItemKind.Variable,
        detail=entry.detail,
        documentation=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=entry.documentation),
        tags=[lsp.CompletionItemTag.Deprecated] if entry.deprecated else None,
    )


def get_completions(schema: CssSchema, line: str, character: int) -> lsp.CompletionList:
    prefix = completion_prefix(line, character)
    items: List[lsp.CompletionItem] = []

    if prefix is not None:
        items = [to_completion_item(entry) for entry in schema.get_completions(prefix)]

    return lsp.CompletionList(is_incomplete=False, items=items)


def get_hover(schema: CssSchema, line: str, position: lsp.Position) -> Optional[lsp.Hover]:
    token = property_at(line, position.character)
    if token is None:
        return None

    name, start, end = token
    details = schema.get_variable_details(name)
    if details is None:
        return None

    return lsp.Hover(
        contents=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=format_hover_markdown(details)),
        range=lsp.Range(
            start=lsp.Position(line=position.line, character=start),
            end=lsp.Position(line=position.line, character=end),
        ),
    )
