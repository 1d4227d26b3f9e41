"""
Comment annotations for custom properties.

A comment documents a declaration only when it ends on the line right
before the declaration starts. Recognized tags are `@description` and
`@deprecated`; each tag's text runs to the next tag or the end of the
comment.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional

from .base import CssComment

DESCRIPTION_TAG = "@description"
DEPRECATED_TAG = "@deprecated"

_TAG_PATTERN = re.compile(r"@(?:description|deprecated)")


@dataclass(frozen=True)
class CommentMetadata:
    """Annotations read from a single comment"""
    description: Optional[str] = None
    deprecated: bool = False
    deprecated_description: Optional[str] = None


NO_METADATA = CommentMetadata()


def has_annotation(text: str) -> bool:
    return DESCRIPTION_TAG in text or DEPRECATED_TAG in text


def index_annotated_comments(comments: Iterable[CssComment]) -> Dict[int, CssComment]:
    """
    Index annotated comments by the line they end on.

    Comments without a recognized tag are dropped. When two annotated
    comments end on the same line the later one wins.
    """
    return {
        comment.end_line: comment
        for comment in comments
        if has_annotation(comment.text)
    }


def _clean_tag_text(text: str) -> Optional[str]:
    # Drop doc-block gutters (` * `) and fold line breaks
    lines = [line.strip().lstrip("*").strip() for line in text.splitlines()]
    cleaned = " ".join(line for line in lines if line)
    return cleaned or None


def _tag_text(text: str, tag: str) -> Optional[str]:
    start = text.find(tag)
    if start == -1:
        return None

    value_start = start + len(tag)
    next_tag = _TAG_PATTERN.search(text, value_start)
    value_end = next_tag.start() if next_tag else len(text)
    return _clean_tag_text(text[value_start:value_end])


def parse_annotations(text: str) -> CommentMetadata:
    """
    Read `@description` and `@deprecated` from comment text.

    Args:
        text: Comment body without the `/*` and `*/` delimiters

    Returns:
        CommentMetadata; `deprecated` is set whenever the tag is present,
        even if it carries no text
    """
    if not has_annotation(text):
        return NO_METADATA

    return CommentMetadata(
        description=_tag_text(text, DESCRIPTION_TAG),
        deprecated=DEPRECATED_TAG in text,
        deprecated_description=_tag_text(text, DEPRECATED_TAG),
    )


def extract_metadata(
    annotated_comments: Mapping[int, CssComment],
    declaration_line: int
) -> CommentMetadata:
    """
    Find the metadata for a declaration starting on `declaration_line`.

    Args:
        annotated_comments: Output of `index_annotated_comments`
        declaration_line: 1-based start line of the declaration

    Returns:
        Metadata from the comment ending exactly one line above, or
        empty metadata when there is none
    """
    comment = annotated_comments.get(declaration_line - 1)
    if comment is None:
        return NO_METADATA
    return parse_annotations(comment.text)
