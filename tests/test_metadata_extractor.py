"""
Unit tests for comment annotation extraction.

Tests tag parsing and the adjacency rule pairing comments with declarations.
"""

from core.parser.base import CssComment
from core.parser.metadata import (
    NO_METADATA,
    CommentMetadata,
    extract_metadata,
    index_annotated_comments,
    parse_annotations,
)


class TestParseAnnotations:
    """Test tag parsing from comment text"""

    def test_description_only(self):
        """Test a lone description tag"""
        metadata = parse_annotations(" @description Primary brand color ")

        assert metadata == CommentMetadata(description="Primary brand color")

    def test_description_and_deprecated(self):
        """Test both tags; each runs to the next tag"""
        metadata = parse_annotations(
            " @description Old accent @deprecated Use --color-accent instead "
        )

        assert metadata.description == "Old accent"
        assert metadata.deprecated is True
        assert metadata.deprecated_description == "Use --color-accent instead"

    def test_deprecated_before_description(self):
        """Test tag order does not matter"""
        metadata = parse_annotations("@deprecated gone soon @description Spacing unit")

        assert metadata.description == "Spacing unit"
        assert metadata.deprecated_description == "gone soon"

    def test_bare_deprecated_tag(self):
        """Test deprecated without text still marks the property"""
        metadata = parse_annotations(" @deprecated ")

        assert metadata.deprecated is True
        assert metadata.deprecated_description is None
        assert metadata.description is None

    def test_empty_description(self):
        """Test empty description is None"""
        metadata = parse_annotations("@description")

        assert metadata.description is None
        assert metadata.deprecated is False

    def test_doc_block_gutters_are_stripped(self):
        """Test multi-line doc comments fold into one line"""
        text = "*\n   * @description Text color used\n   * on dark surfaces\n   "
        metadata = parse_annotations(text)

        assert metadata.description == "Text color used on dark surfaces"

    def test_untagged_comment(self):
        """Test comments without tags carry no metadata"""
        assert parse_annotations(" just a note ") is NO_METADATA


class TestExtractMetadata:
    """Test pairing comments with declaration lines"""

    def test_comment_on_previous_line(self):
        """Test the comment ending right above the declaration applies"""
        comments = [CssComment(text=" @description Base ", start_line=2, end_line=2)]
        annotated = index_annotated_comments(comments)

        metadata = extract_metadata(annotated, declaration_line=3)

        assert metadata.description == "Base"

    def test_non_adjacent_comment_is_ignored(self):
        """Test a blank line between comment and declaration breaks the link"""
        comments = [CssComment(text=" @description Base ", start_line=2, end_line=2)]
        annotated = index_annotated_comments(comments)

        assert extract_metadata(annotated, declaration_line=4) is NO_METADATA

    def test_same_line_comment_is_ignored(self):
        """Test a comment on the declaration's own line does not apply"""
        comments = [CssComment(text=" @description Base ", start_line=3, end_line=3)]
        annotated = index_annotated_comments(comments)

        assert extract_metadata(annotated, declaration_line=3) is NO_METADATA

    def test_multiline_comment_uses_end_line(self):
        """Test adjacency is measured from the comment's last line"""
        comments = [CssComment(text="\n * @description Gap\n ", start_line=1, end_line=3)]
        annotated = index_annotated_comments(comments)

        assert extract_metadata(annotated, declaration_line=4).description == "Gap"
        assert extract_metadata(annotated, declaration_line=2) is NO_METADATA

    def test_untagged_comments_are_not_indexed(self):
        """Test plain comments never shadow annotations"""
        comments = [
            CssComment(text=" @description Tagged ", start_line=1, end_line=1),
            CssComment(text=" plain ", start_line=5, end_line=5),
        ]

        annotated = index_annotated_comments(comments)

        assert list(annotated) == [1]

    def test_last_comment_on_line_wins(self):
        """Test two annotated comments ending on one line"""
        comments = [
            CssComment(text=" @description First ", start_line=1, end_line=1),
            CssComment(text=" @description Second ", start_line=1, end_line=1),
        ]
        annotated = index_annotated_comments(comments)

        assert extract_metadata(annotated, declaration_line=2).description == "Second"
