"""
Markdown rendering for completion documentation and hover content.
"""

from typing import List, Optional

from ..models.variables import VariableDetails


def format_deprecation(deprecated: bool, deprecated_description: Optional[str]) -> Optional[str]:
    """Inline-code deprecation notice, or None when not deprecated"""
    if not deprecated:
        return None
    if deprecated_description:
        return f"`[deprecated]: {deprecated_description}`"
    return "`[deprecated]`"


def format_completion_theme_block(theme_name: str, raw_value: str, resolved_value: str) -> str:
    """
    One theme's section of a completion's documentation.

    The raw value is shown above the resolved one only when substitution
    changed it.
    """
    lines = [f"**`{theme_name}:`**", ""]
    if resolved_value != raw_value:
        lines.extend([raw_value, ""])
    lines.append(resolved_value)
    return "\n".join(lines)


def join_sections(sections: List[Optional[str]]) -> str:
    return "\n\n".join(section for section in sections if section)


def _css_fence(value: str) -> str:
    return "\n".join(["```css", value, "```"])


def format_hover_markdown(details: VariableDetails) -> str:
    """
    Render hover content for a property.

    Sections: description, deprecation notice, then per theme the theme
    name with the declared value and, if different, the resolved value.
    """
    theme_blocks = []
    for theme in details.themes:
        block = [f"**{theme.theme_name}**", _css_fence(theme.original_value)]
        if theme.value != theme.original_value:
            block.append(_css_fence(theme.value))
        theme_blocks.append("\n".join(block))

    return join_sections([
        details.description,
        format_deprecation(details.deprecated, details.deprecated_description),
        "\n\n".join(theme_blocks),
    ])
