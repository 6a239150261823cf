"""
MDX to Markdown conversion.

This is a lossy, regex-based best effort and NOT a parser. Known limits:
- nested components of the same name are cut at the first closing tag;
- multi-line `export` blocks only lose their first line;
- any `{...}` in prose or inline code is removed as if it were an expression.

Malformed input never raises; the function always returns a string.
"""

import re

_IMPORT_LINE = re.compile(r"""^import\s+(?:.*?\s+from\s+)?['"][^'"\n]*['"][ \t]*;?[ \t]*$""", re.MULTILINE)
_EXPORT_LINE = re.compile(r"^export\s.*$", re.MULTILINE)
_PAIRED_COMPONENT = re.compile(r"<([A-Z][A-Za-z0-9.]*)[^>]*>[\s\S]*?</\1>")
_SELF_CLOSING_COMPONENT = re.compile(r"<[A-Z][A-Za-z0-9.]*[^>]*/>")
_EXPRESSION = re.compile(r"\{[^}]*\}")
_COMMENT = re.compile(r"\{/\*[\s\S]*?\*/\}")
_EXTRA_BLANK_LINES = re.compile(r"\n\s*\n\s*\n")

_STEPS = (
    (_IMPORT_LINE, ""),
    (_EXPORT_LINE, ""),
    (_PAIRED_COMPONENT, ""),
    (_SELF_CLOSING_COMPONENT, ""),
    (_EXPRESSION, ""),
    (_COMMENT, ""),
    (_EXTRA_BLANK_LINES, "\n\n"),
)


def transform_content(content: str, is_rich_markup: bool) -> str:
    if not is_rich_markup:
        return content
    for pattern, replacement in _STEPS:
        content = pattern.sub(replacement, content)
    return content.strip()
