"""Markdown parsing for pageclip (Markdown to content blocks)."""

from .inline import INLINE_PATTERNS, segment_inline
from .markdown import MarkdownParser, parse_markdown

__all__ = [
    "INLINE_PATTERNS",
    "MarkdownParser",
    "parse_markdown",
    "segment_inline",
]
