"""Inline styling: split a line into styled and plain segments."""

import re
from typing import Optional

from ..models.blocks import InlineSegment, SegmentType

# Checked in this order when two matches start at the same position.
# Links keep only their display text.
INLINE_PATTERNS: list[tuple[re.Pattern[str], SegmentType]] = [
    (re.compile(r"`([^`]+)`"), SegmentType.CODE),
    (re.compile(r"\[([^\]]+)\]\(([^)]+)\)"), SegmentType.TEXT),
    (re.compile(r"\*\*([^*]+)\*\*"), SegmentType.BOLD),
    (re.compile(r"__([^_]+)__"), SegmentType.BOLD),
    (re.compile(r"\*([^*]+)\*"), SegmentType.ITALIC),
    (re.compile(r"_([^_]+)_"), SegmentType.ITALIC),
]


def segment_inline(text: str) -> list[InlineSegment]:
    """
    Split a line into inline segments.

    Repeatedly takes the earliest match among the inline patterns, emits
    the literal text before it and the match's captured text, and
    continues after the match. Matched spans are not scanned again.

    Args:
        text: One line of Markdown, without block prefix

    Returns:
        Non-empty list of segments ([text:""] for an empty line)
    """
    segments: list[InlineSegment] = []
    position = 0

    while position < len(text):
        earliest: Optional[re.Match[str]] = None
        earliest_type = SegmentType.TEXT

        for pattern, segment_type in INLINE_PATTERNS:
            match = pattern.search(text, position)
            if match and (earliest is None or match.start() < earliest.start()):
                earliest = match
                earliest_type = segment_type

        if earliest is None:
            segments.append(InlineSegment(SegmentType.TEXT, text[position:]))
            break

        if earliest.start() > position:
            segments.append(InlineSegment(SegmentType.TEXT, text[position : earliest.start()]))
        segments.append(InlineSegment(earliest_type, earliest.group(1)))
        position = earliest.end()

    return segments or [InlineSegment(SegmentType.TEXT, text)]
