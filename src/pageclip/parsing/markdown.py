"""Markdown to content blocks."""

import logging
import re
from typing import Callable, Optional

from ..models.blocks import BlockType, ContentBlock, InlineSegment, SegmentType
from .inline import segment_inline

logger = logging.getLogger(__name__)

FENCE = "```"
DEFAULT_CODE_LANGUAGE = "plaintext"

_RULE_RE = re.compile(r"^(?:(?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$")
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_TASK_RE = re.compile(r"^[-*]\s+\[([ xX])\]\s+(.+)$")
_UNORDERED_RE = re.compile(r"^[-*]\s+(.+)$")
_ORDERED_RE = re.compile(r"^\d+\.\s+(.+)$")
QUOTE_PREFIX = "> "

Segmenter = Callable[[str], list[InlineSegment]]


class MarkdownParser:
    """
    Line-oriented Markdown parser producing ContentBlocks.

    Every input line outside a fenced code block becomes exactly one
    block; malformed input degrades to plain text blocks. Fence interiors
    are collected verbatim into a single code block.

    Example:
        parser = MarkdownParser()
        for block in parser.parse("# Title\\n\\nSome **bold** text"):
            print(block.type, block.plain_text)
    """

    def __init__(self, segmenter: Optional[Segmenter] = None):
        """
        Initialize the parser.

        Args:
            segmenter: Inline segmenter (uses segment_inline if None)
        """
        self._segment = segmenter or segment_inline

    def parse(self, markdown: str) -> list[ContentBlock]:
        """
        Parse Markdown into blocks.

        Args:
            markdown: Markdown document

        Returns:
            Blocks in document order
        """
        text = markdown.replace("\r\n", "\n").replace("\r", "\n")
        blocks: list[ContentBlock] = []

        in_fence = False
        language = DEFAULT_CODE_LANGUAGE
        code_lines: list[str] = []

        for line in text.split("\n"):
            stripped = line.strip()
            if stripped.startswith(FENCE):
                if in_fence:
                    blocks.append(self._code_block(language, code_lines))
                    code_lines = []
                    in_fence = False
                else:
                    language = stripped[len(FENCE) :].strip() or DEFAULT_CODE_LANGUAGE
                    in_fence = True
                continue

            if in_fence:
                code_lines.append(line)
                continue

            blocks.append(self.parse_line(line))

        if in_fence:
            logger.debug(f"Unterminated {language} fence with {len(code_lines)} lines")
            blocks.append(self._code_block(language, code_lines))

        return blocks

    def parse_line(self, line: str) -> ContentBlock:
        """
        Classify a single line outside a fence.

        Args:
            line: One line of Markdown

        Returns:
            The block for this line
        """
        stripped = line.strip()
        if not stripped:
            return ContentBlock(BlockType.BLANK, [InlineSegment(SegmentType.TEXT, " ")])

        if _RULE_RE.match(stripped):
            return ContentBlock(BlockType.RULE)

        match = _HEADING_RE.match(line)
        if match:
            return ContentBlock(
                BlockType.HEADING,
                self._segment(match.group(2)),
                heading_level=len(match.group(1)),
            )

        match = _TASK_RE.match(line)
        if match:
            return ContentBlock(
                BlockType.TASK_ITEM,
                self._segment(match.group(2)),
                checked=match.group(1) in ("x", "X"),
            )

        match = _UNORDERED_RE.match(line)
        if match:
            return ContentBlock(BlockType.UNORDERED_ITEM, self._segment(match.group(1)))

        match = _ORDERED_RE.match(line)
        if match:
            return ContentBlock(BlockType.ORDERED_ITEM, self._segment(match.group(1)))

        if line.startswith(QUOTE_PREFIX):
            return ContentBlock(BlockType.QUOTE, self._segment(line[len(QUOTE_PREFIX) :]))

        return ContentBlock(BlockType.TEXT, self._segment(line))

    @staticmethod
    def _code_block(language: str, code_lines: list[str]) -> ContentBlock:
        return ContentBlock(BlockType.CODE, language=language, code_lines=list(code_lines))


def parse_markdown(markdown: str) -> list[ContentBlock]:
    """Parse Markdown with the default inline segmenter."""
    return MarkdownParser().parse(markdown)
