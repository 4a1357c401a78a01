"""Structured content blocks produced by the Markdown parser."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SegmentType(str, Enum):
    """Inline styles a segment can carry."""

    TEXT = "text"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"


class BlockType(str, Enum):
    """Structural kinds of content block."""

    HEADING = "heading"
    TEXT = "text"
    UNORDERED_ITEM = "unordered-item"
    ORDERED_ITEM = "ordered-item"
    TASK_ITEM = "task-item"
    QUOTE = "quote"
    RULE = "rule"
    CODE = "code"
    BLANK = "blank"


@dataclass(frozen=True)
class InlineSegment:
    """One styled or plain span of text within a block."""

    type: SegmentType
    text: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type.value, "text": self.text}


@dataclass
class ContentBlock:
    """
    One structural unit of a parsed document.

    Attributes:
        type: Block kind
        segments: Inline spans (empty for rules and code blocks)
        heading_level: 1-6 for headings, None otherwise
        language: Highlight language for code blocks
        checked: Checkbox state for task items
        code_lines: Raw lines of a code block
    """

    type: BlockType
    segments: list[InlineSegment] = field(default_factory=list)
    heading_level: Optional[int] = None
    language: Optional[str] = None
    checked: Optional[bool] = None
    code_lines: list[str] = field(default_factory=list)

    @property
    def plain_text(self) -> str:
        """Text of the block with inline styling dropped."""
        if self.type == BlockType.CODE:
            return "\n".join(self.code_lines)
        return "".join(segment.text for segment in self.segments)

    def to_dict(self) -> dict[str, Any]:
        """Convert block to dictionary for serialization."""
        data: dict[str, Any] = {
            "type": self.type.value,
            "segments": [segment.to_dict() for segment in self.segments],
        }
        if self.heading_level is not None:
            data["heading_level"] = self.heading_level
        if self.language is not None:
            data["language"] = self.language
        if self.checked is not None:
            data["checked"] = self.checked
        if self.type == BlockType.CODE:
            data["code_lines"] = list(self.code_lines)
        return data
