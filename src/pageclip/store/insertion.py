"""Materializing content blocks as document-store line items."""

import logging
from typing import Optional

from ..models.blocks import BlockType, ContentBlock
from ..parsing.markdown import MarkdownParser
from .protocols import LineItem, Record

logger = logging.getLogger(__name__)

# Block type -> the store's native line-item type
NATIVE_TYPES: dict[BlockType, str] = {
    BlockType.HEADING: "heading",
    BlockType.TEXT: "text",
    BlockType.BLANK: "text",
    BlockType.UNORDERED_ITEM: "ulist",
    BlockType.ORDERED_ITEM: "olist",
    BlockType.TASK_ITEM: "task",
    BlockType.QUOTE: "quote",
    BlockType.RULE: "br",
    BlockType.CODE: "block",
}

CODE_LINE_TYPE = "text"


def native_type(block: ContentBlock) -> str:
    """Return the store line-item type for a block."""
    return NATIVE_TYPES.get(block.type, "text")


async def insert_blocks(record: Record, blocks: list[ContentBlock]) -> int:
    """
    Append blocks to a record body, in order.

    Code blocks become a "block" item with one text child per code line.
    A block that fails to insert is logged and skipped; the rest still go in.

    Args:
        record: Target record
        blocks: Parsed content blocks

    Returns:
        Number of top-level items created
    """
    last_item: Optional[LineItem] = None
    created = 0

    for block in blocks:
        try:
            item = await record.create_line_item(None, last_item, native_type(block))
            if item is None:
                continue
            last_item = item
            created += 1

            if block.type == BlockType.HEADING and block.heading_level:
                item.set_heading_size(block.heading_level)

            if block.type == BlockType.CODE:
                await _fill_code_block(record, item, block)
            else:
                item.set_segments([segment.to_dict() for segment in block.segments])
        except Exception as e:
            logger.error(f"Failed to create {block.type.value} line item: {e}")

    return created


async def _fill_code_block(record: Record, item: LineItem, block: ContentBlock) -> None:
    if block.language:
        item.set_highlight_language(block.language)
    item.set_segments([])

    last_child: Optional[LineItem] = None
    for line in block.code_lines:
        child = await record.create_line_item(item, last_child, CODE_LINE_TYPE)
        if child is not None:
            child.set_segments([{"type": "text", "text": line}])
            last_child = child


async def insert_markdown(record: Record, markdown: str, parser: Optional[MarkdownParser] = None) -> int:
    """
    Parse Markdown and append the resulting blocks to a record.

    Args:
        record: Target record
        markdown: Markdown body
        parser: Markdown parser (uses default if None)

    Returns:
        Number of top-level items created
    """
    blocks = (parser or MarkdownParser()).parse(markdown)
    logger.debug(f"Inserting {len(blocks)} blocks into record {record.guid}")
    return await insert_blocks(record, blocks)
