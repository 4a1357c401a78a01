"""
pageclip - Clip web pages to Markdown and parse Markdown into structured blocks.

Usage:
    from pageclip import PageDataExtractor, SoupPage, parse_markdown

    page = SoupPage(html, "https://blog.example.com/post")
    page_data = PageDataExtractor().extract(page)

    for block in parse_markdown(page_data.body_markdown):
        print(block.type, block.plain_text)
"""

__version__ = "1.0.0"

from .extraction import (
    ContentLocator,
    ImageRankingResolver,
    MarkdownRenderer,
    PageAccessor,
    PageDataExtractor,
    Sanitizer,
    SoupPage,
)
from .models.blocks import BlockType, ContentBlock, InlineSegment, SegmentType
from .models.config import BridgeConfig, ClipConfig, ExtractionConfig, ImageConfig, RenderConfig
from .models.page import ImageCandidate, PageData
from .parsing import MarkdownParser, parse_markdown, segment_inline

__all__ = [
    "__version__",
    # Extraction
    "ContentLocator",
    "ImageRankingResolver",
    "MarkdownRenderer",
    "PageAccessor",
    "PageDataExtractor",
    "Sanitizer",
    "SoupPage",
    # Parsing
    "MarkdownParser",
    "parse_markdown",
    "segment_inline",
    # Models
    "BlockType",
    "ContentBlock",
    "ImageCandidate",
    "InlineSegment",
    "PageData",
    "SegmentType",
    # Config
    "BridgeConfig",
    "ClipConfig",
    "ExtractionConfig",
    "ImageConfig",
    "RenderConfig",
]
