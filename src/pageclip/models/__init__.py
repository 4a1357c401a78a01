"""Pageclip configuration and data models."""

from .blocks import BlockType, ContentBlock, InlineSegment, SegmentType
from .config import (
    DEFAULT_CONTENT_SELECTORS,
    DEFAULT_LAZY_ATTRIBUTES,
    DEFAULT_REMOVE_SELECTORS,
    BridgeConfig,
    ClipConfig,
    ExtractionConfig,
    ImageConfig,
    RenderConfig,
)
from .page import ImageCandidate, PageData

__all__ = [
    # Config
    "BridgeConfig",
    "ClipConfig",
    "ExtractionConfig",
    "ImageConfig",
    "RenderConfig",
    "DEFAULT_CONTENT_SELECTORS",
    "DEFAULT_LAZY_ATTRIBUTES",
    "DEFAULT_REMOVE_SELECTORS",
    # Blocks
    "BlockType",
    "ContentBlock",
    "InlineSegment",
    "SegmentType",
    # Page
    "ImageCandidate",
    "PageData",
]
