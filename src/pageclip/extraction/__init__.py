"""Content extraction for pageclip (DOM to Markdown)."""

from .images import PLACEHOLDER_PATTERN, ImageRankingResolver, parse_srcset
from .locator import ContentLocator
from .page_data import PageDataExtractor, youtube_video_id
from .protocols import ComputedStyle, PageAccessor
from .renderer import MarkdownRenderer
from .sanitizer import Sanitizer
from .soup_page import SoupPage
from .urls import is_data_uri, resolve_url

__all__ = [
    # Protocols
    "ComputedStyle",
    "PageAccessor",
    # Implementations
    "ContentLocator",
    "ImageRankingResolver",
    "MarkdownRenderer",
    "PageDataExtractor",
    "Sanitizer",
    "SoupPage",
    # Helpers
    "PLACEHOLDER_PATTERN",
    "is_data_uri",
    "parse_srcset",
    "resolve_url",
    "youtube_video_id",
]
