"""Assembly of the clip payload for a page."""

import logging
import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from ..models.config import ClipConfig
from ..models.page import PageData
from .images import ImageRankingResolver
from .locator import ContentLocator
from .protocols import PageAccessor
from .renderer import MarkdownRenderer
from .sanitizer import Sanitizer

logger = logging.getLogger(__name__)

YOUTUBE_HOST_PATTERN = re.compile(r"youtube\.com|youtu\.be")
YOUTUBE_THUMBNAIL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

_SHORT_PATH_RE = re.compile(r"^/([a-zA-Z0-9_-]{11})")
_EMBED_PATH_RE = re.compile(r"/embed/([a-zA-Z0-9_-]{11})")


def youtube_video_id(url: str) -> Optional[str]:
    """
    Extract a YouTube video id from a watch, short or embed URL.

    Args:
        url: Page URL

    Returns:
        The 11-character video id, or None
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    video_ids = parse_qs(parsed.query).get("v")
    if video_ids and video_ids[0]:
        return video_ids[0]

    for pattern in (_SHORT_PATH_RE, _EMBED_PATH_RE):
        match = pattern.search(parsed.path)
        if match:
            return match.group(1)
    return None


class PageDataExtractor:
    """
    Extracts everything needed to clip a page.

    Runs the content pipeline (locate, sanitize, render) for the body and
    reads title, description and banner image from meta tags.

    Example:
        extractor = PageDataExtractor()
        page_data = extractor.extract(SoupPage(html, url))
    """

    def __init__(self, config: Optional[ClipConfig] = None):
        """
        Initialize the extractor.

        Args:
            config: Clip settings (uses defaults if None)
        """
        self._config = config or ClipConfig()
        self._resolver = ImageRankingResolver(self._config.images)
        self._locator = ContentLocator(self._config.extraction)

    def extract(self, page: PageAccessor) -> PageData:
        """
        Extract page data.

        Args:
            page: Page snapshot

        Returns:
            PageData; fields that cannot be extracted are left empty
        """
        og_image = page.get_meta("og:image") or page.get_meta("twitter:image")

        return PageData(
            title=page.get_meta("og:title") or page.get_meta("twitter:title") or page.title or "",
            url=page.url,
            description=page.get_meta("og:description") or page.get_meta("description") or "",
            banner_image=self._banner_image(page, og_image),
            images=self._resolver.collect_page_images(
                page.root,
                page.base_url,
                primary_image=og_image,
                natural_width=page.natural_width,
            ),
            body_markdown=self.extract_markdown(page),
        )

    def extract_markdown(self, page: PageAccessor) -> str:
        """
        Render the page's main content to Markdown.

        Args:
            page: Page snapshot

        Returns:
            Markdown string, or "" if extraction failed
        """
        try:
            content = self._locator.locate(page.root)
            sanitizer = Sanitizer(self._config.extraction, style_of=page.computed_style)
            clean = sanitizer.clean(content)
            renderer = MarkdownRenderer(page.base_url, self._resolver, self._config.render)
            return renderer.render(clean)
        except Exception as e:
            logger.error(f"Failed to extract Markdown from {page.base_url}: {e}")
            return ""

    @staticmethod
    def _banner_image(page: PageAccessor, og_image: Optional[str]) -> Optional[str]:
        try:
            host = urlparse(page.url).hostname or ""
        except ValueError as e:
            logger.debug(f"Unparseable page URL {page.url!r}: {e}")
            return og_image
        if YOUTUBE_HOST_PATTERN.search(host):
            video_id = youtube_video_id(page.url)
            if video_id:
                return YOUTUBE_THUMBNAIL.format(video_id=video_id)
            return page.get_meta("og:image")
        return og_image
