"""Page-level records produced by extraction."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ImageCandidate:
    """An image that survived placeholder and size filtering."""

    url: str
    width: Optional[int] = None
    lazy: bool = False


@dataclass
class PageData:
    """
    Everything clipped from a single page.

    Attributes:
        title: Page title (Open Graph, Twitter card, then <title>)
        url: Page URL
        description: Page description from meta tags
        banner_image: Preferred banner image URL (og:image or video thumbnail)
        images: Absolute URLs of candidate images, deduplicated
        body_markdown: Main content rendered as Markdown
    """

    title: str = ""
    url: str = ""
    description: str = ""
    banner_image: Optional[str] = None
    images: list[str] = field(default_factory=list)
    body_markdown: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase payload exchanged over the bridge."""
        return {
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "ogImage": self.banner_image,
            "images": list(self.images),
            "bodyMarkdown": self.body_markdown,
        }
