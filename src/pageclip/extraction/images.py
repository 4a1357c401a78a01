"""Image source resolution and page image collection."""

import logging
import re
from typing import Callable, Optional, Union

from bs4 import BeautifulSoup, Tag

from ..models.config import ImageConfig
from ..models.page import ImageCandidate
from .urls import is_data_uri, resolve_url

logger = logging.getLogger(__name__)

# URLs that point at spinners, tracking pixels, UI chrome and other non-content images
PLACEHOLDER_PATTERN = re.compile(
    r"placeholder|spinner|spacer|pixel|1x1|blank\.(?:gif|png)|transparent\.(?:gif|png)"
    r"|lazy[-_]?load|avatar|icon|logo|badge|button",
    re.IGNORECASE,
)

_WIDTH_DESCRIPTOR_RE = re.compile(r"(\d+)w")
_DENSITY_DESCRIPTOR_RE = re.compile(r"(\d+(?:\.\d+)?)x")

# Density descriptors are scaled so that 2x outranks 1024w; the score is for comparison only
DENSITY_SCALE = 1000

SRCSET_ATTRIBUTES = ("srcset", "data-srcset")

NaturalWidth = Callable[[Tag], Optional[int]]


def parse_srcset(srcset: str) -> Optional[str]:
    """
    Pick the largest candidate from a srcset value.

    Args:
        srcset: Raw srcset attribute, e.g. "a.jpg 300w, b.jpg 1024w"

    Returns:
        URL of the highest-scoring entry, the first usable URL when no
        entry has a descriptor, or None
    """
    best: Optional[str] = None
    best_score = 0.0

    for entry in srcset.split(","):
        parts = entry.strip().split()
        if not parts:
            continue

        url = parts[0]
        if is_data_uri(url):
            continue

        score = 0.0
        if len(parts) > 1:
            descriptor = parts[-1]
            width_match = _WIDTH_DESCRIPTOR_RE.fullmatch(descriptor)
            density_match = _DENSITY_DESCRIPTOR_RE.fullmatch(descriptor)
            if width_match:
                score = float(width_match.group(1))
            elif density_match:
                score = float(density_match.group(1)) * DENSITY_SCALE

        if best is None or score > best_score:
            best = url
            best_score = score

    return best


class ImageRankingResolver:
    """
    Finds the real asset behind an <img> element.

    Responsive and lazy-loaded markup routinely hides the actual image
    behind a placeholder pixel in ``src``; the resolver checks srcset,
    then the common lazy-loading attributes, then ``src``.

    Example:
        resolver = ImageRankingResolver()
        src = resolver.best_src(img_tag)
        if not resolver.is_placeholder(src):
            ...
    """

    def __init__(self, config: Optional[ImageConfig] = None):
        """
        Initialize the resolver.

        Args:
            config: Image settings (uses defaults if None)
        """
        self._config = config or ImageConfig()

    def best_src(self, img: Tag) -> Optional[str]:
        """
        Return the most likely real source for an image element.

        Args:
            img: <img> element

        Returns:
            The chosen src as written in the page (not yet absolute), or None
        """
        for attr in SRCSET_ATTRIBUTES:
            srcset = img.get(attr)
            if srcset:
                largest = parse_srcset(str(srcset))
                if largest:
                    return largest

        for attr in self._config.lazy_attributes:
            value = str(img.get(attr) or "").strip()
            if value and not is_data_uri(value):
                return value

        src = str(img.get("src") or "").strip()
        if src and not is_data_uri(src):
            return src

        return None

    @staticmethod
    def is_placeholder(url: Optional[str]) -> bool:
        """Return True when a URL is missing, inline, or looks like UI chrome."""
        if not url or is_data_uri(url):
            return True
        return PLACEHOLDER_PATTERN.search(url) is not None

    def is_lazy(self, img: Tag) -> bool:
        """Return True when the element carries a lazy-loading marker."""
        classes = img.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        if any(cls in self._config.lazy_classes for cls in classes):
            return True
        return any(img.has_attr(attr) for attr in self._config.lazy_attributes)

    def collect_image_candidates(
        self,
        root: Union[BeautifulSoup, Tag],
        base_url: str,
        primary_image: Optional[str] = None,
        natural_width: Optional[NaturalWidth] = None,
    ) -> list[ImageCandidate]:
        """
        Collect content images from a page, in document order.

        Args:
            root: Document (or subtree) to scan
            base_url: Base URL for resolving relative sources
            primary_image: Image to list first (e.g. og:image)
            natural_width: Callback giving an image's natural pixel width

        Returns:
            Deduplicated candidates, at most ``max_images`` of them
        """
        limit = self._config.max_images
        candidates: dict[str, ImageCandidate] = {}

        if primary_image:
            primary_url = resolve_url(base_url, primary_image) or primary_image
            candidates[primary_url] = ImageCandidate(url=primary_url)

        for img in root.find_all("img"):
            if len(candidates) >= limit:
                break

            src = self.best_src(img)
            if not src or self.is_placeholder(src):
                continue

            width = natural_width(img) if natural_width else None
            lazy = self.is_lazy(img)
            if width and width < self._config.min_width and not lazy:
                logger.debug(f"Skipping small image {src} ({width}px)")
                continue

            absolute = resolve_url(base_url, src)
            if absolute is None or absolute in candidates:
                continue
            candidates[absolute] = ImageCandidate(url=absolute, width=width, lazy=lazy)

        return list(candidates.values())[:limit]

    def collect_page_images(
        self,
        root: Union[BeautifulSoup, Tag],
        base_url: str,
        primary_image: Optional[str] = None,
        natural_width: Optional[NaturalWidth] = None,
    ) -> list[str]:
        """Collect content image URLs; see ``collect_image_candidates``."""
        return [
            candidate.url
            for candidate in self.collect_image_candidates(root, base_url, primary_image, natural_width)
        ]
