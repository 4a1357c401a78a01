"""Page accessor backed by a BeautifulSoup document."""

import logging
import re
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from .protocols import ComputedStyle
from .urls import resolve_url

logger = logging.getLogger(__name__)

_STYLE_DECLARATION_RE = re.compile(r"(?:^|;)\s*(display|visibility)\s*:\s*([a-zA-Z-]+)", re.IGNORECASE)
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


class SoupPage:
    """
    Read-only page snapshot over static HTML.

    Without a browser there is no layout engine, so computed style is
    approximated from inline ``style`` attributes and natural image width
    from the ``width`` attribute (or an explicit override map).

    Example:
        page = SoupPage(html_bytes, "https://blog.example.com/post")
        markdown = MarkdownRenderer(page.base_url).render(page.root)
    """

    def __init__(
        self,
        html: Union[bytes, str, BeautifulSoup],
        url: str,
        natural_widths: Optional[dict[str, int]] = None,
    ):
        """
        Initialize the page.

        Args:
            html: Raw HTML bytes, decoded HTML, or an already parsed document
            url: URL the page was loaded from
            natural_widths: Optional map of image src to measured pixel width
        """
        if isinstance(html, BeautifulSoup):
            self._soup = html
        else:
            self._soup = self._parse_html(html)
        self._url = url
        self._natural_widths = dict(natural_widths or {})
        self._base_url = self._find_base_url()

    @staticmethod
    def _detect_encoding(html: bytes) -> str:
        """Detect character encoding from HTML content."""
        head = html[:2048].decode("latin-1", errors="ignore")
        charset_match = re.search(r'charset=["\']?([^"\'\s>;]+)', head, re.IGNORECASE)
        if charset_match:
            return charset_match.group(1).strip()
        return "utf-8"

    def _parse_html(self, html: Union[bytes, str]) -> BeautifulSoup:
        if isinstance(html, bytes):
            encoding = self._detect_encoding(html)
            try:
                text = html.decode(encoding, errors="replace")
            except LookupError:
                logger.debug(f"Unknown charset {encoding!r}, falling back to utf-8")
                text = html.decode("utf-8", errors="replace")
        else:
            text = html
        return BeautifulSoup(text, "html.parser")

    def _find_base_url(self) -> str:
        """Honor <base href> the way a browser computes document.baseURI."""
        base = self._soup.find("base", href=True)
        if isinstance(base, Tag):
            resolved = resolve_url(self._url, str(base["href"]))
            if resolved:
                return resolved
        return self._url

    @property
    def root(self) -> BeautifulSoup:
        return self._soup

    @property
    def url(self) -> str:
        return self._url

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def title(self) -> str:
        title = self._soup.find("title")
        if isinstance(title, Tag):
            return title.get_text(strip=True)
        return ""

    def get_meta(self, name: str) -> Optional[str]:
        for meta in self._soup.find_all("meta"):
            if meta.get("property") == name or meta.get("name") == name:
                content = str(meta.get("content") or "").strip()
                return content or None
        return None

    def computed_style(self, tag: Tag) -> Optional[ComputedStyle]:
        style = tag.get("style")
        if not style:
            return ComputedStyle()

        declarations = {
            prop.lower(): value.lower() for prop, value in _STYLE_DECLARATION_RE.findall(str(style))
        }
        return ComputedStyle(
            display=declarations.get("display"),
            visibility=declarations.get("visibility"),
        )

    def natural_width(self, img: Tag) -> Optional[int]:
        src = img.get("src")
        if src and str(src) in self._natural_widths:
            return self._natural_widths[str(src)]

        width = img.get("width")
        if width:
            match = _LEADING_INT_RE.match(str(width))
            if match:
                return int(match.group(1))
        return None
