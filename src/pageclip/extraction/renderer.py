"""DOM subtree to Markdown rendering."""

import logging
import re
from typing import Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

from ..models.config import RenderConfig
from .images import ImageRankingResolver
from .urls import resolve_url

logger = logging.getLogger(__name__)

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}

# Elements that render even without children
VOID_TAGS = {"img", "br", "hr"}

_WHITESPACE_RE = re.compile(r"\s+")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_LANGUAGE_CLASS_RE = re.compile(r"language-(\w+)")


class MarkdownRenderer:
    """
    Renders a sanitized DOM subtree to Markdown.

    Children are rendered before their parent and concatenated without
    separators; block elements supply their own newlines. Traversal uses
    an explicit stack so deeply nested documents cannot exhaust the
    interpreter's recursion limit.

    Example:
        renderer = MarkdownRenderer("https://blog.example.com/post")
        markdown = renderer.render(clean_content)
    """

    def __init__(
        self,
        base_url: str,
        resolver: Optional[ImageRankingResolver] = None,
        config: Optional[RenderConfig] = None,
    ):
        """
        Initialize the renderer.

        Args:
            base_url: Base URL for resolving relative links and images
            resolver: Image source resolver (uses default if None)
            config: Render settings (uses defaults if None)
        """
        self._base_url = base_url
        self._resolver = resolver or ImageRankingResolver()
        self._config = config or RenderConfig()

    def render(self, node: Union[BeautifulSoup, Tag]) -> str:
        """
        Render a subtree to Markdown.

        Args:
            node: Sanitized content root

        Returns:
            Markdown with at most two consecutive newlines, trimmed and
            truncated to the configured maximum length
        """
        markdown = self._render_tree(node)
        markdown = _EXCESS_NEWLINES_RE.sub("\n\n", markdown).strip()
        if len(markdown) > self._config.max_length:
            logger.debug(f"Truncating Markdown from {len(markdown)} to {self._config.max_length} characters")
            markdown = markdown[: self._config.max_length]
        return markdown

    def _render_tree(self, root: PageElement) -> str:
        rendered: dict[int, str] = {}
        # Concatenated child output per element, needed again by list parents
        inner: dict[int, str] = {}

        stack: list[tuple[PageElement, bool]] = [(root, False)]
        while stack:
            node, expanded = stack.pop()

            if isinstance(node, NavigableString):
                rendered[id(node)] = self._render_text(node)
                continue
            if not isinstance(node, Tag):
                continue

            if not expanded:
                stack.append((node, True))
                for child in reversed(node.contents):
                    stack.append((child, False))
                continue

            children = "".join(rendered.pop(id(child), "") for child in node.contents)
            inner[id(node)] = children
            rendered[id(node)] = self._render_element(node, children, inner)

        return rendered.get(id(root), "")

    @staticmethod
    def _render_text(text: NavigableString) -> str:
        # Comments, doctypes and CDATA carry no visible text
        if isinstance(text, PreformattedString):
            return ""
        return _WHITESPACE_RE.sub(" ", str(text)).strip()

    def _render_element(self, tag: Tag, children: str, inner: dict[int, str]) -> str:
        name = (tag.name or "").lower()

        if not children and name not in VOID_TAGS:
            return ""

        if name in HEADING_TAGS:
            level = int(name[1])
            return f"\n{'#' * level} {children.strip()}\n\n"
        if name == "p":
            return children.strip() + "\n\n"
        if name == "br":
            return "\n"
        if name == "hr":
            return "\n---\n\n"
        if name in ("strong", "b"):
            return f"**{children}**"
        if name in ("em", "i"):
            return f"*{children}*"
        if name == "code":
            return f"`{children}`"
        if name == "pre":
            return self._render_pre(tag)
        if name == "blockquote":
            return "\n> " + children.strip().replace("\n", "\n> ") + "\n\n"
        if name == "a":
            return self._render_link(tag, children)
        if name == "img":
            return self._render_image(tag)
        if name == "ul":
            return self._render_list(tag, inner, ordered=False)
        if name == "ol":
            return self._render_list(tag, inner, ordered=True)
        if name == "figcaption":
            return f"*{children.strip()}*\n\n"

        # li, figure and everything else pass their children through
        return children

    @staticmethod
    def _render_pre(tag: Tag) -> str:
        """Fenced block from the raw text; rendered children are ignored."""
        language = ""
        code = tag.find("code")
        if isinstance(code, Tag):
            classes = code.get("class") or []
            if isinstance(classes, str):
                classes = classes.split()
            match = _LANGUAGE_CLASS_RE.search(" ".join(classes))
            if match:
                language = match.group(1)

        return f"\n```{language}\n{tag.get_text().strip()}\n```\n\n"

    def _render_link(self, tag: Tag, children: str) -> str:
        href = str(tag.get("href") or "").strip()
        if href and not href.startswith("#") and not href.lower().startswith("javascript:"):
            absolute = resolve_url(self._base_url, href)
            if absolute:
                return f"[{children}]({absolute})"
        return children

    def _render_image(self, tag: Tag) -> str:
        src = self._resolver.best_src(tag)
        if not src or self._resolver.is_placeholder(src):
            return ""

        absolute = resolve_url(self._base_url, src)
        if absolute is None:
            return ""

        alt = str(tag.get("alt") or "")
        return f"![{alt}]({absolute})\n\n"

    @staticmethod
    def _render_list(tag: Tag, inner: dict[int, str], ordered: bool) -> str:
        items = [child for child in tag.children if isinstance(child, Tag)]
        lines = []
        for index, item in enumerate(items, start=1):
            prefix = f"{index}. " if ordered else "- "
            lines.append(prefix + inner.get(id(item), "").strip())
        return "\n" + "\n".join(lines) + "\n\n"
