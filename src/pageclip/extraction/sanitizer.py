"""Boilerplate and hidden-node removal."""

import copy
import logging
from typing import Callable, Optional, Union

from bs4 import BeautifulSoup, Comment, Tag

from ..models.config import ExtractionConfig
from .protocols import ComputedStyle

logger = logging.getLogger(__name__)

StyleLookup = Callable[[Tag], Optional[ComputedStyle]]

ContentNode = Union[BeautifulSoup, Tag]


class Sanitizer:
    """
    Strips navigation, ads, scripts and hidden nodes from a content clone.

    The page itself is never touched: ``clean`` copies the node first and
    prunes the copy.

    Example:
        sanitizer = Sanitizer(style_of=page.computed_style)
        clean = sanitizer.clean(content_root)
    """

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        style_of: Optional[StyleLookup] = None,
    ):
        """
        Initialize the sanitizer.

        Args:
            config: Extraction settings (uses defaults if None)
            style_of: Computed-style lookup; None disables the visibility pass
        """
        self._config = config or ExtractionConfig()
        self._remove_selector = ", ".join(self._config.all_remove_selectors)
        self._style_of = style_of

    def clean(self, node: ContentNode) -> ContentNode:
        """
        Return a pruned clone of ``node``.

        Args:
            node: Located content root (left unmodified)

        Returns:
            Clone with boilerplate and hidden elements removed
        """
        clone = copy.copy(node)
        self._remove_boilerplate(clone)
        self._remove_hidden(clone)
        return clone

    def _remove_boilerplate(self, clone: ContentNode) -> None:
        removed = 0
        for element in clone.select(self._remove_selector):
            # A matched ancestor may already have taken this one with it
            if element.decomposed:
                continue
            element.decompose()
            removed += 1

        for comment in clone.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        logger.debug(f"Removed {removed} boilerplate elements")

    def _remove_hidden(self, clone: ContentNode) -> None:
        if self._style_of is None:
            return

        for element in clone.find_all(True):
            if element.decomposed:
                continue
            if self._is_hidden(element):
                element.decompose()

    def _is_hidden(self, element: Tag) -> bool:
        """Unavailable style counts as visible."""
        try:
            style = self._style_of(element) if self._style_of else None
        except Exception as e:
            logger.debug(f"Computed style unavailable for <{element.name}>: {e}")
            return False
        return style is not None and style.is_hidden
