"""Main content location."""

import logging
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from ..models.config import ExtractionConfig

logger = logging.getLogger(__name__)

DENSITY_CANDIDATE_TAGS = ["div", "section"]


class ContentLocator:
    """
    Finds the subtree holding a page's primary content.

    Tries the configured content selectors first; a match only counts if
    it carries a meaningful amount of text. Otherwise scores every
    div/section outside navigation landmarks by text density and falls
    back to <body>. Never returns None and never mutates the page.

    Example:
        locator = ContentLocator()
        content = locator.locate(soup)
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """
        Initialize the locator.

        Args:
            config: Extraction settings (uses defaults if None)
        """
        self._config = config or ExtractionConfig()

    def locate(self, root: Union[BeautifulSoup, Tag]) -> Tag:
        """
        Locate the content root.

        Args:
            root: Document root

        Returns:
            The content element, <body>, or ``root`` itself
        """
        match = self._find_by_selectors(root)
        if match is not None:
            return match

        match = self._find_by_text_density(root)
        if match is not None:
            logger.debug(f"Content located by text density: <{match.name}>")
            return match

        body = root.find("body")
        if isinstance(body, Tag):
            return body
        return root

    def _find_by_selectors(self, root: Union[BeautifulSoup, Tag]) -> Optional[Tag]:
        for selector in self._config.content_selectors:
            element = root.select_one(selector)
            if element is not None and len(element.get_text().strip()) > self._config.min_selector_text:
                logger.debug(f"Content located by selector {selector!r}")
                return element
        return None

    def _find_by_text_density(self, root: Union[BeautifulSoup, Tag]) -> Optional[Tag]:
        """Score blocks by text / (links + 1) * paragraphs; strict improvement wins."""
        best: Optional[Tag] = None
        best_score = 0.0

        for element in root.find_all(DENSITY_CANDIDATE_TAGS):
            if element.css.closest(self._config.density_exclude) is not None:
                continue

            paragraphs = len(element.find_all("p"))
            if paragraphs < self._config.density_min_paragraphs:
                continue

            text_length = len(element.get_text())
            if text_length <= self._config.density_min_text:
                continue

            links = len(element.find_all("a"))
            score = text_length / (links + 1) * paragraphs
            if score > best_score:
                best = element
                best_score = score

        return best
