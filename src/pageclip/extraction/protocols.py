"""Protocol definitions for page access."""

from dataclasses import dataclass
from typing import Optional, Protocol, Union

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True)
class ComputedStyle:
    """The subset of a node's computed style the sanitizer looks at."""

    display: Optional[str] = None
    visibility: Optional[str] = None

    @property
    def is_hidden(self) -> bool:
        return self.display == "none" or self.visibility == "hidden"


class PageAccessor(Protocol):
    """
    Protocol for a read-only snapshot of a rendered page.

    Implementations expose the DOM tree plus the bits of browser state
    (computed style, image dimensions, base URL) that extraction needs.
    The tree returned by ``root`` must never be mutated by callers.
    """

    @property
    def root(self) -> Union[BeautifulSoup, Tag]:
        """Document root."""
        ...

    @property
    def url(self) -> str:
        """URL the page was loaded from."""
        ...

    @property
    def base_url(self) -> str:
        """URL used to resolve relative links and images."""
        ...

    @property
    def title(self) -> str:
        """Document title, or an empty string."""
        ...

    def get_meta(self, name: str) -> Optional[str]:
        """
        Look up a meta tag by ``property`` or ``name``.

        Args:
            name: Property or name, e.g. "og:image" or "description"

        Returns:
            The tag's content, or None when absent or empty
        """
        ...

    def computed_style(self, tag: Tag) -> Optional[ComputedStyle]:
        """
        Return the computed style of an element.

        Returns:
            ComputedStyle, or None when style information is unavailable
        """
        ...

    def natural_width(self, img: Tag) -> Optional[int]:
        """
        Return the natural pixel width of an image element.

        Returns:
            Width in pixels, or None/0 when the image has not loaded
        """
        ...
