"""URL helpers shared by the renderer and image collection."""

import logging
from typing import Optional
from urllib.parse import urljoin, urlparse

logger = logging.getLogger(__name__)


def is_data_uri(url: Optional[str]) -> bool:
    """Return True for inline ``data:`` URIs."""
    if not url:
        return False
    return url.strip().lower().startswith("data:")


def resolve_url(base_url: str, reference: str) -> Optional[str]:
    """
    Resolve a reference against the page base URL.

    Handles absolute, relative and protocol-relative references.

    Args:
        base_url: Page base URL
        reference: href/src as written in the page

    Returns:
        Absolute URL, or None when the reference cannot be resolved
    """
    reference = reference.strip()
    if not reference:
        return None

    try:
        absolute = urljoin(base_url, reference)
        parsed = urlparse(absolute)
    except ValueError as e:
        logger.debug(f"Could not resolve {reference!r} against {base_url!r}: {e}")
        return None

    if not parsed.scheme:
        return None
    if parsed.scheme in ("http", "https") and not parsed.netloc:
        return None
    return absolute
