"""Page-side request handlers."""

import logging
from typing import Any, Callable, Optional

from ..extraction.page_data import PageDataExtractor
from ..extraction.protocols import PageAccessor
from .dispatcher import MessageDispatcher
from .protocol import Envelope, MessageType

logger = logging.getLogger(__name__)

PageProvider = Callable[[], PageAccessor]


def register_page_handlers(
    dispatcher: MessageDispatcher,
    get_page: PageProvider,
    extractor: Optional[PageDataExtractor] = None,
) -> MessageDispatcher:
    """
    Answer PING and GET_PAGE_DATA for the current page.

    Args:
        dispatcher: Dispatcher on the page side
        get_page: Returns a fresh snapshot of the page for each request
        extractor: Page data extractor (uses default if None)

    Returns:
        The dispatcher, for chaining
    """
    page_extractor = extractor or PageDataExtractor()

    async def ping(envelope: Envelope) -> dict[str, Any]:
        return {"pong": True}

    async def get_page_data(envelope: Envelope) -> dict[str, Any]:
        page = get_page()
        logger.debug(f"Extracting page data for {page.url}")
        return page_extractor.extract(page).to_dict()

    return dispatcher.register(MessageType.PING, ping).register(MessageType.GET_PAGE_DATA, get_page_data)
