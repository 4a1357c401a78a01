"""Request/response protocol between the clipper and the document store."""

import asyncio
import itertools
import logging
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)

Envelope = dict[str, Any]


class MessageType(str, Enum):
    """Message types understood by the page side and the store side."""

    # Page side
    PING = "PING"
    GET_PAGE_DATA = "GET_PAGE_DATA"

    # Store side
    THYMER_PING = "THYMER_PING"
    THYMER_GET_COLLECTIONS = "THYMER_GET_COLLECTIONS"
    THYMER_GET_COLLECTION_FIELDS = "THYMER_GET_COLLECTION_FIELDS"
    THYMER_SAVE_RECORD = "THYMER_SAVE_RECORD"


class BridgeTimeoutError(TimeoutError):
    """Raised to the caller when no response arrives before the timeout."""

    def __init__(self, message_id: str, timeout: float):
        super().__init__(f"No response to {message_id} within {timeout:g}s")
        self.message_id = message_id
        self.timeout = timeout


class RequestIdGenerator:
    """
    Monotonic message id source.

    Example:
        ids = RequestIdGenerator("stt")
        ids.next()  # "stt-1"
        ids.next()  # "stt-2"
    """

    def __init__(self, prefix: str = "stt"):
        self._prefix = prefix
        self._counter = itertools.count(1)

    def next(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


class PendingRequests:
    """
    Table of requests awaiting a response, keyed by message id.

    Each id is answered at most once: the first ``resolve`` wins and
    later responses for the same id are ignored. A request that times out
    is evicted and its waiter fails with BridgeTimeoutError.
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Future[Any]] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._pending

    def register(self, message_id: str) -> "asyncio.Future[Any]":
        """
        Register a new pending request.

        Args:
            message_id: Id of the outgoing request

        Returns:
            Future completed by ``resolve``

        Raises:
            ValueError: If the id is already pending
        """
        if message_id in self._pending:
            raise ValueError(f"Request {message_id} is already pending")
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[message_id] = future
        return future

    def resolve(self, message_id: str, response: Any) -> bool:
        """
        Deliver a response.

        Returns:
            True if a waiter received it, False for unknown or settled ids
        """
        future = self._pending.pop(message_id, None)
        if future is None or future.done():
            logger.debug(f"Dropping response for unknown request {message_id}")
            return False
        future.set_result(response)
        return True

    async def wait(self, message_id: str, future: "asyncio.Future[Any]", timeout: float) -> Any:
        """
        Wait for the response to a registered request.

        The entry is evicted whether the wait succeeds, times out or is
        cancelled.

        Args:
            message_id: Id passed to ``register``
            future: Future returned by ``register``
            timeout: Seconds to wait

        Raises:
            BridgeTimeoutError: If no response arrives in time
        """
        try:
            return await asyncio.wait_for(future, timeout)
        except asyncio.TimeoutError:
            raise BridgeTimeoutError(message_id, timeout) from None
        finally:
            self._pending.pop(message_id, None)

    def discard(self, message_id: str) -> bool:
        """Drop a request that will never be answered, cancelling its waiter."""
        future = self._pending.pop(message_id, None)
        if future is None:
            return False
        future.cancel()
        return True

    def cancel_all(self) -> int:
        """Cancel every pending request; returns how many were cancelled."""
        pending = list(self._pending.values())
        self._pending.clear()
        for future in pending:
            future.cancel()
        return len(pending)
