"""Requesting side of the bridge."""

import logging
from types import TracebackType
from typing import Any, Optional, Union

from ..models.config import BridgeConfig
from .channel import MessageChannel
from .protocol import Envelope, MessageType, PendingRequests, RequestIdGenerator

logger = logging.getLogger(__name__)


class BridgeClient:
    """
    Sends typed requests over a channel and awaits correlated responses.

    Each request gets a fresh id; the response envelope carrying that id
    completes the request. Requests without a response in time fail with
    BridgeTimeoutError and are evicted.

    Example:
        async with BridgeClient(channel) as client:
            if await client.ping():
                collections = await client.get_collections()
    """

    def __init__(self, channel: MessageChannel, config: Optional[BridgeConfig] = None):
        """
        Initialize the client.

        Args:
            channel: Channel shared with the responding side
            config: Bridge settings (uses defaults if None)
        """
        self._channel = channel
        self._config = config or BridgeConfig()
        self._ids = RequestIdGenerator(self._config.id_prefix)
        self._pending = PendingRequests()
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def install(self) -> None:
        """Start listening for responses. Calling twice is a no-op."""
        if self._installed:
            return
        self._channel.add_listener(self._on_message)
        self._installed = True

    def uninstall(self) -> None:
        """Stop listening and fail every outstanding request."""
        if not self._installed:
            return
        self._channel.remove_listener(self._on_message)
        self._installed = False
        cancelled = self._pending.cancel_all()
        if cancelled:
            logger.warning(f"Cancelled {cancelled} pending bridge requests")

    async def __aenter__(self) -> "BridgeClient":
        self.install()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.uninstall()

    def _on_message(self, envelope: Envelope) -> None:
        if envelope.get("source") != self._config.response_source:
            return
        message_id = envelope.get("messageId")
        if isinstance(message_id, str):
            self._pending.resolve(message_id, envelope.get("response"))

    async def request(
        self,
        message_type: Union[MessageType, str],
        payload: Optional[dict[str, Any]] = None,
        collection_guid: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Send a request and wait for its response.

        Args:
            message_type: Type of the request
            payload: Optional request payload
            collection_guid: Optional collection the request targets
            timeout: Seconds to wait (defaults to the configured timeout)

        Returns:
            The response body

        Raises:
            BridgeTimeoutError: If no response arrives in time
            RuntimeError: If the client is not installed
            ValueError: If the message type is unknown
        """
        if not self._installed:
            raise RuntimeError("BridgeClient is not installed")

        type_value = MessageType(message_type).value
        message_id = self._ids.next()
        future = self._pending.register(message_id)
        try:
            self._channel.post(
                {
                    "type": type_value,
                    "messageId": message_id,
                    "payload": payload,
                    "collectionGuid": collection_guid,
                    "source": self._config.request_source,
                }
            )
        except Exception:
            self._pending.discard(message_id)
            raise
        logger.debug(f"Sent {type_value} as {message_id}")
        return await self._pending.wait(message_id, future, timeout or self._config.timeout)

    async def ping(self) -> bool:
        """Return True if the store side answers a ping."""
        response = await self.request(MessageType.THYMER_PING)
        return bool(isinstance(response, dict) and response.get("connected"))

    async def get_collections(self) -> list[dict[str, Any]]:
        response = await self.request(MessageType.THYMER_GET_COLLECTIONS)
        return list((response or {}).get("collections") or [])

    async def get_fields(self, collection_guid: str) -> list[dict[str, Any]]:
        response = await self.request(MessageType.THYMER_GET_COLLECTION_FIELDS, collection_guid=collection_guid)
        return list((response or {}).get("fields") or [])

    async def save_record(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Ask the store side to save a clipped record.

        Raises:
            RuntimeError: If the store side reports an error
        """
        response = await self.request(MessageType.THYMER_SAVE_RECORD, payload=payload)
        if not isinstance(response, dict) or not response.get("success"):
            error = response.get("error") if isinstance(response, dict) else None
            raise RuntimeError(error or "Failed to save record")
        return response
