"""Responding side of the bridge."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from ..models.config import BridgeConfig
from .channel import MessageChannel
from .protocol import Envelope, MessageType

logger = logging.getLogger(__name__)

Handler = Callable[[Envelope], Awaitable[Any]]

UNKNOWN_TYPE_RESPONSE = {"error": "Unknown message type"}


class MessageDispatcher:
    """
    Routes request envelopes to one handler per message type.

    Every request gets exactly one response envelope echoing its id.
    Unknown types and failing handlers answer with ``{"error": ...}``.

    Example:
        dispatcher = MessageDispatcher(channel)
        dispatcher.register(MessageType.THYMER_PING, ping_handler)
        dispatcher.install()
    """

    def __init__(self, channel: MessageChannel, config: Optional[BridgeConfig] = None):
        """
        Initialize the dispatcher.

        Args:
            channel: Channel shared with the requesting side
            config: Bridge settings (uses defaults if None)
        """
        self._channel = channel
        self._config = config or BridgeConfig()
        self._handlers: dict[str, Handler] = {}
        self._tasks: set[asyncio.Task[Any]] = set()
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def register(self, message_type: Union[MessageType, str], handler: Handler) -> "MessageDispatcher":
        """
        Register the handler for a message type (fluent API).

        Args:
            message_type: Type to handle
            handler: Coroutine function receiving the request envelope

        Returns:
            Self for chaining
        """
        self._handlers[MessageType(message_type).value] = handler
        return self

    def install(self) -> None:
        """Start answering requests. Calling twice is a no-op."""
        if self._installed:
            return
        self._channel.add_listener(self._on_message)
        self._installed = True

    def uninstall(self) -> None:
        if not self._installed:
            return
        self._channel.remove_listener(self._on_message)
        self._installed = False

    async def drain(self) -> None:
        """Wait for requests currently being handled."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_message(self, envelope: Envelope) -> None:
        if envelope.get("source") != self._config.request_source:
            return
        task = asyncio.get_running_loop().create_task(self.handle(envelope))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def handle(self, envelope: Envelope) -> Envelope:
        """
        Handle one request envelope and post the response.

        Args:
            envelope: Request envelope

        Returns:
            The posted response envelope
        """
        message_type = envelope.get("type")
        handler = self._handlers.get(str(message_type))

        if handler is None:
            response: Any = dict(UNKNOWN_TYPE_RESPONSE)
        else:
            try:
                response = await handler(envelope)
            except Exception as e:
                logger.error(f"Handler for {message_type} failed: {e}")
                response = {"error": str(e)}

        reply = {
            "messageId": envelope.get("messageId"),
            "response": response,
            "source": self._config.response_source,
        }
        self._channel.post(reply)
        return reply
