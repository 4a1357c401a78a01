"""Message channels carrying bridge envelopes."""

import logging
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

Listener = Callable[[dict[str, Any]], None]


class MessageChannel(Protocol):
    """
    Protocol for a broadcast channel between two runtime contexts.

    Every posted envelope is delivered to every listener, including
    listeners on the posting side; receivers filter by ``source``.
    """

    def post(self, envelope: dict[str, Any]) -> None:
        """Broadcast an envelope."""
        ...

    def add_listener(self, listener: Listener) -> None:
        """Subscribe to envelopes."""
        ...

    def remove_listener(self, listener: Listener) -> None:
        """Unsubscribe; unknown listeners are ignored."""
        ...


class InMemoryChannel:
    """
    Synchronous in-process channel.

    Useful for running both sides of the bridge in one process (tests,
    local tooling). Envelopes are delivered in listener registration order.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self.posted: list[dict[str, Any]] = []

    def post(self, envelope: dict[str, Any]) -> None:
        self.posted.append(envelope)
        for listener in list(self._listeners):
            try:
                listener(envelope)
            except Exception as e:
                logger.error(f"Listener failed for {envelope.get('messageId')}: {e}")

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
