"""Id-correlated request/response messaging between clipper and store."""

from .channel import InMemoryChannel, MessageChannel
from .client import BridgeClient
from .dispatcher import MessageDispatcher
from .handlers import register_page_handlers
from .protocol import (
    BridgeTimeoutError,
    Envelope,
    MessageType,
    PendingRequests,
    RequestIdGenerator,
)

__all__ = [
    # Protocol
    "BridgeTimeoutError",
    "Envelope",
    "MessageType",
    "PendingRequests",
    "RequestIdGenerator",
    # Channels
    "InMemoryChannel",
    "MessageChannel",
    # Endpoints
    "BridgeClient",
    "MessageDispatcher",
    "register_page_handlers",
]
