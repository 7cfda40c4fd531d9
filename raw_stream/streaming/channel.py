"""
Core channel abstractions: the Channel protocol and its handles.

The channel is the external publish/subscribe transport. Sessions only ever
see these protocols, so any transport with deliver/receive semantics can be
plugged in.
"""

from typing import Callable, Protocol, runtime_checkable

from raw_stream.streaming.message import RawDataMessage

MessageHandler = Callable[[RawDataMessage], None]

DEFAULT_QUEUE_DEPTH = 100


@runtime_checkable
class Publisher(Protocol):
    """Handle for publishing on one topic."""

    @property
    def topic(self) -> str:
        """Fully resolved topic name."""
        ...

    def publish(self, message: RawDataMessage) -> None:
        """Publish a single message."""
        ...


@runtime_checkable
class Subscription(Protocol):
    """Handle for a registered receive handler."""

    @property
    def topic(self) -> str:
        """Fully resolved topic name."""
        ...

    def cancel(self) -> None:
        """Stop delivering messages to the handler."""
        ...


@runtime_checkable
class Channel(Protocol):
    """Protocol for channel backends."""

    def create_publisher(self, topic: str, depth: int = DEFAULT_QUEUE_DEPTH) -> Publisher:
        """Announce intent to publish on a topic."""
        ...

    def subscribe(
        self,
        topic: str,
        handler: MessageHandler,
        depth: int = DEFAULT_QUEUE_DEPTH,
    ) -> Subscription:
        """Register a receive handler on a topic."""
        ...

    def close(self) -> None:
        """Close the channel and release resources."""
        ...

    @property
    def stats(self) -> dict[str, int]:
        """Return channel statistics."""
        ...
