"""
No-op channel: discards all messages silently.
"""

from raw_stream.streaming.channel import DEFAULT_QUEUE_DEPTH, MessageHandler
from raw_stream.streaming.message import RawDataMessage


class _NoopHandle:
    def __init__(self, topic: str) -> None:
        self._topic = topic

    @property
    def topic(self) -> str:
        return self._topic

    def publish(self, message: RawDataMessage) -> None:
        pass

    def cancel(self) -> None:
        pass


class NoopChannel:
    """Channel that discards all messages. Used when no transport is configured."""

    def create_publisher(self, topic: str, depth: int = DEFAULT_QUEUE_DEPTH) -> _NoopHandle:
        return _NoopHandle(topic)

    def subscribe(
        self,
        topic: str,
        handler: MessageHandler,
        depth: int = DEFAULT_QUEUE_DEPTH,
    ) -> _NoopHandle:
        return _NoopHandle(topic)

    def close(self) -> None:
        pass

    @property
    def stats(self) -> dict[str, int]:
        return {}
