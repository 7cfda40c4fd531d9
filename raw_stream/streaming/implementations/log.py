"""
Log channel: emits published messages through structlog.
"""

import structlog

from raw_stream.streaming.channel import DEFAULT_QUEUE_DEPTH, MessageHandler
from raw_stream.streaming.message import RawDataMessage

logger = structlog.get_logger()


class _LogPublisher:
    def __init__(self, channel: "LogChannel", topic: str) -> None:
        self._channel = channel
        self._topic = topic

    @property
    def topic(self) -> str:
        return self._topic

    def publish(self, message: RawDataMessage) -> None:
        self._channel.record_publish(self._topic, message)


class _LogSubscription:
    def __init__(self, topic: str) -> None:
        self._topic = topic

    @property
    def topic(self) -> str:
        return self._topic

    def cancel(self) -> None:
        pass


class LogChannel:
    """Publishes messages by logging their topic and size. Never delivers."""

    def __init__(self, level: str = "debug") -> None:
        self._level = level.lower()
        self._count = 0

    def _log(self, **kwargs: object) -> None:
        log_fn = getattr(logger, self._level, logger.debug)
        log_fn(**kwargs)

    def record_publish(self, topic: str, message: RawDataMessage) -> None:
        self._log(event="raw_data_published", topic=topic, size=len(message))
        self._count += 1

    def create_publisher(self, topic: str, depth: int = DEFAULT_QUEUE_DEPTH) -> _LogPublisher:
        self._log(event="publisher_created", topic=topic, depth=depth)
        return _LogPublisher(self, topic)

    def subscribe(
        self,
        topic: str,
        handler: MessageHandler,
        depth: int = DEFAULT_QUEUE_DEPTH,
    ) -> _LogSubscription:
        self._log(event="subscription_created", topic=topic, depth=depth)
        return _LogSubscription(topic)

    def close(self) -> None:
        pass

    @property
    def stats(self) -> dict[str, int]:
        return {"log_messages": self._count}
