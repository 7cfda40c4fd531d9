"""
In-memory channel: in-process publish/subscribe.
"""

from collections import deque

from raw_stream.streaming.channel import DEFAULT_QUEUE_DEPTH, MessageHandler
from raw_stream.streaming.message import RawDataMessage


class InMemoryPublisher:
    """Publisher handle bound to one topic of an InMemoryChannel."""

    def __init__(self, channel: "InMemoryChannel", topic: str, depth: int) -> None:
        self._channel = channel
        self._topic = topic
        self._depth = depth

    @property
    def topic(self) -> str:
        return self._topic

    def publish(self, message: RawDataMessage) -> None:
        self._channel.deliver(self._topic, message)


class InMemorySubscription:
    """
    A receive handler with its own bounded queue.

    When the queue is full the oldest pending message is dropped.
    """

    def __init__(self, topic: str, handler: MessageHandler, depth: int) -> None:
        self._topic = topic
        self._handler = handler
        self._queue: deque[RawDataMessage] = deque(maxlen=depth)
        self._active = True
        self.dropped = 0

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def pending(self) -> int:
        return len(self._queue)

    def enqueue(self, message: RawDataMessage) -> None:
        if not self._active:
            return
        if len(self._queue) == self._queue.maxlen:
            self.dropped += 1
        self._queue.append(message)

    def dispatch_one(self) -> bool:
        """Invoke the handler for the oldest pending message, if any."""
        if not self._active or not self._queue:
            return False
        self._handler(self._queue.popleft())
        return True

    def cancel(self) -> None:
        self._active = False
        self._queue.clear()


class InMemoryChannel:
    """
    Delivers published messages to in-process subscriptions.

    Delivery is queued; ``spin_once``/``spin`` run handlers on the caller's
    thread, one message at a time, the way a host event loop would.
    With ``capture=True`` every published message is also kept for
    inspection; leave it off outside tests, the capture is unbounded.

    NOT thread-safe - intended for single-threaded use.
    """

    def __init__(self, capture: bool = False) -> None:
        self._capture = capture
        self._subscriptions: dict[str, list[InMemorySubscription]] = {}
        self._publishers: dict[str, InMemoryPublisher] = {}
        self._published: list[tuple[str, RawDataMessage]] = []
        self._publish_count = 0
        self._dispatch_count = 0

    def create_publisher(self, topic: str, depth: int = DEFAULT_QUEUE_DEPTH) -> InMemoryPublisher:
        publisher = InMemoryPublisher(self, topic, depth)
        self._publishers[topic] = publisher
        return publisher

    def subscribe(
        self,
        topic: str,
        handler: MessageHandler,
        depth: int = DEFAULT_QUEUE_DEPTH,
    ) -> InMemorySubscription:
        subscription = InMemorySubscription(topic, handler, depth)
        self._subscriptions.setdefault(topic, []).append(subscription)
        return subscription

    def deliver(self, topic: str, message: RawDataMessage) -> None:
        """Queue a message for every subscription on ``topic``."""
        self._publish_count += 1
        if self._capture:
            self._published.append((topic, message))
        for subscription in self._subscriptions.get(topic, []):
            subscription.enqueue(message)

    def spin_once(self) -> bool:
        """
        Dispatch at most one pending message per subscription.

        Returns:
            True if any handler ran
        """
        ran = False
        for subscriptions in self._subscriptions.values():
            for subscription in subscriptions:
                if subscription.dispatch_one():
                    self._dispatch_count += 1
                    ran = True
        return ran

    def spin(self) -> int:
        """Dispatch until no messages are pending. Returns handlers run."""
        before = self._dispatch_count
        while self.spin_once():
            pass
        return self._dispatch_count - before

    def close(self) -> None:
        for subscriptions in self._subscriptions.values():
            for subscription in subscriptions:
                subscription.cancel()
        self._subscriptions.clear()
        self._publishers.clear()

    @property
    def stats(self) -> dict[str, int]:
        return {
            "published": self._publish_count,
            "dispatched": self._dispatch_count,
            "dropped": sum(
                s.dropped for subs in self._subscriptions.values() for s in subs
            ),
            "subscriptions": sum(len(subs) for subs in self._subscriptions.values()),
        }

    # ---- Test helpers ----

    @property
    def published(self) -> list[tuple[str, RawDataMessage]]:
        """Captured (topic, message) pairs; empty unless capture is on."""
        return list(self._published)

    def get_messages_for_topic(self, topic: str) -> list[RawDataMessage]:
        """Get all messages published on a specific topic."""
        return [m for t, m in self._published if t == topic]

    def clear(self) -> None:
        """Clear captured messages."""
        self._published.clear()
