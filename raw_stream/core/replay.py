"""
Feeding recorded byte streams into sessions.

Used by the CLI to drive a producer session from a capture file (standing in
for the device callback) and to replay a capture over a channel into a relay
session.
"""

from typing import BinaryIO, Iterator

import structlog

from raw_stream.core.session import SUBSCRIBE_TOPIC, RawDataStreamSession
from raw_stream.streaming.implementations.memory import InMemoryChannel
from raw_stream.streaming.message import encode_chunk

logger = structlog.get_logger()

DEFAULT_CHUNK_SIZE = 4096


def iter_chunks(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Yield successive reads of at most ``chunk_size`` bytes until EOF.

    Raises:
        ValueError: If chunk_size is not positive
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    while True:
        data = stream.read(chunk_size)
        if not data:
            return
        yield data


def feed_device(
    session: RawDataStreamSession,
    stream: BinaryIO,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """
    Drive a producer session as if ``stream`` were the device.

    Returns:
        Number of bytes delivered to the session
    """
    total = 0
    for data in iter_chunks(stream, chunk_size):
        session.on_device_data(data, len(data))
        total += len(data)
    logger.info("device_stream_finished", bytes=total, **session.stats)
    return total


def replay_over_channel(
    session: RawDataStreamSession,
    channel: InMemoryChannel,
    stream: BinaryIO,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    topic: str = SUBSCRIBE_TOPIC,
) -> int:
    """
    Publish ``stream`` on ``topic`` and deliver it to a relay session.

    Messages are dispatched after each publish so the subscription queue
    never overflows.

    Returns:
        Number of bytes published
    """
    publisher = channel.create_publisher(topic)
    total = 0
    for data in iter_chunks(stream, chunk_size):
        publisher.publish(encode_chunk(data))
        channel.spin()
        total += len(data)
    logger.info("channel_replay_finished", bytes=total, topic=topic, **session.stats)
    return total
