"""
Core session component for the raw data stream relay.
"""

from raw_stream.core.session import (
    PUBLISH_TOPIC,
    SUBSCRIBE_TOPIC,
    RawDataStreamSession,
)

__all__ = [
    "PUBLISH_TOPIC",
    "SUBSCRIBE_TOPIC",
    "RawDataStreamSession",
]
