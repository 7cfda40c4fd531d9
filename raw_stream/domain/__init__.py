"""
Domain types for the raw data stream relay.
"""

from raw_stream.domain.chunk import RawChunk
from raw_stream.domain.enums import SessionState, StreamMode

__all__ = [
    "RawChunk",
    "SessionState",
    "StreamMode",
]
