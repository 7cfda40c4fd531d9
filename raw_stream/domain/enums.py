"""
Enumeration types for the raw data stream relay.
"""

from enum import Enum


class StreamMode(str, Enum):
    """
    Operating mode of a session, fixed at construction.

    PRODUCER: bytes originate locally from a device callback.
    RELAY: bytes originate from a subscribed channel.
    """
    PRODUCER = "producer"
    RELAY = "relay"


class SessionState(str, Enum):
    """Lifecycle state of a session."""
    UNINITIALIZED = "uninitialized"
    WIRED = "wired"          # Channel and file resolved
    ACTIVE = "active"        # At least one chunk dispatched
    CLOSED = "closed"
