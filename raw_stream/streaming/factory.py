"""
Factory for creating channel instances from configuration.
"""

from raw_stream.config.models import ChannelConfig
from raw_stream.streaming.channel import Channel


def create_channel(config: ChannelConfig) -> Channel:
    """
    Create a channel instance based on configuration.

    Args:
        config: Channel configuration

    Returns:
        A Channel implementation
    """
    backend = config.backend.lower()

    if backend == "memory":
        from raw_stream.streaming.implementations.memory import InMemoryChannel

        return InMemoryChannel()

    elif backend == "log":
        from raw_stream.streaming.implementations.log import LogChannel

        return LogChannel(level=config.log_level)

    else:
        # noop or unknown
        from raw_stream.streaming.implementations.noop import NoopChannel

        return NoopChannel()
