"""
Channel package for the raw data stream relay.

Provides the channel message codec, the Channel protocol and in-process
backends (memory, log, noop) used to publish and receive raw chunks.
"""
