"""
Exception types for the raw data stream relay.
"""


class RawStreamError(Exception):
    """Base class for all raw stream errors."""

    pass


class StreamModeError(RawStreamError):
    """Raised when an entry point is called in the wrong operating mode."""

    pass


class ConfigurationError(RawStreamError):
    """Raised when configuration is invalid."""

    pass
